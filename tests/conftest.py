"""Pytest configuration and fixtures."""

import pytest

from quickchart_mcp.config import Config
from quickchart_mcp.mcp.protocol import MCPDispatcher
from quickchart_mcp.mcp.servers.srv_quickchart import QuickChartServer


@pytest.fixture
def settings():
    """Provide settings with the public QuickChart endpoints."""
    return Config()


@pytest.fixture
def server(settings):
    return QuickChartServer(settings)


@pytest.fixture
def dispatcher(server):
    return MCPDispatcher(server)


@pytest.fixture
def bar_args():
    """A minimal valid bar chart request."""
    return {
        "type": "bar",
        "labels": ["Q1", "Q2", "Q3"],
        "datasets": [{"label": "Revenue", "data": [10, 20, 30]}],
    }
