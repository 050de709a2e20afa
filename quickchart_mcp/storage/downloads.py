import asyncio
import errno
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from quickchart_mcp.config import Config
from quickchart_mcp.core.builder import build
from quickchart_mcp.core.encoder import encode
from quickchart_mcp.core.errors import InvalidParams
from quickchart_mcp.core.validator import validate
from quickchart_mcp.observability.logger import logger

# fields that may be nested under "data" instead of sitting at the top level
LIFTED_FIELDS = ("datasets", "labels", "type")


def normalize_config(config: Any) -> Dict[str, Any]:
    """Lift type/datasets/labels out of a nested data object

    A top-level field always wins over its nested counterpart.
    """
    if not config or not isinstance(config, dict):
        raise InvalidParams("Config must be a valid chart configuration object")

    normalized = dict(config)
    nested = config.get("data")
    if isinstance(nested, dict):
        for field in LIFTED_FIELDS:
            if normalized.get(field) is None and nested.get(field) is not None:
                normalized[field] = nested[field]

    if not normalized.get("type") or normalized.get("datasets") is None:
        raise InvalidParams(
            "Config must include type and datasets properties (either at root level or inside data object)"
        )
    return normalized


def chart_filename(chart_type: str, now: datetime = None) -> str:
    """<type>_<YYYY-MM-DD_HH-MM-SS>.png from the current UTC time"""
    now = now or datetime.now(timezone.utc)
    return f"{chart_type or 'chart'}_{now.strftime('%Y-%m-%d_%H-%M-%S')}.png"


def is_writable_dir(path: Path) -> bool:
    return path.is_dir() and os.access(path, os.W_OK)


class ChartDownloader:
    def __init__(self, settings: Config, client: httpx.AsyncClient = None,
                 home: Path = None):
        self.settings = settings
        self.client = client
        self.home = Path(home) if home else None

    def default_output_dir(self) -> Path:
        """Desktop when it is writable, otherwise the home directory"""
        home = self.home or Path.home()
        desktop = home / "Desktop"
        if is_writable_dir(desktop):
            return desktop
        logger.warning("desktop_not_writable", desktop=str(desktop), fallback=str(home))
        return home

    def resolve_output_path(self, chart_type: str, output_path: Optional[str] = None) -> Path:
        if output_path:
            return Path(output_path).expanduser()
        path = self.default_output_dir() / chart_filename(chart_type)
        logger.info("default_output_path", path=str(path))
        return path

    def ensure_writable_dir(self, directory: Path):
        if not is_writable_dir(directory):
            raise InvalidParams(f"Output directory does not exist or is not writable: {directory}")

    async def fetch(self, url: str) -> bytes:
        """GET the rendered image"""
        if self.client is not None:
            response = await self.client.get(url)
        else:
            async with httpx.AsyncClient(timeout=self.settings.timeout_seconds,
                                         follow_redirects=True) as client:
                response = await client.get(url)
        response.raise_for_status()
        return response.content

    async def write(self, path: Path, content: bytes):
        """Write image bytes, turning caller-fixable OS errors into InvalidParams"""
        try:
            await asyncio.to_thread(path.write_bytes, content)
        except PermissionError:
            raise InvalidParams(f"Cannot write to {path}: Permission denied")
        except FileNotFoundError:
            raise InvalidParams(f"Cannot write to {path}: Directory does not exist")
        except OSError as e:
            if e.errno == errno.EROFS:
                raise InvalidParams(f"Cannot write to {path}: Permission denied")
            raise

    async def download(self, config: Any, output_path: Optional[str] = None) -> str:
        """Render a chart config remotely and save the image, returning the saved path"""
        normalized = normalize_config(config)

        # filesystem checks run off the event loop
        path = await asyncio.to_thread(self.resolve_output_path, normalized["type"], output_path)
        await asyncio.to_thread(self.ensure_writable_dir, path.parent)

        url = encode(build(validate(normalized)), self.settings)
        content = await self.fetch(url)
        await self.write(path, content)

        logger.info("chart_downloaded", path=str(path), size_bytes=len(content),
                    chart_type=normalized["type"])
        return str(path)
