import time
from typing import Any, Dict, List, Optional

import httpx

from quickchart_mcp.config import Config
from quickchart_mcp.core.builder import build
from quickchart_mcp.core.encoder import encode
from quickchart_mcp.core.errors import InternalError, MethodNotFound, ToolError
from quickchart_mcp.core.models import (
    CHART_TYPES,
    GRAPHVIZ_FORMATS,
    GRAPHVIZ_LAYOUTS,
    WORDCLOUD_CASES,
    WORDCLOUD_FORMATS,
    WORDCLOUD_SCALES,
)
from quickchart_mcp.core.validator import validate
from quickchart_mcp.observability.logger import log_tool_call, logger
from quickchart_mcp.storage.downloads import ChartDownloader

SERVER_NAME = "quickchart-server"
SERVER_VERSION = "1.0.0"


def _now_ms() -> int:
    return int(time.time() * 1000)


def text_content(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def requested_chart_type(tool: str, arguments: Any) -> Optional[str]:
    """Chart type named in the tool arguments, nested under config for downloads"""
    if not isinstance(arguments, dict):
        return None
    if tool != "download_chart":
        return arguments.get("type")

    config = arguments.get("config")
    if not isinstance(config, dict):
        return None
    nested = config.get("data")
    if config.get("type") is None and isinstance(nested, dict):
        return nested.get("type")
    return config.get("type")


class QuickChartServer:
    def __init__(self, settings: Config, client: httpx.AsyncClient = None):
        self.settings = settings
        self.downloader = ChartDownloader(settings, client=client)
        self.tools = {
            "generate_chart": self.generate_chart,
            "download_chart": self.download_chart,
        }

    def generate_chart_url(self, arguments: Dict[str, Any]) -> str:
        """Validate, build and encode tool arguments into a renderer URL"""
        return encode(build(validate(arguments)), self.settings)

    async def generate_chart(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        try:
            url = self.generate_chart_url(arguments)
        except ToolError:
            raise
        except Exception as e:
            raise InternalError(f"Failed to generate chart: {str(e) or 'Unknown error'}")
        logger.info("chart_url_generated", chart_type=arguments.get("type"), url_length=len(url))
        return text_content(url)

    async def download_chart(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        arguments = arguments or {}
        try:
            saved = await self.downloader.download(arguments.get("config"), arguments.get("outputPath"))
        except ToolError:
            raise
        except Exception as e:
            raise InternalError(f"Failed to download chart: {str(e) or 'Unknown error'}")
        return text_content(f"Chart saved to {saved}")

    async def call_tool(self, name: str, arguments: Any) -> Dict[str, Any]:
        """Run a tool by name and return its MCP result payload"""
        handler = self.tools.get(name)
        if handler is None:
            raise MethodNotFound(f"Unknown tool: {name}")

        chart_type = requested_chart_type(name, arguments)
        start_ms = _now_ms()
        try:
            result = await handler(arguments)
        except ToolError as e:
            log_tool_call(name, "failed", start_ms, _now_ms(), chart_type=chart_type, error=e.message)
            raise
        log_tool_call(name, "success", start_ms, _now_ms(), chart_type=chart_type)
        return result

    def list_tools(self) -> List[Dict[str, Any]]:
        return TOOLS

    def manifest(self) -> dict:
        return {
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "tools": self.list_tools()
        }


GENERATE_CHART_TOOL = {
    "name": "generate_chart",
    "description": (
        "Generate a chart using QuickChart. Supports bar, line, pie, doughnut, radar, polarArea, "
        "scatter, bubble, radialGauge, speedometer, graphviz, and wordcloud chart types."
    ),
    "inputSchema": {
        "type": "object",
        "properties": {
            "type": {
                "type": "string",
                "description": "Chart type: " + ", ".join(CHART_TYPES),
                "enum": list(CHART_TYPES)
            },
            "dot": {
                "type": "string",
                "description": 'Graphviz DOT language code (required when type is graphviz). Example: "digraph G { A -> B; B -> C; }"'
            },
            "graphvizFormat": {
                "type": "string",
                "description": "Output format for graphviz: png, svg, jpg, pdf (default: png)",
                "enum": list(GRAPHVIZ_FORMATS)
            },
            "graphvizLayout": {
                "type": "string",
                "description": "Graphviz layout engine: dot, neato, fdp, sfdp, twopi, circo (default: dot)",
                "enum": list(GRAPHVIZ_LAYOUTS)
            },
            "text": {
                "type": "string",
                "description": "Text content for wordcloud (required when type is wordcloud). Plain text or a comma-separated word list."
            },
            "wordcloudFormat": {
                "type": "string",
                "description": "Output format for wordcloud: svg or png (default: svg)",
                "enum": list(WORDCLOUD_FORMATS)
            },
            "width": {"type": "number", "description": "Image width in pixels for wordcloud (default: 600)"},
            "height": {"type": "number", "description": "Image height in pixels for wordcloud (default: 600)"},
            "backgroundColor": {
                "type": "string",
                "description": "Background color for wordcloud (rgb, hsl, hex, or name value, default: transparent)"
            },
            "fontFamily": {"type": "string", "description": "Font family for wordcloud (default: serif)"},
            "fontWeight": {"type": "string", "description": "Font weight for wordcloud (default: normal)"},
            "loadGoogleFonts": {
                "type": "string",
                "description": 'Google Fonts to load for wordcloud (e.g., "Roboto" or "Roboto:300")'
            },
            "fontScale": {"type": "number", "description": "Size of the largest font for wordcloud, roughly (default: 25)"},
            "scale": {
                "type": "string",
                "description": "Frequency scaling method for wordcloud: linear, sqrt, or log (default: linear)",
                "enum": list(WORDCLOUD_SCALES)
            },
            "padding": {"type": "number", "description": "Padding between words in pixels for wordcloud (default: 1)"},
            "rotation": {"type": "number", "description": "Maximum angle of rotation for words in wordcloud (default: 20)"},
            "maxNumWords": {"type": "number", "description": "Maximum number of words to show in wordcloud (default: 200)"},
            "minWordLength": {
                "type": "number",
                "description": "Minimum character length of each word to include in wordcloud (default: 1)"
            },
            "case": {
                "type": "string",
                "description": "Force words to this case in wordcloud: upper, lower, or none (default: lower)",
                "enum": list(WORDCLOUD_CASES)
            },
            "colors": {
                "type": "array",
                "items": {"type": "string"},
                "description": 'Colors for words in wordcloud, assigned randomly (e.g., ["red", "#00ff00"])'
            },
            "removeStopwords": {"type": "boolean", "description": "Remove common words from the wordcloud (default: false)"},
            "cleanWords": {
                "type": "boolean",
                "description": "Remove symbols and extra characters from words in wordcloud (default: true)"
            },
            "language": {"type": "string", "description": "Two-letter language code of stopwords to remove (default: en)"},
            "useWordList": {
                "type": "boolean",
                "description": "Treat text as a comma-separated list of words or phrases (default: false)"
            },
            "labels": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Labels for data points (x-axis labels for most chart types)"
            },
            "datasets": {
                "type": "array",
                "description": "Dataset objects with data and optional styling (required for all chart types except graphviz and wordcloud)",
                "items": {
                    "type": "object",
                    "properties": {
                        "label": {"type": "string", "description": "Label for this dataset (shown in legend)"},
                        "data": {"type": "array", "description": "Data points for this dataset"},
                        "backgroundColor": {
                            "description": 'Background color(s), e.g. "rgb(75, 192, 192)" or "#FF6384"'
                        },
                        "borderColor": {
                            "description": 'Border color(s), e.g. "rgb(75, 192, 192)" or "#FF6384"'
                        },
                        "additionalConfig": {
                            "type": "object",
                            "description": "Extra Chart.js dataset properties, merged over the defaults"
                        }
                    },
                    "required": ["data"]
                }
            },
            "title": {"type": "string", "description": "Chart title text"},
            "options": {"type": "object", "description": "Additional Chart.js options (scales, plugins, etc.)"}
        },
        "required": ["type"]
    }
}

DOWNLOAD_CHART_TOOL = {
    "name": "download_chart",
    "description": "Download a chart image to a local file",
    "inputSchema": {
        "type": "object",
        "properties": {
            "config": {
                "type": "object",
                "description": "Chart configuration with type and datasets, at the top level or inside a data object"
            },
            "outputPath": {
                "type": "string",
                "description": "Where to save the image. Defaults to the Desktop, or the home directory when it is not writable."
            }
        },
        "required": ["config"]
    }
}

TOOLS = [GENERATE_CHART_TOOL, DOWNLOAD_CHART_TOOL]
