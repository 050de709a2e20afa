"""MCP Protocol - JSON-RPC 2.0 implementation for stdio and HTTP communication"""
import json
import sys
from typing import Dict, Any, Optional

from quickchart_mcp.core.errors import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    InvalidParams,
    ToolError,
)
from quickchart_mcp.mcp.servers.srv_quickchart import (
    SERVER_NAME,
    SERVER_VERSION,
    QuickChartServer,
)
from quickchart_mcp.observability.logger import logger

PROTOCOL_VERSION = "2024-11-05"


def success_response(request_id: Any, result: Any) -> Dict:
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "result": result
    }


def error_response(request_id: Any, code: int, message: str, data: Any = None) -> Dict:
    error = {
        "code": code,
        "message": message
    }
    if data is not None:
        error["data"] = data

    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "error": error
    }


class MCPProtocol:
    """Handle MCP JSON-RPC 2.0 line framing on stdio"""

    @staticmethod
    def setup_stdio_mode():
        """Setup stdio mode - redirect all print statements to stderr"""
        original_stdout = sys.stdout

        # Only JSON-RPC responses may reach the real stdout
        sys.stdout = sys.stderr

        return original_stdout

    @staticmethod
    def parse_line(line: str) -> Any:
        """Parse one JSON-RPC message, raising json.JSONDecodeError on bad input"""
        return json.loads(line.strip())

    @staticmethod
    def write_message(message: Dict, stdout_handle=None):
        """Write one JSON-RPC message to stdout"""
        out = stdout_handle if stdout_handle else sys.__stdout__
        out.write(json.dumps(message) + "\n")
        out.flush()

    @staticmethod
    def write_response(request_id: Any, result: Any, stdout_handle=None):
        """Write JSON-RPC success response to stdout"""
        MCPProtocol.write_message(success_response(request_id, result), stdout_handle)

    @staticmethod
    def write_manifest(manifest: Dict):
        """Write manifest to stdout (for --manifest flag)"""
        sys.__stdout__.write(json.dumps(manifest, indent=2) + "\n")
        sys.__stdout__.flush()


class MCPDispatcher:
    """Route JSON-RPC requests to the tool server"""

    def __init__(self, server: QuickChartServer):
        self.server = server
        self.methods = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    async def _initialize(self, params: Dict) -> Dict:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION}
        }

    async def _ping(self, params: Dict) -> Dict:
        return {}

    async def _list_tools(self, params: Dict) -> Dict:
        return {"tools": self.server.list_tools()}

    async def _call_tool(self, params: Dict) -> Dict:
        if not isinstance(params, dict):
            raise InvalidParams("tools/call params must be an object")
        return await self.server.call_tool(params.get("name"), params.get("arguments"))

    async def handle(self, message: Any) -> Optional[Dict]:
        """Handle one decoded message; notifications get no response"""
        if not isinstance(message, dict) or not isinstance(message.get("method"), str):
            request_id = message.get("id") if isinstance(message, dict) else None
            return error_response(request_id, INVALID_REQUEST, "Invalid Request")

        method = message["method"]
        request_id = message.get("id")
        is_notification = "id" not in message
        params = message.get("params")
        if params is None:
            params = {}

        handler = self.methods.get(method)
        if handler is None:
            if is_notification:
                logger.debug("notification_ignored", method=method)
                return None
            return error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

        try:
            result = await handler(params)
        except ToolError as e:
            if is_notification:
                return None
            return error_response(request_id, e.code, e.message)
        except Exception as e:
            logger.exception("request_failed", method=method)
            if is_notification:
                return None
            return error_response(request_id, INTERNAL_ERROR, f"Internal error: {e}")

        if is_notification:
            return None
        return success_response(request_id, result)

    async def handle_line(self, line: str) -> Optional[Dict]:
        """Decode and handle one stdio line"""
        try:
            message = MCPProtocol.parse_line(line)
        except json.JSONDecodeError as e:
            return error_response(None, PARSE_ERROR, f"Parse error: {e}")
        return await self.handle(message)
