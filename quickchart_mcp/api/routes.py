import json

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response

from quickchart_mcp.api.models import HealthResponse, JSONRPCResponse
from quickchart_mcp.core.errors import PARSE_ERROR
from quickchart_mcp.mcp.protocol import MCPDispatcher, error_response
from quickchart_mcp.observability.logger import logger

router = APIRouter()

STREAM_HEADERS = {"Cache-Control": "no-cache"}


def get_dispatcher(request: Request) -> MCPDispatcher:
    return request.app.state.dispatcher


async def list_tools_envelope(dispatcher: MCPDispatcher) -> dict:
    return await dispatcher.handle({"jsonrpc": "2.0", "id": 1, "method": "tools/list", "params": {}})


@router.get("/", response_model=HealthResponse)
@router.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check"""
    return HealthResponse()


@router.get("/mcp/stream", response_model=JSONRPCResponse, response_model_exclude_none=True)
async def stream_discovery(request: Request):
    """Tool discovery over GET returns the tools/list envelope"""
    return JSONResponse(await list_tools_envelope(get_dispatcher(request)), headers=STREAM_HEADERS)


@router.post("/mcp/stream")
async def stream_exchange(request: Request):
    """Dispatch one posted JSON-RPC envelope"""
    body = await request.body()
    try:
        message = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning("invalid_request_body", error=str(e))
        return JSONResponse(error_response(None, PARSE_ERROR, f"Parse error: {e}"), status_code=400)

    response = await get_dispatcher(request).handle(message)
    if response is None:
        return Response(status_code=202)
    return JSONResponse(response, headers=STREAM_HEADERS)


@router.get("/mcp/tools", response_model=JSONRPCResponse, response_model_exclude_none=True)
async def list_tools(request: Request):
    """List available tools"""
    return await list_tools_envelope(get_dispatcher(request))
