from pydantic import BaseModel
from typing import Any, Dict, Optional, Union


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "quickchart-mcp-server"


class JSONRPCError(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class JSONRPCResponse(BaseModel):
    jsonrpc: str = "2.0"
    id: Optional[Union[int, str]] = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[JSONRPCError] = None
