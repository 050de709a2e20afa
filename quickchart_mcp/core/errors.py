"""Tool errors carrying their JSON-RPC error code"""

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ToolError(Exception):
    """Base error surfaced to the caller as a JSON-RPC error"""

    code = INTERNAL_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidParams(ToolError):
    """Caller input is missing, malformed or violates a chart-type contract"""

    code = INVALID_PARAMS


class MethodNotFound(ToolError):
    code = METHOD_NOT_FOUND


class InternalError(ToolError):
    code = INTERNAL_ERROR
