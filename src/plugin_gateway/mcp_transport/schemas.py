"""Pydantic schemas for MCP protocol messages."""

from typing import Any, Literal

from pydantic import BaseModel, Field

PROTOCOL_VERSION = "2024-11-05"


class MCPErrorCodes:
    """Standard MCP/JSON-RPC error codes."""

    # JSON-RPC standard errors
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Gateway errors (-32000 to -32099)
    OPERATION_NOT_FOUND = -32001
    BACKEND_TIMEOUT = -32003
    BACKEND_UNAVAILABLE = -32004
    DUPLICATE_OPERATION = -32006
    ALREADY_CONNECTED = -32007
    INVALID_TRANSITION = -32008
    CONNECTION_FAILED = -32009
    BACKEND_ERROR = -32010
    SESSION_NOT_FOUND = -32011
    SESSION_EXISTS = -32012

    @classmethod
    def for_code(cls, code: str) -> int:
        """JSON-RPC code for a gateway error code; INTERNAL_ERROR if unmapped."""
        value = getattr(cls, code, None)
        return value if isinstance(value, int) else cls.INTERNAL_ERROR


class MCPInitializeParams(BaseModel):
    """Parameters for initialize request."""

    protocolVersion: str = Field(default=PROTOCOL_VERSION, description="MCP protocol version")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    clientInfo: dict[str, Any] = Field(default_factory=dict)


class MCPTool(BaseModel):
    """MCP tool definition."""

    name: str
    description: str
    inputSchema: dict[str, Any]


class MCPToolListParams(BaseModel):
    """Parameters for tools/list; both are gateway extensions."""

    query: str | None = None
    limit: int | None = Field(default=None, ge=0)


class MCPToolListResult(BaseModel):
    """Result for tools/list.

    ``_meta`` carries the tier breakdown so clients can tell essential from
    matched tools and detect truncation.
    """

    tools: list[MCPTool]
    meta: dict[str, Any] = Field(default_factory=dict, serialization_alias="_meta")


class MCPToolCallParams(BaseModel):
    """Parameters for tools/call."""

    name: str = Field(..., min_length=1)
    arguments: dict[str, Any] = Field(default_factory=dict)
    sessionId: str | None = None


class MCPJSONRPCRequest(BaseModel):
    """Generic JSON-RPC 2.0 request."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    method: str
    params: dict[str, Any] | None = None


class MCPJSONRPCResponse(BaseModel):
    """Generic JSON-RPC 2.0 response."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: str | int | None = None
    result: Any | None = None
    error: dict[str, Any] | None = None
