"""MCP transport module - JSON-RPC endpoint for MCP clients."""

from .schemas import (
    PROTOCOL_VERSION,
    MCPErrorCodes,
    MCPInitializeParams,
    MCPTool,
    MCPToolListParams,
    MCPToolListResult,
    MCPToolCallParams,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
)
from .service import handle_initialize, handle_tools_list, handle_tools_call
from .router import router


__all__ = [
    # Schemas
    "PROTOCOL_VERSION",
    "MCPErrorCodes",
    "MCPInitializeParams",
    "MCPTool",
    "MCPToolListParams",
    "MCPToolListResult",
    "MCPToolCallParams",
    "MCPJSONRPCRequest",
    "MCPJSONRPCResponse",
    # Service
    "handle_initialize",
    "handle_tools_list",
    "handle_tools_call",
    # Router
    "router",
]
