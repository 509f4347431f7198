"""Business logic for MCP protocol handlers."""

from typing import Any

from plugin_gateway.catalog.schemas import OperationDescriptor
from plugin_gateway.gateway.service import Gateway

from .schemas import (
    PROTOCOL_VERSION,
    MCPInitializeParams,
    MCPTool,
    MCPToolCallParams,
    MCPToolListParams,
    MCPToolListResult,
)

SERVER_NAME = "plugin-gateway"
SERVER_VERSION = "0.1.0"


def _to_mcp_tool(descriptor: OperationDescriptor) -> MCPTool:
    return MCPTool(**descriptor.to_tool_definition())


async def handle_initialize(params: MCPInitializeParams) -> dict[str, Any]:
    """Answer the client handshake.

    The gateway only speaks the protocol version it was built against and
    echoes it back regardless of what the client asked for.
    """
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {"listChanged": False}},
        "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
    }


async def handle_tools_list(
    gateway: Gateway,
    params: MCPToolListParams,
    max_limit: int | None = None,
) -> MCPToolListResult:
    """List the essential tier followed by the query-matched tier.

    Args:
        gateway: Gateway to list from.
        params: Optional query and matched-tier limit.
        max_limit: Upper bound applied to ``params.limit``.
    """
    limit = params.limit
    if limit is not None and max_limit is not None:
        limit = min(limit, max_limit)

    result = gateway.list_operations(query=params.query, limit=limit)
    tier = result.tier
    return MCPToolListResult(
        tools=[_to_mcp_tool(d) for d in tier.operations],
        meta={
            "totalAvailable": tier.total_available,
            "rationale": result.rationale,
            "essential": [d.name for d in tier.essential],
            "matched": [d.name for d in tier.matched],
            "strategy": tier.strategy.model_dump(),
        },
    )


async def handle_tools_call(gateway: Gateway, params: MCPToolCallParams) -> dict[str, Any]:
    """Invoke an operation and return the backend result untouched."""
    result = await gateway.invoke(params.name, params.arguments, session_id=params.sessionId)
    return result.model_dump(exclude_none=True)
