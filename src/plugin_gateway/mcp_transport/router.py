"""JSON-RPC endpoint speaking the MCP tool protocol to callers."""

import json
from typing import Annotated

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from structlog import get_logger

from plugin_gateway.config import Settings
from plugin_gateway.dependencies import get_app_settings, get_gateway
from plugin_gateway.exceptions import PluginGatewayError
from plugin_gateway.gateway.service import Gateway

from .schemas import (
    MCPErrorCodes,
    MCPInitializeParams,
    MCPJSONRPCRequest,
    MCPJSONRPCResponse,
    MCPToolCallParams,
    MCPToolListParams,
)
from .service import handle_initialize, handle_tools_call, handle_tools_list

logger = get_logger()

router = APIRouter(prefix="", tags=["mcp"])


def _jsonrpc_error_response(
    request_id: str | int | None,
    code: int,
    message: str,
    status_code: int = 200,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=MCPJSONRPCResponse(
            id=request_id,
            error={"code": code, "message": message},
        ).model_dump(),
    )


def _jsonrpc_result_response(request_id: str | int | None, result: dict) -> JSONResponse:
    return JSONResponse(content=MCPJSONRPCResponse(id=request_id, result=result).model_dump())


async def _dispatch(
    jsonrpc_request: MCPJSONRPCRequest,
    gateway: Gateway,
    settings: Settings,
) -> Response:
    method = jsonrpc_request.method
    params = jsonrpc_request.params or {}

    if method == "initialize":
        result = await handle_initialize(MCPInitializeParams(**params))
        return _jsonrpc_result_response(jsonrpc_request.id, result)

    elif method == "notifications/initialized":
        # Notification: nothing to answer
        return Response(status_code=202)

    elif method == "tools/list":
        list_result = await handle_tools_list(
            gateway,
            MCPToolListParams(**params),
            max_limit=settings.MAX_LIST_LIMIT,
        )
        return _jsonrpc_result_response(jsonrpc_request.id, list_result.model_dump(by_alias=True))

    elif method == "tools/call":
        result = await handle_tools_call(gateway, MCPToolCallParams(**params))
        return _jsonrpc_result_response(jsonrpc_request.id, result)

    return _jsonrpc_error_response(
        request_id=jsonrpc_request.id,
        code=MCPErrorCodes.METHOD_NOT_FOUND,
        message=f"Method not found: {method}",
    )


@router.post("/mcp", operation_id="mcp_endpoint_post")
async def mcp_post_endpoint(
    request: Request,
    gateway: Annotated[Gateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> Response:
    """Handle JSON-RPC 2.0 messages."""
    try:
        body = await request.json()
    except json.JSONDecodeError:
        return _jsonrpc_error_response(None, MCPErrorCodes.PARSE_ERROR, "Parse error")

    request_id = body.get("id") if isinstance(body, dict) else None
    try:
        jsonrpc_request = MCPJSONRPCRequest.model_validate(body)
    except ValidationError as e:
        return _jsonrpc_error_response(request_id, MCPErrorCodes.INVALID_REQUEST, f"Invalid request: {e}")

    try:
        return await _dispatch(jsonrpc_request, gateway, settings)
    except ValidationError as e:
        return _jsonrpc_error_response(request_id, MCPErrorCodes.INVALID_PARAMS, f"Invalid params: {e}")
    except PluginGatewayError as e:
        return _jsonrpc_error_response(request_id, MCPErrorCodes.for_code(e.code), e.message)
    except Exception as e:
        logger.exception("mcp_internal_error", method=jsonrpc_request.method)
        return _jsonrpc_error_response(request_id, MCPErrorCodes.INTERNAL_ERROR, f"Internal error: {e}")
