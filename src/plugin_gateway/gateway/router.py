"""FastAPI router for gateway endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from plugin_gateway.backends.schemas import InvocationResult
from plugin_gateway.catalog.schemas import UsageEntry
from plugin_gateway.config import Settings
from plugin_gateway.dependencies import get_app_settings, get_gateway

from .schemas import (
    BackendListResponse,
    BackendStatus,
    ConnectBackendRequest,
    GatewayStatistics,
    InvokeOperationRequest,
    ListOperationsResponse,
)
from .service import Gateway


router = APIRouter(prefix="/gateway", tags=["gateway"])


@router.get("/operations", response_model=ListOperationsResponse)
async def list_operations_endpoint(
    gateway: Annotated[Gateway, Depends(get_gateway)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    query: Annotated[str | None, Query(description="Free-text search query")] = None,
    limit: Annotated[int | None, Query(ge=0)] = None,
) -> ListOperationsResponse:
    """List the essential tier plus operations matching ``query``.

    ``limit`` is clamped to MAX_LIST_LIMIT.
    """
    if limit is not None:
        limit = min(limit, settings.MAX_LIST_LIMIT)
    result = gateway.list_operations(query=query, limit=limit)
    return ListOperationsResponse.from_result(result)


@router.post("/invoke", response_model=InvocationResult)
async def invoke_operation_endpoint(
    request: InvokeOperationRequest,
    gateway: Annotated[Gateway, Depends(get_gateway)],
) -> InvocationResult:
    """Invoke an operation on the backend that owns it.

    Backend-reported tool errors are returned with ``isError`` set and a
    200 status; gateway failures map to error responses.
    """
    return await gateway.invoke(request.name, request.arguments, session_id=request.session_id)


@router.get("/backends", response_model=BackendListResponse)
async def list_backends(
    gateway: Annotated[Gateway, Depends(get_gateway)],
) -> BackendListResponse:
    backends = gateway.backends()
    return BackendListResponse(backends=backends, count=len(backends))


@router.post("/backends", response_model=BackendStatus, status_code=201)
async def connect_backend(
    request: ConnectBackendRequest,
    gateway: Annotated[Gateway, Depends(get_gateway)],
) -> BackendStatus:
    """Connect a backend and register its operations."""
    return await gateway.connect(request.config, session_id=request.session_id)


@router.delete("/backends/{backend_id}", status_code=204)
async def disconnect_backend(
    backend_id: str,
    gateway: Annotated[Gateway, Depends(get_gateway)],
) -> Response:
    """Disconnect a backend. Unknown or already-disconnected ids are a no-op."""
    await gateway.disconnect(backend_id)
    return Response(status_code=204)


@router.get("/stats", response_model=GatewayStatistics)
async def gateway_statistics(
    gateway: Annotated[Gateway, Depends(get_gateway)],
) -> GatewayStatistics:
    return gateway.statistics()


@router.get("/usage", response_model=list[UsageEntry])
async def most_used_operations(
    gateway: Annotated[Gateway, Depends(get_gateway)],
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> list[UsageEntry]:
    """Operations ordered by invocation count, most used first."""
    return gateway.most_used(limit)


@router.delete("/usage", status_code=204)
async def clear_usage(
    gateway: Annotated[Gateway, Depends(get_gateway)],
    name: Annotated[str | None, Query(description="Clear only this operation")] = None,
) -> Response:
    gateway.clear_usage(name)
    return Response(status_code=204)


@router.post("/essential/{name}", status_code=204)
async def add_essential(
    name: str,
    gateway: Annotated[Gateway, Depends(get_gateway)],
) -> Response:
    gateway.add_essential(name)
    return Response(status_code=204)


@router.delete("/essential/{name}", status_code=204)
async def remove_essential(
    name: str,
    gateway: Annotated[Gateway, Depends(get_gateway)],
) -> Response:
    gateway.remove_essential(name)
    return Response(status_code=204)
