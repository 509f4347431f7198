"""Gateway module - Backend lifecycle, listing and invocation dispatch."""

from .schemas import (
    OperationView,
    ListOperationsResult,
    ListOperationsResponse,
    InvokeOperationRequest,
    ConnectBackendRequest,
    BackendStatus,
    BackendListResponse,
    ShutdownSummary,
    GatewayStatistics,
)
from .exceptions import (
    GatewayError,
    BackendUnavailableError,
    AlreadyConnectedError,
    InvalidTransitionError,
)
from .connection import ALLOWED_TRANSITIONS, BackendConnection
from .audit import AuditContext, InvocationStatus, audit_invocation
from .service import Gateway
from .router import router


__all__ = [
    # Schemas
    "OperationView",
    "ListOperationsResult",
    "ListOperationsResponse",
    "InvokeOperationRequest",
    "ConnectBackendRequest",
    "BackendStatus",
    "BackendListResponse",
    "ShutdownSummary",
    "GatewayStatistics",
    # Exceptions
    "GatewayError",
    "BackendUnavailableError",
    "AlreadyConnectedError",
    "InvalidTransitionError",
    # Lifecycle
    "ALLOWED_TRANSITIONS",
    "BackendConnection",
    # Audit
    "AuditContext",
    "InvocationStatus",
    "audit_invocation",
    # Service
    "Gateway",
    # Router
    "router",
]
