"""Backends module - Transports to backend capability servers."""

from .schemas import (
    BackendConfig,
    BackendState,
    InvocationResult,
    ToolOverride,
    ToolDefinition,
    ToolMeta,
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCErrorDetail,
)
from .exceptions import (
    TransportError,
    ConnectionFailedError,
    BackendTimeoutError,
    BackendError,
)
from .base import BackendTransport
from .http import HttpTransport
from .stdio import StdioTransport
from .memory import InMemoryTransport
from .factory import TransportFactory, build_transport, make_transport_factory
from .config import BackendRegistryConfig, load_backend_registry


__all__ = [
    # Schemas
    "BackendConfig",
    "BackendState",
    "InvocationResult",
    "ToolOverride",
    "ToolDefinition",
    "ToolMeta",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCErrorDetail",
    # Exceptions
    "TransportError",
    "ConnectionFailedError",
    "BackendTimeoutError",
    "BackendError",
    # Transports
    "BackendTransport",
    "HttpTransport",
    "StdioTransport",
    "InMemoryTransport",
    "TransportFactory",
    "build_transport",
    "make_transport_factory",
    # Config
    "BackendRegistryConfig",
    "load_backend_registry",
]
