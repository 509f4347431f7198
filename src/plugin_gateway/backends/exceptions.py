"""Exceptions raised by backend transports."""

from plugin_gateway.exceptions import PluginGatewayError


class TransportError(PluginGatewayError):
    """Base exception for backend transport failures."""
    pass


class ConnectionFailedError(TransportError):
    """Raised when a backend cannot be started or its capabilities described.

    Attributes:
        backend_id: Backend that failed to connect.
        reason: Description of the failure.
    """

    def __init__(self, backend_id: str, reason: str = "Connection failed"):
        super().__init__(
            message=f"Backend '{backend_id}' failed to connect: {reason}",
            code="CONNECTION_FAILED",
        )
        self.backend_id = backend_id
        self.reason = reason


class BackendTimeoutError(TransportError):
    """Raised when a backend doesn't respond in time.

    Attributes:
        backend_id: Backend that timed out.
        timeout_seconds: Timeout duration that was exceeded.
    """

    def __init__(self, backend_id: str, timeout_seconds: float):
        super().__init__(
            message=f"Backend '{backend_id}' timed out after {timeout_seconds}s",
            code="BACKEND_TIMEOUT",
        )
        self.backend_id = backend_id
        self.timeout_seconds = timeout_seconds


class BackendError(TransportError):
    """Raised when a backend fails at the protocol or transport level.

    Tool-level failures reported by the backend are not exceptions; they come
    back as an InvocationResult with ``isError`` set.

    Attributes:
        backend_id: Backend that failed.
        detail: Error detail from the backend or transport.
        status_code: HTTP status or JSON-RPC error code, when known.
    """

    def __init__(self, backend_id: str, detail: str = "", status_code: int | None = None):
        suffix = f" ({status_code})" if status_code is not None else ""
        super().__init__(
            message=f"Backend '{backend_id}' returned error{suffix}: {detail}",
            code="BACKEND_ERROR",
        )
        self.backend_id = backend_id
        self.detail = detail
        self.status_code = status_code
