"""Custom exceptions for the gateway coordinator."""

from plugin_gateway.exceptions import PluginGatewayError


class GatewayError(PluginGatewayError):
    """Base exception for gateway-specific errors."""
    pass


class BackendUnavailableError(GatewayError):
    """Raised when an operation's backend is not connected.

    Attributes:
        backend_id: Backend that owns the operation.
        state: Current state of that backend's connection.
    """

    def __init__(self, backend_id: str, state: str = "disconnected"):
        super().__init__(
            message=f"Backend '{backend_id}' is unavailable (state: {state})",
            code="BACKEND_UNAVAILABLE",
        )
        self.backend_id = backend_id
        self.state = state


class AlreadyConnectedError(GatewayError):
    """Raised when connecting a backend that is connecting or connected."""

    def __init__(self, backend_id: str, state: str):
        super().__init__(
            message=f"Backend '{backend_id}' is already {state}",
            code="ALREADY_CONNECTED",
        )
        self.backend_id = backend_id
        self.state = state


class InvalidTransitionError(GatewayError):
    """Raised when a backend connection is asked to make an illegal state change.

    Attributes:
        backend_id: Backend whose connection rejected the change.
        from_state: Current state.
        to_state: Requested state.
    """

    def __init__(self, backend_id: str, from_state: str, to_state: str):
        super().__init__(
            message=f"Backend '{backend_id}' cannot move from '{from_state}' to '{to_state}'",
            code="INVALID_TRANSITION",
        )
        self.backend_id = backend_id
        self.from_state = from_state
        self.to_state = to_state
