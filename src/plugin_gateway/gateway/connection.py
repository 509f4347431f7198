"""Backend connection lifecycle state machine."""

from datetime import datetime, timezone

from plugin_gateway.backends.base import BackendTransport
from plugin_gateway.backends.schemas import BackendConfig, BackendState

from .exceptions import InvalidTransitionError

ALLOWED_TRANSITIONS: dict[BackendState, set[BackendState]] = {
    BackendState.disconnected: {BackendState.connecting},
    BackendState.connecting: {BackendState.connected, BackendState.failed},
    BackendState.connected: {BackendState.disconnected},
    BackendState.failed: {BackendState.connecting, BackendState.disconnected},
}


class BackendConnection:
    """One backend owned by the gateway.

    Attributes:
        config: Launch descriptor.
        transport: Transport built for the current connection attempt.
        state: Lifecycle state; changed only through transition().
        last_error: Message of the last failed connect or disconnect.
        connected_at: When the backend last reached ``connected``.
    """

    def __init__(self, config: BackendConfig) -> None:
        self.config = config
        self.transport: BackendTransport | None = None
        self.state = BackendState.disconnected
        self.last_error: str | None = None
        self.connected_at: datetime | None = None

    @property
    def backend_id(self) -> str:
        return self.config.backend_id

    def transition(self, new_state: BackendState) -> None:
        """Move to ``new_state``.

        Raises:
            InvalidTransitionError: If the move is not in ALLOWED_TRANSITIONS.
        """
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidTransitionError(
                backend_id=self.backend_id,
                from_state=self.state.value,
                to_state=new_state.value,
            )
        self.state = new_state
        if new_state is BackendState.connected:
            self.connected_at = datetime.now(timezone.utc)
            self.last_error = None

    @property
    def is_connected(self) -> bool:
        return self.state is BackendState.connected
