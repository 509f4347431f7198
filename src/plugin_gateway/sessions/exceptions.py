"""Exceptions raised by the session tracker."""

from plugin_gateway.exceptions import PluginGatewayError


class SessionError(PluginGatewayError):
    """Base exception for session errors."""
    pass


class SessionNotFoundError(SessionError):
    """Raised when a session id is unknown or has expired."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session '{session_id}' not found",
            code="SESSION_NOT_FOUND",
        )
        self.session_id = session_id


class SessionExistsError(SessionError):
    """Raised when creating a session with an id already in use."""

    def __init__(self, session_id: str):
        super().__init__(
            message=f"Session '{session_id}' already exists",
            code="SESSION_EXISTS",
        )
        self.session_id = session_id
