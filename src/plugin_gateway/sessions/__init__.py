"""Sessions module - Caller sessions with activity-based expiry."""

from .models import Session
from .schemas import (
    SessionCreate,
    MetadataValue,
    SweepRequest,
    SweepResponse,
    SessionResponse,
    SessionListResponse,
)
from .exceptions import SessionError, SessionNotFoundError, SessionExistsError
from .service import SessionTracker, generate_session_id, DEFAULT_MAX_AGE
from .sweeper import run_session_sweeper
from .router import router


__all__ = [
    # Models
    "Session",
    # Schemas
    "SessionCreate",
    "MetadataValue",
    "SweepRequest",
    "SweepResponse",
    "SessionResponse",
    "SessionListResponse",
    # Exceptions
    "SessionError",
    "SessionNotFoundError",
    "SessionExistsError",
    # Service
    "SessionTracker",
    "generate_session_id",
    "DEFAULT_MAX_AGE",
    "run_session_sweeper",
    # Router
    "router",
]
