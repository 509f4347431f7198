"""Pydantic schemas for session endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .models import Session


class SessionCreate(BaseModel):
    """Request to create a session."""

    session_id: str | None = Field(default=None, min_length=1, description="Optional caller-supplied id")


class MetadataValue(BaseModel):
    """Body for setting a metadata key."""

    value: Any = None


class SweepRequest(BaseModel):
    """Request to sweep idle sessions."""

    max_age_seconds: float | None = Field(default=None, ge=0)


class SweepResponse(BaseModel):
    removed: int
    remaining: int


class SessionResponse(BaseModel):
    """Session as returned to callers."""

    session_id: str
    created_at: datetime
    last_activity: datetime
    backends: list[str]
    metadata: dict[str, Any]

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            session_id=session.session_id,
            created_at=session.created_at,
            last_activity=session.last_activity,
            backends=sorted(session.backends),
            metadata=session.metadata,
        )


class SessionListResponse(BaseModel):
    sessions: list[SessionResponse]
    count: int
