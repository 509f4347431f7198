"""FastAPI router for session endpoints."""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response

from plugin_gateway.config import Settings
from plugin_gateway.dependencies import get_app_settings, get_session_tracker

from .exceptions import SessionNotFoundError
from .schemas import (
    MetadataValue,
    SessionCreate,
    SessionListResponse,
    SessionResponse,
    SweepRequest,
    SweepResponse,
)
from .service import SessionTracker


router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
    request: Annotated[SessionCreate | None, Body()] = None,
) -> SessionResponse:
    """Create a session; the id is generated when the body omits one."""
    session_id = request.session_id if request is not None else None
    return SessionResponse.from_session(tracker.create(session_id))


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
) -> SessionListResponse:
    sessions = [SessionResponse.from_session(s) for s in tracker.list_sessions()]
    return SessionListResponse(sessions=sessions, count=len(sessions))


@router.post("/sweep", response_model=SweepResponse)
async def sweep_sessions(
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    request: Annotated[SweepRequest | None, Body()] = None,
) -> SweepResponse:
    """Remove sessions idle for at least ``max_age_seconds``.

    Falls back to SESSION_MAX_AGE_SECONDS when no age is given.
    """
    max_age = request.max_age_seconds if request is not None else None
    if max_age is None:
        max_age = settings.SESSION_MAX_AGE_SECONDS
    removed = tracker.sweep_expired(max_age)
    return SweepResponse(removed=removed, remaining=len(tracker))


@router.get("/current", response_model=SessionResponse)
async def current_session(
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
) -> SessionResponse:
    """The most recently created session that still exists."""
    session = tracker.current()
    if session is None:
        raise SessionNotFoundError("current")
    return SessionResponse.from_session(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
) -> SessionResponse:
    return SessionResponse.from_session(tracker.require(session_id))


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
) -> Response:
    if not tracker.delete(session_id):
        raise SessionNotFoundError(session_id)
    return Response(status_code=204)


@router.post("/{session_id}/touch", status_code=204)
async def touch_session(
    session_id: str,
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
) -> Response:
    tracker.touch(session_id)
    return Response(status_code=204)


@router.get("/{session_id}/metadata/{key}")
async def get_session_metadata(
    session_id: str,
    key: str,
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
) -> dict[str, Any]:
    return {"key": key, "value": tracker.get_metadata(session_id, key)}


@router.put("/{session_id}/metadata/{key}", response_model=SessionResponse)
async def set_session_metadata(
    session_id: str,
    key: str,
    request: MetadataValue,
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
) -> SessionResponse:
    tracker.set_metadata(session_id, key, request.value)
    return SessionResponse.from_session(tracker.require(session_id))


@router.post("/{session_id}/backends/{backend_id}", response_model=SessionResponse)
async def attach_backend(
    session_id: str,
    backend_id: str,
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
) -> SessionResponse:
    return SessionResponse.from_session(tracker.attach_backend(session_id, backend_id))


@router.delete("/{session_id}/backends/{backend_id}", response_model=SessionResponse)
async def detach_backend(
    session_id: str,
    backend_id: str,
    tracker: Annotated[SessionTracker, Depends(get_session_tracker)],
) -> SessionResponse:
    return SessionResponse.from_session(tracker.detach_backend(session_id, backend_id))
