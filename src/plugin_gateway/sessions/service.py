"""Caller session tracking with activity-based expiry."""

import threading
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from structlog import get_logger

from .exceptions import SessionExistsError, SessionNotFoundError
from .models import Session

logger = get_logger()

DEFAULT_MAX_AGE = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_session_id() -> str:
    """Time-based prefix plus a random suffix."""
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:12]}"


class SessionTracker:
    """Owns the set of active caller sessions.

    Every public method takes the internal lock, so sweeps can run
    concurrently with reads and mutations. Reads hand out snapshots.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._sessions: dict[str, Session] = {}
        self._current_id: str | None = None
        self._lock = threading.Lock()
        self._clock = clock

    def _require(self, session_id: str) -> Session:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def _touch(self, session: Session) -> None:
        session.last_activity = self._clock()

    def create(self, session_id: str | None = None) -> Session:
        """Create a session and make it the current one.

        Args:
            session_id: Optional caller-supplied id; generated when omitted.

        Raises:
            SessionExistsError: If the id is already in use.
        """
        with self._lock:
            if session_id is None:
                session_id = generate_session_id()
                while session_id in self._sessions:
                    session_id = generate_session_id()
            elif session_id in self._sessions:
                raise SessionExistsError(session_id)

            now = self._clock()
            session = Session(session_id=session_id, created_at=now, last_activity=now)
            self._sessions[session_id] = session
            self._current_id = session_id
            result = session.snapshot()

        logger.info("session_created", session_id=session_id)
        return result

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            return session.snapshot() if session is not None else None

    def require(self, session_id: str) -> Session:
        """Like get(), but raises SessionNotFoundError for unknown ids."""
        with self._lock:
            return self._require(session_id).snapshot()

    def current(self) -> Session | None:
        """The most recently created session that still exists."""
        with self._lock:
            if self._current_id is None:
                return None
            session = self._sessions.get(self._current_id)
            return session.snapshot() if session is not None else None

    def list_sessions(self) -> list[Session]:
        with self._lock:
            return [session.snapshot() for session in self._sessions.values()]

    def touch(self, session_id: str) -> None:
        """Record activity on a session."""
        with self._lock:
            self._touch(self._require(session_id))

    def attach_backend(self, session_id: str, backend_id: str) -> Session:
        """Attach a backend; attaching twice is a no-op apart from the touch."""
        with self._lock:
            session = self._require(session_id)
            session.backends.add(backend_id)
            self._touch(session)
            return session.snapshot()

    def detach_backend(self, session_id: str, backend_id: str) -> Session:
        """Detach a backend; detaching an absent id is a no-op apart from the touch."""
        with self._lock:
            session = self._require(session_id)
            session.backends.discard(backend_id)
            self._touch(session)
            return session.snapshot()

    def detach_backend_everywhere(self, backend_id: str) -> int:
        """Detach a backend from every session that has it attached.

        Does not touch last-activity: this is a gateway event, not caller
        activity.

        Returns:
            Number of sessions the backend was detached from.
        """
        detached = 0
        with self._lock:
            for session in self._sessions.values():
                if backend_id in session.backends:
                    session.backends.discard(backend_id)
                    detached += 1
        return detached

    def set_metadata(self, session_id: str, key: str, value: Any) -> None:
        with self._lock:
            session = self._require(session_id)
            session.metadata[key] = value
            self._touch(session)

    def get_metadata(self, session_id: str, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._require(session_id).metadata.get(key, default)

    def delete(self, session_id: str) -> bool:
        """Delete a session. Returns False if it did not exist."""
        with self._lock:
            session = self._sessions.pop(session_id, None)
            if session is None:
                return False
            if self._current_id == session_id:
                self._current_id = None

        logger.info("session_deleted", session_id=session_id)
        return True

    def sweep_expired(self, max_age: timedelta | float = DEFAULT_MAX_AGE) -> int:
        """Delete every session idle for at least ``max_age``.

        Args:
            max_age: Idle threshold, as a timedelta or in seconds.

        Returns:
            Number of sessions removed.
        """
        if not isinstance(max_age, timedelta):
            max_age = timedelta(seconds=max_age)

        with self._lock:
            cutoff = self._clock() - max_age
            expired = [
                session_id for session_id, session in self._sessions.items()
                if session.last_activity <= cutoff
            ]
            for session_id in expired:
                del self._sessions[session_id]
                if self._current_id == session_id:
                    self._current_id = None

        if expired:
            logger.info("sessions_expired", count=len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
