"""Session state held by the session tracker."""

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Session:
    """A caller session.

    Attributes:
        session_id: Caller-supplied or generated identifier.
        created_at: Creation time (UTC).
        last_activity: Last time the session was touched (UTC).
        backends: Ids of the backends attached to this session.
        metadata: Open-ended session-scoped values.
    """

    session_id: str
    created_at: datetime
    last_activity: datetime
    backends: set[str] = field(default_factory=set)
    metadata: dict[str, Any] = field(default_factory=dict)

    def snapshot(self) -> "Session":
        """Detached copy safe to hand out while the original keeps mutating."""
        return Session(
            session_id=self.session_id,
            created_at=self.created_at,
            last_activity=self.last_activity,
            backends=set(self.backends),
            metadata=copy.deepcopy(self.metadata),
        )
