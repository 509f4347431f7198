"""Keyed record stores consumed by the plugin's content features."""

import copy
import threading
import time
import uuid
from collections import Counter
from typing import Any, Iterable, Protocol

from structlog import get_logger

from .exceptions import RecordNotFoundError

logger = get_logger()

Record = dict[str, Any]


class RecordStore(Protocol):
    """Minimal contract the gateway expects from a record store."""

    def save(self, record: Record) -> str:
        ...

    def get(self, record_id: str) -> Record:
        ...

    def query(self, limit: int | None = None, **criteria: Any) -> list[Record]:
        ...

    def stats(self) -> dict[str, Any]:
        ...


class InMemoryRecordStore:
    """Process-lifetime record store.

    Records are plain dicts. ``save`` assigns an ``id`` when the record has
    none and stamps ``created_at`` (epoch milliseconds). Returned records are
    copies.

    Args:
        name: Store name, used as the id prefix and in errors.
        group_by: Fields counted by ``stats()`` as ``by_<field>``.
    """

    def __init__(self, name: str, group_by: Iterable[str] = ()) -> None:
        self.name = name
        self.group_by = tuple(group_by)
        self._records: dict[str, Record] = {}
        self._lock = threading.Lock()

    def _new_id(self) -> str:
        return f"{self.name}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"

    def save(self, record: Record) -> str:
        """Insert or replace a record and return its id."""
        stored = copy.deepcopy(record)
        with self._lock:
            record_id = str(stored.get("id") or self._new_id())
            stored["id"] = record_id
            previous = self._records.pop(record_id, None)
            if previous is not None:
                stored.setdefault("created_at", previous["created_at"])
            stored.setdefault("created_at", int(time.time() * 1000))
            self._records[record_id] = stored
        logger.debug("record_saved", store=self.name, record_id=record_id)
        return record_id

    def get(self, record_id: str) -> Record:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise RecordNotFoundError(self.name, record_id)
            return copy.deepcopy(record)

    def query(self, limit: int | None = None, **criteria: Any) -> list[Record]:
        """Records whose fields equal every criterion, oldest first."""
        with self._lock:
            matches = [
                copy.deepcopy(record) for record in self._records.values()
                if all(record.get(key) == value for key, value in criteria.items())
            ]
        matches.sort(key=lambda r: r["created_at"])
        return matches if limit is None else matches[:limit]

    def delete(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    def stats(self) -> dict[str, Any]:
        """Total count plus a ``by_<field>`` breakdown per grouped field."""
        with self._lock:
            records = list(self._records.values())
        result: dict[str, Any] = {"total": len(records)}
        for field in self.group_by:
            counts = Counter(str(r[field]) for r in records if r.get(field) is not None)
            result[f"by_{field}"] = dict(counts)
        return result

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
