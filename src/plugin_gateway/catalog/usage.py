"""In-process usage counters for catalog operations."""

import threading


class UsageTracker:
    """Thread-safe mapping from operation name to invocation count.

    Counts are process-lifetime only and never decrease except through
    an explicit clear.
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def increment(self, name: str) -> int:
        """Increment the count for an operation and return the new value."""
        with self._lock:
            count = self._counts.get(name, 0) + 1
            self._counts[name] = count
            return count

    def count(self, name: str) -> int:
        """Return the count for an operation (0 if never used)."""
        with self._lock:
            return self._counts.get(name, 0)

    def snapshot(self) -> dict[str, int]:
        """Return a copy of all counts."""
        with self._lock:
            return dict(self._counts)

    def clear(self, name: str | None = None) -> None:
        """Reset one operation's count, or every count when name is None."""
        with self._lock:
            if name is None:
                self._counts.clear()
            else:
                self._counts.pop(name, None)
