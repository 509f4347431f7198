"""Operation catalog with per-backend batch registration."""

import threading
from typing import Iterable

from structlog import get_logger

from .exceptions import DuplicateOperationError, OperationNotFoundError
from .schemas import CatalogStatistics, OperationDescriptor, UsageEntry
from .usage import UsageTracker

logger = get_logger()


class Catalog:
    """Mapping from operation name to descriptor, in registration order.

    All mutations go through a single internal lock, so a backend's batch
    registration or removal is never observed half-applied.
    """

    def __init__(self, usage: UsageTracker | None = None) -> None:
        self._operations: dict[str, OperationDescriptor] = {}
        self._lock = threading.Lock()
        self.usage = usage or UsageTracker()

    def _check_owner(self, descriptor: OperationDescriptor) -> None:
        existing = self._operations.get(descriptor.name)
        if existing is not None and existing.backend_id != descriptor.backend_id:
            raise DuplicateOperationError(
                operation_name=descriptor.name,
                backend_id=descriptor.backend_id,
                existing_backend_id=existing.backend_id,
            )

    def register(self, descriptor: OperationDescriptor) -> None:
        """Register a single operation.

        Re-registration by the same backend replaces the descriptor and keeps
        its position.

        Raises:
            DuplicateOperationError: If another backend owns the name.
        """
        with self._lock:
            self._check_owner(descriptor)
            self._operations[descriptor.name] = descriptor

    def register_batch(
        self,
        backend_id: str,
        descriptors: Iterable[OperationDescriptor],
    ) -> list[str]:
        """Register all operations of one backend, or none of them.

        Args:
            backend_id: Backend that owns every descriptor in the batch.
            descriptors: Descriptors reported by the backend.

        Returns:
            Names registered, in batch order.

        Raises:
            DuplicateOperationError: If any name collides with another
                backend or appears twice in the batch.
            ValueError: If a descriptor is owned by a different backend id.
        """
        batch = list(descriptors)
        seen: set[str] = set()
        with self._lock:
            for descriptor in batch:
                if descriptor.backend_id != backend_id:
                    raise ValueError(
                        f"descriptor '{descriptor.name}' belongs to backend "
                        f"'{descriptor.backend_id}', not '{backend_id}'"
                    )
                if descriptor.name in seen:
                    raise DuplicateOperationError(
                        operation_name=descriptor.name,
                        backend_id=backend_id,
                        existing_backend_id=backend_id,
                    )
                seen.add(descriptor.name)
                self._check_owner(descriptor)

            for descriptor in batch:
                self._operations[descriptor.name] = descriptor

        logger.debug("catalog_batch_registered", backend_id=backend_id, operations=len(batch))
        return [descriptor.name for descriptor in batch]

    def unregister_all(self, backend_id: str) -> list[str]:
        """Remove every operation owned by a backend. Idempotent.

        Returns:
            Names that were removed.
        """
        with self._lock:
            removed = [
                name for name, descriptor in self._operations.items()
                if descriptor.backend_id == backend_id
            ]
            for name in removed:
                del self._operations[name]

        if removed:
            logger.debug("catalog_backend_unregistered", backend_id=backend_id, operations=len(removed))
        return removed

    def get(self, name: str) -> OperationDescriptor | None:
        """Look up an operation, returning None if absent."""
        with self._lock:
            return self._operations.get(name)

    def resolve(self, name: str) -> OperationDescriptor:
        """Look up an operation.

        Raises:
            OperationNotFoundError: If the name is not registered.
        """
        descriptor = self.get(name)
        if descriptor is None:
            raise OperationNotFoundError(name)
        return descriptor

    def list_operations(self) -> list[OperationDescriptor]:
        """All descriptors in registration order."""
        with self._lock:
            return list(self._operations.values())

    def operations_for(self, backend_id: str) -> list[OperationDescriptor]:
        """Descriptors owned by one backend, in registration order."""
        with self._lock:
            return [d for d in self._operations.values() if d.backend_id == backend_id]

    def record_invocation(self, name: str) -> None:
        """Count an invocation attempt.

        Unknown names are ignored: the operation may have been unregistered
        while the call was in flight.
        """
        if name not in self:
            return
        self.usage.increment(name)

    def usage_count(self, name: str) -> int:
        return self.usage.count(name)

    def clear_usage(self, name: str | None = None) -> None:
        """Administrative reset of usage counts."""
        self.usage.clear(name)
        logger.info("usage_cleared", operation=name or "*")

    def most_used(self, limit: int = 10) -> list[UsageEntry]:
        """Registered operations ordered by usage count (highest first).

        Operations that were never invoked are not included.
        """
        counts = self.usage.snapshot()
        ranked = sorted(
            (d for d in self.list_operations() if counts.get(d.name, 0) > 0),
            key=lambda d: counts[d.name],
            reverse=True,
        )
        return [
            UsageEntry(name=d.name, backend_id=d.backend_id, usage_count=counts[d.name])
            for d in ranked[:max(limit, 0)]
        ]

    def statistics(self) -> CatalogStatistics:
        counts = self.usage.snapshot()
        operations = self.list_operations()
        used = [counts[d.name] for d in operations if counts.get(d.name, 0) > 0]
        total = sum(used)
        return CatalogStatistics(
            total_operations=len(operations),
            operations_with_usage=len(used),
            total_invocations=total,
            average_usage_count=total / len(used) if used else 0.0,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._operations)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._operations
