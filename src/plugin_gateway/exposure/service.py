"""Layered exposure of catalog operations to a caller."""

from typing import Iterable

from plugin_gateway.catalog.schemas import OperationDescriptor
from plugin_gateway.catalog.service import Catalog

from .schemas import ExposureStrategyInfo, ExposureTier, ScoringWeights
from .scoring import normalize_query, rank_operations


def calculate_priority(essential_count: int, matched_count: int) -> int:
    """Priority decreases as more operations are exposed (token budget hint)."""
    return max(1, 10 - (essential_count + matched_count) // 5)


class ExposureStrategy:
    """Decides which catalog operations a caller sees.

    Layer 1 is the essential tier, always shown. Layer 2 is the matched tier,
    ranked against a query. Everything else stays available but hidden, and
    is only reported as a count.

    Listing is read-only: it reads usage counts but never writes them.
    """

    def __init__(self, catalog: Catalog, weights: ScoringWeights | None = None) -> None:
        self.catalog = catalog
        self.weights = weights or ScoringWeights()

    def essential_tier(self, essential_names: Iterable[str]) -> list[OperationDescriptor]:
        """Resolvable essential operations, in the given name order."""
        tier: list[OperationDescriptor] = []
        seen: set[str] = set()
        for name in essential_names:
            if name in seen:
                continue
            seen.add(name)
            descriptor = self.catalog.get(name)
            if descriptor is not None:
                tier.append(descriptor)
        return tier

    def search(self, query: str, limit: int) -> list[OperationDescriptor]:
        """Top ``limit`` operations matching a query, best first."""
        query_lower = normalize_query(query)
        if query_lower is None or limit <= 0:
            return []
        ranked = rank_operations(
            self.catalog.list_operations(),
            query_lower,
            self.catalog.usage_count,
            self.weights,
        )
        return [descriptor for descriptor, _score in ranked[:limit]]

    def expose(
        self,
        query: str | None,
        essential_names: Iterable[str],
        limit: int,
    ) -> ExposureTier:
        """Compute the caller-visible tier.

        Args:
            query: Optional free-text query; blank means no query.
            essential_names: Names of always-on operations.
            limit: Maximum size of the matched tier before de-duplication.

        Returns:
            ExposureTier with essential and matched operations.
        """
        essential = self.essential_tier(essential_names)
        total_available = len(self.catalog)

        if normalize_query(query) is None:
            return ExposureTier(
                essential=essential,
                matched=[],
                total_available=total_available,
                strategy=ExposureStrategyInfo(
                    layer=1,
                    priority=calculate_priority(len(essential), 0),
                    reason=f"loaded {len(essential)} essential tools only",
                ),
            )

        # De-duplicate after ranking so the remainder keeps its relative order
        essential_set = {descriptor.name for descriptor in essential}
        matched = [
            descriptor for descriptor in self.search(query, limit)
            if descriptor.name not in essential_set
        ]

        return ExposureTier(
            essential=essential,
            matched=matched,
            total_available=total_available,
            strategy=ExposureStrategyInfo(
                layer=2,
                priority=calculate_priority(len(essential), len(matched)),
                reason=f"loaded {len(essential)} essential + {len(matched)} query-matched tools",
            ),
        )
