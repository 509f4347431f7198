"""Pydantic schemas for exposure tiers."""

from typing import Literal

from pydantic import BaseModel, Field

from plugin_gateway.catalog.schemas import OperationDescriptor


class ScoringWeights(BaseModel):
    """Relevance weights applied when ranking operations against a query.

    Attributes:
        name: Added when the operation name contains the query.
        description: Added when the description contains the query.
        keyword: Added per keyword containing the query.
        usage: Multiplied by the usage count of an already-matching operation.
    """

    name: float = Field(default=10.0, ge=0)
    description: float = Field(default=5.0, ge=0)
    keyword: float = Field(default=3.0, ge=0)
    usage: float = Field(default=0.5, ge=0)


class ExposureStrategyInfo(BaseModel):
    """How a tier was computed.

    Attributes:
        layer: 1 when only essential operations are shown, 2 when a query
            contributed a matched tier.
        priority: Context-budget hint; decreases as more operations are shown.
        reason: Human-readable rationale.
    """

    layer: Literal[1, 2]
    priority: int
    reason: str


class ExposureTier(BaseModel):
    """Caller-visible subset of the catalog.

    Attributes:
        essential: Always-on operations, in essential-name order.
        matched: Query-ranked operations, never overlapping ``essential``.
        total_available: Full catalog size, regardless of filtering.
        strategy: How the tier was computed.
    """

    essential: list[OperationDescriptor] = Field(default_factory=list)
    matched: list[OperationDescriptor] = Field(default_factory=list)
    total_available: int = 0
    strategy: ExposureStrategyInfo

    @property
    def operations(self) -> list[OperationDescriptor]:
        """Essential followed by matched operations."""
        return [*self.essential, *self.matched]
