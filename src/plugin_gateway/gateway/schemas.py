"""Pydantic schemas for gateway requests and responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from plugin_gateway.backends.schemas import BackendConfig, BackendState
from plugin_gateway.catalog.schemas import CatalogStatistics, OperationDescriptor
from plugin_gateway.exposure.schemas import ExposureStrategyInfo, ExposureTier


class OperationView(BaseModel):
    """Caller-facing operation definition; omits the owning backend.

    Attributes:
        name: Operation name.
        description: Human-readable description.
        inputSchema: JSON Schema for arguments.
        category: Optional category.
        keywords: Search keywords.
    """

    name: str
    description: str
    inputSchema: dict[str, Any]
    category: str | None = None
    keywords: list[str] = Field(default_factory=list)

    @classmethod
    def from_descriptor(cls, descriptor: OperationDescriptor) -> "OperationView":
        return cls(
            name=descriptor.name,
            description=descriptor.description,
            inputSchema=descriptor.input_schema,
            category=descriptor.category,
            keywords=list(descriptor.keywords),
        )


class ListOperationsResult(BaseModel):
    """Exposure tier plus the strategy's rationale."""

    tier: ExposureTier
    rationale: str


class ListOperationsResponse(BaseModel):
    """Response for the list-operations request.

    Attributes:
        essential: Always-on operations.
        matched: Query-matched operations.
        total_available: Full catalog size, so callers can detect truncation.
        rationale: Human-readable summary of what was loaded.
        strategy: Layer and priority details.
    """

    essential: list[OperationView]
    matched: list[OperationView]
    total_available: int
    rationale: str
    strategy: ExposureStrategyInfo

    @classmethod
    def from_result(cls, result: ListOperationsResult) -> "ListOperationsResponse":
        return cls(
            essential=[OperationView.from_descriptor(d) for d in result.tier.essential],
            matched=[OperationView.from_descriptor(d) for d in result.tier.matched],
            total_available=result.tier.total_available,
            rationale=result.rationale,
            strategy=result.tier.strategy,
        )


class InvokeOperationRequest(BaseModel):
    """Request to invoke an operation.

    Attributes:
        name: Operation to invoke.
        arguments: Arguments passed through to the backend.
        session_id: Optional calling session; its activity is touched.
    """

    name: str = Field(..., min_length=1, description="Operation to invoke")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Operation arguments")
    session_id: str | None = Field(default=None, description="Optional calling session")


class ConnectBackendRequest(BaseModel):
    """Request to connect a backend, optionally attaching it to a session."""

    config: BackendConfig
    session_id: str | None = None


class BackendStatus(BaseModel):
    """Current state of one backend connection."""

    backend_id: str
    name: str
    transport: str
    state: BackendState
    operations: list[str] = Field(default_factory=list)
    connected_at: datetime | None = None
    last_error: str | None = None


class BackendListResponse(BaseModel):
    backends: list[BackendStatus]
    count: int


class ShutdownSummary(BaseModel):
    """Outcome of disconnecting every backend.

    Attributes:
        disconnected: Backends that were torn down cleanly.
        failures: Backend id -> error message for teardown failures.
    """

    disconnected: list[str] = Field(default_factory=list)
    failures: dict[str, str] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures


class GatewayStatistics(BaseModel):
    """Aggregate counters across the gateway."""

    catalog: CatalogStatistics
    essential_configured: int
    essential_available: int
    operations_by_category: dict[str, int]
    backends_by_state: dict[str, int]
    sessions: int
