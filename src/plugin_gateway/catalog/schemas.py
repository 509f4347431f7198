"""Pydantic schemas for catalog entries."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _default_input_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {},
        "additionalProperties": True,
    }


class OperationDescriptor(BaseModel):
    """A named, schema-described operation owned by one backend.

    Attributes:
        name: Unique operation identifier across the whole catalog.
        backend_id: Identifier of the backend that owns and executes it.
        description: Human-readable description.
        input_schema: JSON Schema for the arguments; opaque to the gateway.
        category: Optional category used for grouping and search.
        keywords: Search keywords, stripped and de-duplicated in order.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Unique operation name")
    backend_id: str = Field(..., min_length=1, description="Owning backend id")
    description: str = Field(default="", description="Human-readable description")
    input_schema: dict[str, Any] = Field(
        default_factory=_default_input_schema,
        description="JSON Schema for operation arguments",
    )
    category: str | None = Field(default=None, description="Optional category")
    keywords: tuple[str, ...] = Field(default=(), description="Search keywords")

    @field_validator("name", "backend_id")
    @classmethod
    def _strip_identifier(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: Any) -> str:
        return value or ""

    @field_validator("keywords", mode="before")
    @classmethod
    def _normalize_keywords(cls, value: Any) -> tuple[str, ...]:
        if value is None:
            return ()
        if isinstance(value, str):
            value = [value]
        seen: set[str] = set()
        keywords: list[str] = []
        for keyword in value:
            keyword = str(keyword).strip()
            if keyword and keyword not in seen:
                seen.add(keyword)
                keywords.append(keyword)
        return tuple(keywords)

    def to_tool_definition(self) -> dict[str, Any]:
        """Render as an MCP tool definition (name, description, inputSchema)."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class CatalogStatistics(BaseModel):
    """Aggregate counters over the catalog and its usage records."""

    total_operations: int
    operations_with_usage: int
    total_invocations: int
    average_usage_count: float


class UsageEntry(BaseModel):
    """Usage count for a single operation."""

    name: str
    backend_id: str
    usage_count: int
