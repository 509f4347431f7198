"""Pydantic schemas for backend launch descriptors and JSON-RPC messages."""

from enum import Enum
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class BackendState(str, Enum):
    """Lifecycle state of a backend connection."""

    disconnected = "disconnected"
    connecting = "connecting"
    connected = "connected"
    failed = "failed"


class ToolOverride(BaseModel):
    """Search metadata to attach to one of a backend's operations."""

    category: str | None = None
    keywords: list[str] | None = None


class ToolMeta(BaseModel):
    """Search metadata a backend may attach to a tool under ``_meta``."""

    model_config = ConfigDict(extra="allow")

    category: str | None = None
    keywords: list[str] | str | None = None


class ToolDefinition(BaseModel):
    """A tool as reported by a backend's ``tools/list``.

    Accepts both the MCP wire names (``inputSchema``, ``_meta``) and their
    snake_case / unprefixed spellings.
    """

    model_config = ConfigDict(extra="allow")

    name: str
    description: str | None = None
    input_schema: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("inputSchema", "input_schema"),
    )
    meta: ToolMeta | None = Field(default=None, validation_alias=AliasChoices("_meta", "meta"))


class BackendConfig(BaseModel):
    """Launch descriptor for a backend capability server.

    Attributes:
        backend_id: Unique backend identifier.
        name: Display name.
        transport: "stdio" spawns ``command``; "http" posts JSON-RPC to
            ``url``; "memory" is reserved for in-process backends.
        command: Executable for stdio backends.
        args: Command arguments.
        env: Extra environment variables for the child process.
        cwd: Working directory for the child process.
        url: JSON-RPC endpoint for http backends.
        headers: Extra HTTP headers for http backends.
        timeout_seconds: Per-call timeout; the gateway default applies if unset.
        tool_overrides: Per-operation category/keywords.
    """

    backend_id: str = Field(..., min_length=1, description="Unique backend id")
    name: str | None = Field(default=None, description="Display name")
    transport: Literal["stdio", "http", "memory"] = Field(default="stdio")
    command: str | None = Field(default=None, description="Executable for stdio backends")
    args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    cwd: str | None = None
    url: str | None = Field(default=None, description="JSON-RPC endpoint for http backends")
    headers: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: float | None = Field(default=None, gt=0)
    tool_overrides: dict[str, ToolOverride] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_transport_fields(self) -> "BackendConfig":
        if self.transport == "stdio" and not self.command:
            raise ValueError("stdio backends require 'command'")
        if self.transport == "http" and not self.url:
            raise ValueError("http backends require 'url'")
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.backend_id


class InvocationResult(BaseModel):
    """Result of an operation call, as reported by the backend.

    Mirrors the MCP ``CallToolResult`` shape. ``isError`` marks a tool-level
    failure reported by the backend, which is still a normal response.
    """

    model_config = ConfigDict(extra="allow")

    content: list[dict[str, Any]] = Field(default_factory=list)
    structuredContent: Any | None = None
    isError: bool = False

    @classmethod
    def text(cls, text: str, is_error: bool = False) -> "InvocationResult":
        return cls(content=[{"type": "text", "text": text}], isError=is_error)


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request sent to a backend.

    Attributes:
        jsonrpc: JSON-RPC version (always "2.0").
        method: The method to call (e.g., "tools/call").
        params: Method parameters.
        id: Request identifier for correlation.
    """

    jsonrpc: Literal["2.0"] = Field(default="2.0", description="JSON-RPC version")
    method: str = Field(..., description="Method to call")
    params: dict[str, Any] | None = Field(default=None, description="Method parameters")
    id: str | int = Field(..., description="Request ID for correlation")


class JSONRPCErrorDetail(BaseModel):
    """Error details in JSON-RPC format."""

    code: int = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    data: Any | None = Field(default=None, description="Additional error data")


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 response from a backend."""

    jsonrpc: Literal["2.0"] = Field(default="2.0", description="JSON-RPC version")
    result: Any | None = Field(default=None, description="Result on success")
    error: JSONRPCErrorDetail | None = Field(default=None, description="Error on failure")
    id: str | int | None = Field(default=None, description="Request ID for correlation")
