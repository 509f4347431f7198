"""The narrow interface the gateway uses to talk to a backend."""

from typing import Any, Protocol

from .schemas import InvocationResult


class BackendTransport(Protocol):
    """A connection to one backend capability server.

    ``describe_capabilities`` returns raw MCP tool definitions (dicts with
    ``name``, ``description``, ``inputSchema`` and optionally ``_meta``).
    Implementations must pair every response with the call that caused it.
    """

    backend_id: str

    async def start(self) -> None:
        ...

    async def describe_capabilities(self) -> list[dict[str, Any]]:
        ...

    async def invoke(self, name: str, arguments: dict[str, Any]) -> InvocationResult:
        ...

    async def close(self) -> None:
        ...
