"""In-process backend transport, used for tests and embedded tools."""

import inspect
from typing import Any, Awaitable, Callable, Union

from .exceptions import BackendError, ConnectionFailedError
from .schemas import InvocationResult

HandlerResult = Union[InvocationResult, dict[str, Any], str, None]
Handler = Callable[[dict[str, Any]], Union[HandlerResult, Awaitable[HandlerResult]]]


def _coerce_result(value: HandlerResult) -> InvocationResult:
    if isinstance(value, InvocationResult):
        return value
    if isinstance(value, str):
        return InvocationResult.text(value)
    if value is None:
        return InvocationResult()
    return InvocationResult(structuredContent=value, content=[{"type": "text", "text": str(value)}])


class InMemoryTransport:
    """Backend whose tools are plain Python callables.

    Args:
        backend_id: Backend identifier.
        tools: MCP-style tool definitions returned by describe_capabilities().
        handlers: Callable per tool name; receives the arguments dict and may
            be sync or async. Returning an InvocationResult passes it through;
            a str becomes text content; other values become structured content.
        fail_on_start: Simulate a backend that cannot be spawned.
        fail_on_describe: Simulate a failure during capability negotiation.
    """

    def __init__(
        self,
        backend_id: str,
        tools: list[dict[str, Any]] | None = None,
        handlers: dict[str, Handler] | None = None,
        fail_on_start: bool = False,
        fail_on_describe: bool = False,
    ) -> None:
        self.backend_id = backend_id
        self.tools = list(tools or [])
        self.handlers = dict(handlers or {})
        self.fail_on_start = fail_on_start
        self.fail_on_describe = fail_on_describe
        self.started = False
        self.closed = False
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def start(self) -> None:
        if self.fail_on_start:
            raise ConnectionFailedError(backend_id=self.backend_id, reason="simulated start failure")
        self.started = True
        self.closed = False

    async def describe_capabilities(self) -> list[dict[str, Any]]:
        if self.fail_on_describe:
            raise BackendError(backend_id=self.backend_id, detail="simulated capability failure")
        return [dict(tool) for tool in self.tools]

    async def invoke(self, name: str, arguments: dict[str, Any]) -> InvocationResult:
        if not self.started:
            raise BackendError(backend_id=self.backend_id, detail="backend is not started")
        self.calls.append((name, arguments))

        handler = self.handlers.get(name)
        if handler is None:
            return InvocationResult.text(f"Unknown tool: {name}", is_error=True)

        value = handler(arguments)
        if inspect.isawaitable(value):
            value = await value
        return _coerce_result(value)

    async def close(self) -> None:
        self.started = False
        self.closed = True
