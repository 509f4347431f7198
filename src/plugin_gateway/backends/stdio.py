"""STDIO transport: spawns a backend process and speaks MCP over its pipes."""

import asyncio
import os
from contextlib import suppress
from typing import Any

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client
from structlog import get_logger

from .exceptions import BackendError, BackendTimeoutError, ConnectionFailedError
from .schemas import InvocationResult

logger = get_logger()

DEFAULT_TIMEOUT_SECONDS = 60.0


class StdioTransport:
    """Backend process reached over newline-delimited JSON-RPC on stdio.

    The MCP client session and the child process live inside a single
    background task for their whole lifetime, so the SDK's cancel scopes are
    always entered and exited by the same task regardless of which caller
    connects or disconnects. Request ids are assigned and matched by the SDK
    session, so concurrent calls keep their pairing.

    Args:
        backend_id: Backend identifier, used in errors and logs.
        command: Executable to spawn.
        args: Command arguments.
        env: Extra environment variables merged over the gateway's own.
        cwd: Working directory for the child process.
        timeout: Timeout in seconds for startup, discovery and each call.
    """

    def __init__(
        self,
        backend_id: str,
        command: str,
        args: list[str] | None = None,
        env: dict[str, str] | None = None,
        cwd: str | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self.backend_id = backend_id
        self.command = command
        self.args = list(args or [])
        # Unbuffered Python in the child by default; caller values win
        self.env = {"PYTHONUNBUFFERED": "1", **(env or {})}
        self.cwd = cwd
        self.timeout = timeout

        self._session: ClientSession | None = None
        self._runner: asyncio.Task[None] | None = None
        self._ready = asyncio.Event()
        self._stop = asyncio.Event()

    async def _run(self) -> None:
        params = StdioServerParameters(
            command=self.command,
            args=self.args,
            env={**os.environ, **self.env},
            cwd=self.cwd,
        )
        async with stdio_client(params) as (read_stream, write_stream):
            async with ClientSession(read_stream, write_stream) as session:
                await session.initialize()
                self._session = session
                self._ready.set()
                try:
                    await self._stop.wait()
                finally:
                    self._session = None

    async def start(self) -> None:
        if self._runner is not None:
            return

        self._ready.clear()
        self._stop.clear()
        self._runner = asyncio.create_task(self._run(), name=f"stdio-backend-{self.backend_id}")
        ready_waiter = asyncio.create_task(self._ready.wait())
        try:
            done, _pending = await asyncio.wait(
                {self._runner, ready_waiter},
                timeout=self.timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            ready_waiter.cancel()

        if ready_waiter in done or self._ready.is_set():
            logger.info(
                "stdio_backend_started",
                backend_id=self.backend_id,
                command=self.command,
                args=" ".join(self.args),
                cwd=self.cwd or ".",
            )
            return

        if self._runner in done:
            error = self._runner.exception()
            self._runner = None
            reason = str(error) if error is not None else "process exited during initialization"
            raise ConnectionFailedError(backend_id=self.backend_id, reason=reason)

        await self._cancel_runner()
        raise ConnectionFailedError(
            backend_id=self.backend_id,
            reason=f"initialization timed out after {self.timeout}s",
        )

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise BackendError(backend_id=self.backend_id, detail="backend process is not running")
        return self._session

    async def describe_capabilities(self) -> list[dict[str, Any]]:
        session = self._require_session()
        try:
            result = await asyncio.wait_for(session.list_tools(), timeout=self.timeout)
        except asyncio.TimeoutError:
            raise BackendTimeoutError(backend_id=self.backend_id, timeout_seconds=self.timeout)
        return [tool.model_dump(by_alias=True, exclude_none=True) for tool in result.tools]

    async def invoke(self, name: str, arguments: dict[str, Any]) -> InvocationResult:
        session = self._require_session()
        try:
            result = await asyncio.wait_for(
                session.call_tool(name, arguments=arguments),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise BackendTimeoutError(backend_id=self.backend_id, timeout_seconds=self.timeout)
        except Exception as e:
            # McpError and broken-pipe failures from the SDK
            raise BackendError(backend_id=self.backend_id, detail=str(e)) from e
        return InvocationResult(**result.model_dump(by_alias=True, exclude_none=True))

    async def _cancel_runner(self) -> None:
        runner = self._runner
        self._runner = None
        self._session = None
        if runner is None:
            return
        runner.cancel()
        with suppress(asyncio.CancelledError):
            await runner

    async def close(self) -> None:
        runner = self._runner
        if runner is None:
            return
        if not self._ready.is_set():
            # Still initializing; nothing to shut down gracefully
            await self._cancel_runner()
            return

        self._runner = None
        self._stop.set()
        try:
            await asyncio.wait_for(asyncio.shield(runner), timeout=self.timeout)
        except asyncio.TimeoutError:
            runner.cancel()
            with suppress(asyncio.CancelledError):
                await runner
        finally:
            self._session = None
        logger.info("stdio_backend_closed", backend_id=self.backend_id)
