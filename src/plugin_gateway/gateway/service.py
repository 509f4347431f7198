"""Gateway coordinator: backend lifecycle, listing and invocation dispatch."""

import asyncio
from collections import Counter
from functools import partial
from typing import Any, Iterable

from structlog import get_logger

from plugin_gateway.backends.base import BackendTransport
from plugin_gateway.backends.exceptions import (
    BackendError,
    BackendTimeoutError,
    ConnectionFailedError,
)
from plugin_gateway.backends.factory import TransportFactory, build_transport
from plugin_gateway.backends.schemas import (
    BackendConfig,
    BackendState,
    InvocationResult,
    ToolDefinition,
    ToolMeta,
)
from plugin_gateway.catalog.categorize import infer_category
from plugin_gateway.catalog.exceptions import DuplicateOperationError
from plugin_gateway.catalog.schemas import OperationDescriptor, UsageEntry
from plugin_gateway.catalog.service import Catalog
from plugin_gateway.config import DEFAULT_ESSENTIAL_TOOLS
from plugin_gateway.exceptions import PluginGatewayError
from plugin_gateway.exposure.schemas import ScoringWeights
from plugin_gateway.exposure.service import ExposureStrategy
from plugin_gateway.sessions.service import SessionTracker

from .audit import audit_invocation
from .connection import BackendConnection
from .exceptions import AlreadyConnectedError, BackendUnavailableError
from .schemas import BackendStatus, GatewayStatistics, ListOperationsResult, ShutdownSummary

logger = get_logger()

DEFAULT_LIST_LIMIT = 15
DEFAULT_CONNECT_TIMEOUT_SECONDS = 30.0


class Gateway:
    """Aggregates backend operations behind one catalog.

    Args:
        transport_factory: Builds an unstarted transport for a backend config.
        essential_names: Operations always shown, in display order.
        weights: Relevance weights for query matching.
        sessions: Session tracker; a fresh one is created when omitted.
        default_list_limit: Matched-tier size when the caller gives none.
        auto_categorize: Infer a category for operations reported without one.
        connect_timeout: Upper bound for start + capability negotiation.
    """

    def __init__(
        self,
        transport_factory: TransportFactory = build_transport,
        essential_names: Iterable[str] | None = None,
        weights: ScoringWeights | None = None,
        sessions: SessionTracker | None = None,
        default_list_limit: int = DEFAULT_LIST_LIMIT,
        auto_categorize: bool = True,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT_SECONDS,
    ) -> None:
        if essential_names is None:
            essential_names = DEFAULT_ESSENTIAL_TOOLS.split(",")
        self._transport_factory = transport_factory
        self._essential: dict[str, None] = dict.fromkeys(essential_names)
        self._connections: dict[str, BackendConnection] = {}
        self.catalog = Catalog()
        self.exposure = ExposureStrategy(self.catalog, weights)
        self.sessions = sessions if sessions is not None else SessionTracker()
        self.default_list_limit = default_list_limit
        self.auto_categorize = auto_categorize
        self.connect_timeout = connect_timeout
        self._closed = False

    # --------- Essential tier ---------------------------------------------- #

    @property
    def essential_names(self) -> list[str]:
        return list(self._essential)

    def add_essential(self, name: str) -> None:
        self._essential[name] = None

    def remove_essential(self, name: str) -> None:
        self._essential.pop(name, None)

    # --------- Backend lifecycle ------------------------------------------- #

    def _build_descriptor(self, config: BackendConfig, raw: Any) -> OperationDescriptor:
        tool = ToolDefinition.model_validate(raw)
        meta = tool.meta or ToolMeta()
        description = tool.description or ""
        category = meta.category
        keywords = meta.keywords

        override = config.tool_overrides.get(tool.name)
        if override is not None:
            if override.category is not None:
                category = override.category
            if override.keywords is not None:
                keywords = override.keywords

        if category is None and self.auto_categorize:
            category = infer_category(tool.name, description)

        fields: dict[str, Any] = {
            "name": tool.name,
            "backend_id": config.backend_id,
            "description": description,
            "category": category,
            "keywords": keywords,
        }
        if tool.input_schema:
            fields["input_schema"] = tool.input_schema
        return OperationDescriptor(**fields)

    async def _negotiate(
        self,
        config: BackendConfig,
        transport: BackendTransport,
    ) -> list[OperationDescriptor]:
        await transport.start()
        tools = await transport.describe_capabilities()
        return [self._build_descriptor(config, tool) for tool in tools]

    async def connect(self, config: BackendConfig, session_id: str | None = None) -> BackendStatus:
        """Start a backend and register its operations.

        Registration is all-or-nothing: on any failure the backend ends up
        ``failed`` with no operations in the catalog, and a later connect
        for the same id is accepted.

        Args:
            config: Backend launch descriptor.
            session_id: Optional session to attach the backend to on success.

        Returns:
            Status of the connected backend.

        Raises:
            AlreadyConnectedError: If the backend is connecting or connected.
            SessionNotFoundError: If ``session_id`` is unknown.
            DuplicateOperationError: If an operation name is owned by
                another backend.
            ConnectionFailedError: For any other startup or negotiation failure,
                including a malformed tool definition, and once shutdown has begun.
        """
        if self._closed:
            raise ConnectionFailedError(backend_id=config.backend_id, reason="gateway is shut down")
        if session_id is not None:
            self.sessions.require(session_id)

        backend_id = config.backend_id
        connection = self._connections.get(backend_id)
        if connection is not None and connection.state in (BackendState.connecting, BackendState.connected):
            raise AlreadyConnectedError(backend_id=backend_id, state=connection.state.value)

        if connection is None:
            connection = BackendConnection(config)
            self._connections[backend_id] = connection
        else:
            connection.config = config
        connection.transition(BackendState.connecting)
        logger.info("backend_connecting", backend_id=backend_id, transport=config.transport)

        transport: BackendTransport | None = None
        try:
            transport = self._transport_factory(config)
            connection.transport = transport
            descriptors = await asyncio.wait_for(
                self._negotiate(config, transport),
                timeout=self.connect_timeout,
            )
            if self._closed:
                raise ConnectionFailedError(backend_id=backend_id, reason="gateway shut down during connect")
            names = self.catalog.register_batch(backend_id, descriptors)
        except BaseException as e:
            connection.transport = None
            connection.transition(BackendState.failed)
            connection.last_error = getattr(e, "message", None) or str(e) or type(e).__name__
            logger.warning("backend_connect_failed", backend_id=backend_id, error=connection.last_error)
            if transport is not None:
                await self._close_transport(backend_id, transport)

            if isinstance(e, (ConnectionFailedError, DuplicateOperationError)):
                raise
            if isinstance(e, asyncio.TimeoutError):
                raise ConnectionFailedError(
                    backend_id=backend_id,
                    reason=f"capability negotiation timed out after {self.connect_timeout}s",
                ) from e
            if isinstance(e, Exception):
                raise ConnectionFailedError(backend_id=backend_id, reason=connection.last_error) from e
            raise

        connection.transition(BackendState.connected)
        logger.info("backend_connected", backend_id=backend_id, operations=len(names))

        if session_id is not None:
            self.sessions.attach_backend(session_id, backend_id)
        return self._status(connection)

    async def _close_transport(self, backend_id: str, transport: BackendTransport) -> None:
        try:
            await transport.close()
        except Exception:
            logger.warning("backend_close_failed", backend_id=backend_id, exc_info=True)

    async def disconnect(self, backend_id: str) -> None:
        """Unregister a backend's operations and tear its transport down.

        No-op for unknown or already-disconnected backends.

        Raises:
            InvalidTransitionError: If a connect for this backend is in flight.
            BackendError: If the transport fails to close. The catalog and
                connection state are already updated when this is raised.
        """
        connection = self._connections.get(backend_id)
        if connection is None or connection.state is BackendState.disconnected:
            return

        connection.transition(BackendState.disconnected)
        removed = self.catalog.unregister_all(backend_id)
        detached = self.sessions.detach_backend_everywhere(backend_id)
        transport, connection.transport = connection.transport, None
        logger.info(
            "backend_disconnected",
            backend_id=backend_id,
            operations_removed=len(removed),
            sessions_detached=detached,
        )

        if transport is None:
            return
        try:
            await transport.close()
        except PluginGatewayError as e:
            connection.last_error = e.message
            raise
        except Exception as e:
            connection.last_error = str(e) or type(e).__name__
            raise BackendError(backend_id=backend_id, detail=connection.last_error) from e

    async def shutdown(self) -> ShutdownSummary:
        """Disconnect every backend, continuing past individual failures.

        Later connects are refused. A connect still negotiating when this
        runs fails on completion and closes its own transport.
        """
        self._closed = True
        summary = ShutdownSummary()
        for backend_id, connection in list(self._connections.items()):
            if connection.state is BackendState.disconnected:
                continue
            if connection.state is BackendState.connecting:
                logger.info("backend_connect_abandoned", backend_id=backend_id)
                continue
            try:
                await self.disconnect(backend_id)
            except Exception as e:
                summary.failures[backend_id] = getattr(e, "message", None) or str(e)
                logger.warning("backend_shutdown_failed", backend_id=backend_id, error=summary.failures[backend_id])
            else:
                summary.disconnected.append(backend_id)

        logger.info("gateway_shutdown", disconnected=len(summary.disconnected), failures=len(summary.failures))
        return summary

    def _status(self, connection: BackendConnection) -> BackendStatus:
        return BackendStatus(
            backend_id=connection.backend_id,
            name=connection.config.display_name,
            transport=connection.config.transport,
            state=connection.state,
            operations=[d.name for d in self.catalog.operations_for(connection.backend_id)],
            connected_at=connection.connected_at,
            last_error=connection.last_error,
        )

    def backends(self) -> list[BackendStatus]:
        return [self._status(connection) for connection in self._connections.values()]

    def backend_status(self, backend_id: str) -> BackendStatus | None:
        connection = self._connections.get(backend_id)
        return self._status(connection) if connection is not None else None

    # --------- Listing ----------------------------------------------------- #

    def list_operations(self, query: str | None = None, limit: int | None = None) -> ListOperationsResult:
        """Caller-visible operations for an optional query.

        Args:
            query: Optional free-text query.
            limit: Matched-tier cap; ``default_list_limit`` when omitted.
        """
        tier = self.exposure.expose(
            query,
            self.essential_names,
            self.default_list_limit if limit is None else limit,
        )
        return ListOperationsResult(tier=tier, rationale=tier.strategy.reason)

    # --------- Invocation -------------------------------------------------- #

    def _on_call_done(self, name: str, call: "asyncio.Future[InvocationResult]") -> None:
        self.catalog.record_invocation(name)
        if not call.cancelled() and call.exception() is not None:
            # Retrieved here too, for calls whose caller already gave up
            logger.debug("operation_call_failed", operation=name, error=str(call.exception()))

    async def invoke(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        session_id: str | None = None,
    ) -> InvocationResult:
        """Route an invocation to the backend that owns the operation.

        The usage count is recorded when the backend call finishes, whatever
        the outcome, even if the caller stopped waiting for it.

        Args:
            name: Operation name.
            arguments: Arguments passed through untouched.
            session_id: Optional calling session; its activity is touched.

        Returns:
            The backend's result, unmodified. Backend-reported tool errors
            come back here with ``isError`` set.

        Raises:
            SessionNotFoundError: If ``session_id`` is unknown.
            OperationNotFoundError: If the operation is not registered.
            BackendUnavailableError: If its backend is not connected.
            BackendTimeoutError: If the backend did not answer in time.
            BackendError: For transport or protocol failures.
        """
        if session_id is not None:
            self.sessions.touch(session_id)

        descriptor = self.catalog.resolve(name)
        connection = self._connections.get(descriptor.backend_id)
        if connection is None or not connection.is_connected or connection.transport is None:
            state = connection.state.value if connection is not None else BackendState.disconnected.value
            raise BackendUnavailableError(backend_id=descriptor.backend_id, state=state)

        async with audit_invocation(name, descriptor.backend_id, session_id) as audit:
            call = asyncio.ensure_future(connection.transport.invoke(name, arguments or {}))
            call.add_done_callback(partial(self._on_call_done, name))
            try:
                result = await asyncio.shield(call)
            except asyncio.CancelledError:
                audit.mark_cancelled()
                raise
            except BackendTimeoutError:
                audit.mark_timeout()
                raise
            except PluginGatewayError as e:
                audit.mark_error(e.code)
                raise
            except Exception as e:
                audit.mark_error("BACKEND_ERROR")
                raise BackendError(backend_id=descriptor.backend_id, detail=str(e)) from e

            if result.isError:
                audit.mark_backend_error()
            return result

    # --------- Usage and statistics ---------------------------------------- #

    def most_used(self, limit: int = 10) -> list[UsageEntry]:
        return self.catalog.most_used(limit)

    def clear_usage(self, name: str | None = None) -> None:
        self.catalog.clear_usage(name)

    def statistics(self) -> GatewayStatistics:
        operations = self.catalog.list_operations()
        by_category = Counter(d.category or "uncategorized" for d in operations)
        by_state = Counter(c.state.value for c in self._connections.values())
        return GatewayStatistics(
            catalog=self.catalog.statistics(),
            essential_configured=len(self._essential),
            essential_available=len(self.exposure.essential_tier(self._essential)),
            operations_by_category=dict(by_category),
            backends_by_state={state.value: by_state.get(state.value, 0) for state in BackendState},
            sessions=len(self.sessions),
        )
