"""Structured audit logging for operation invocations."""

import time
from contextlib import asynccontextmanager
from enum import Enum
from typing import AsyncGenerator

import structlog

# Configure structured logger
logger = structlog.get_logger("audit")


class InvocationStatus(str, Enum):
    """Outcome of an invocation as recorded in the audit log."""

    success = "success"
    backend_error = "backend_error"
    timeout = "timeout"
    error = "error"
    cancelled = "cancelled"


class AuditContext:
    """Tracks timing and outcome of one invocation.

    Attributes:
        operation_name: Which operation is being invoked.
        backend_id: Backend the call is routed to.
        session_id: Calling session, if any.
        start_time: When the invocation started.
        status: Final status of the invocation.
        error_code: Error code if failed.
    """

    def __init__(
        self,
        operation_name: str,
        backend_id: str,
        session_id: str | None = None,
    ) -> None:
        self.operation_name = operation_name
        self.backend_id = backend_id
        self.session_id = session_id
        self.start_time = time.perf_counter()
        self.status = InvocationStatus.success
        self.error_code: str | None = None

    def mark_backend_error(self) -> None:
        """Mark a tool-level error reported by the backend."""
        self.status = InvocationStatus.backend_error

    def mark_error(self, error_code: str) -> None:
        self.status = InvocationStatus.error
        self.error_code = error_code

    def mark_timeout(self) -> None:
        self.status = InvocationStatus.timeout
        self.error_code = "BACKEND_TIMEOUT"

    def mark_cancelled(self) -> None:
        self.status = InvocationStatus.cancelled

    @property
    def duration_ms(self) -> int:
        """Calculate duration in milliseconds."""
        elapsed = time.perf_counter() - self.start_time
        return int(elapsed * 1000)


def log_invocation(context: AuditContext) -> None:
    """Emit the audit event for a finished invocation."""
    logger.info(
        "operation_invocation",
        operation=context.operation_name,
        backend_id=context.backend_id,
        session_id=context.session_id,
        status=context.status.value,
        duration_ms=context.duration_ms,
        error_code=context.error_code,
    )


@asynccontextmanager
async def audit_invocation(
    operation_name: str,
    backend_id: str,
    session_id: str | None = None,
) -> AsyncGenerator[AuditContext, None]:
    """Context manager for auditing operation invocations.

    Automatically tracks timing and logs when the context exits.

    Example:
        async with audit_invocation("read_file", "fs") as ctx:
            try:
                result = await transport.invoke(...)
            except BackendTimeoutError:
                ctx.mark_timeout()
                raise
    """
    context = AuditContext(operation_name, backend_id, session_id=session_id)
    try:
        yield context
    finally:
        log_invocation(context)
