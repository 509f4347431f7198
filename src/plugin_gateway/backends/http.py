"""HTTP JSON-RPC transport for backend capability servers."""

import uuid
from typing import Any

import httpx
from pydantic import ValidationError
from structlog import get_logger

from .exceptions import BackendError, BackendTimeoutError, ConnectionFailedError
from .schemas import InvocationResult, JSONRPCRequest, JSONRPCResponse

logger = get_logger()

# Default timeout for backend requests
DEFAULT_TIMEOUT_SECONDS = 30.0
PROTOCOL_VERSION = "2024-11-05"


class HttpTransport:
    """Talks JSON-RPC 2.0 to a backend over HTTP POST.

    Each call is one HTTP exchange, so responses are paired with their
    request by construction.

    Args:
        backend_id: Backend identifier, used in errors and logs.
        url: JSON-RPC endpoint of the backend.
        headers: Extra headers sent with every request.
        timeout: Per-request timeout in seconds.
        client: Optional shared client; one is created (and owned) otherwise.
    """

    def __init__(
        self,
        backend_id: str,
        url: str,
        headers: dict[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.backend_id = backend_id
        self.url = url
        self.headers = headers or {}
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _post(self, method: str, params: dict[str, Any] | None = None) -> Any:
        """Send one JSON-RPC request and return its result.

        Raises:
            BackendTimeoutError: If backend doesn't respond in time.
            BackendError: If the backend is unreachable, returns an HTTP error
                status, a malformed body, or a JSON-RPC error object.
        """
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=None)

        request_id = str(uuid.uuid4())
        rpc_request = JSONRPCRequest(method=method, params=params, id=request_id)
        headers = {
            "Content-Type": "application/json",
            "X-Request-ID": request_id,
            **self.headers,
        }

        try:
            response = await self._client.post(
                self.url,
                json=rpc_request.model_dump(exclude_none=True),
                headers=headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException:
            raise BackendTimeoutError(backend_id=self.backend_id, timeout_seconds=self.timeout)
        except httpx.RequestError as e:
            raise BackendError(backend_id=self.backend_id, detail=f"Request failed: {e}")

        # Handle HTTP-level errors
        if response.status_code >= 400:
            raise BackendError(
                backend_id=self.backend_id,
                status_code=response.status_code,
                detail=response.text[:200],  # Truncate for safety
            )

        try:
            rpc_response = JSONRPCResponse(**response.json())
        except (ValueError, TypeError, ValidationError) as e:
            raise BackendError(backend_id=self.backend_id, detail=f"Malformed response: {e}")

        if rpc_response.id is not None and rpc_response.id != request_id:
            raise BackendError(
                backend_id=self.backend_id,
                detail=f"Response id {rpc_response.id!r} does not match request id {request_id!r}",
            )
        if rpc_response.error is not None:
            raise BackendError(
                backend_id=self.backend_id,
                status_code=rpc_response.error.code,
                detail=rpc_response.error.message,
            )
        return rpc_response.result

    async def start(self) -> None:
        try:
            await self._post(
                "initialize",
                {
                    "protocolVersion": PROTOCOL_VERSION,
                    "capabilities": {},
                    "clientInfo": {"name": "plugin-gateway", "version": "0.1.0"},
                },
            )
        except (BackendError, BackendTimeoutError) as e:
            raise ConnectionFailedError(backend_id=self.backend_id, reason=e.message) from e
        logger.info("http_backend_started", backend_id=self.backend_id, url=self.url)

    async def describe_capabilities(self) -> list[dict[str, Any]]:
        result = await self._post("tools/list", {})
        tools = (result or {}).get("tools") if isinstance(result, dict) else None
        if not isinstance(tools, list):
            raise BackendError(backend_id=self.backend_id, detail="tools/list result has no 'tools' list")
        return tools

    async def invoke(self, name: str, arguments: dict[str, Any]) -> InvocationResult:
        result = await self._post("tools/call", {"name": name, "arguments": arguments})
        if not isinstance(result, dict):
            raise BackendError(backend_id=self.backend_id, detail="tools/call result is not an object")
        return InvocationResult(**result)

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
        logger.info("http_backend_closed", backend_id=self.backend_id)
