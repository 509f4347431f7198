"""Builds the transport for a backend launch descriptor."""

from typing import Callable

import httpx

from .base import BackendTransport
from .http import HttpTransport
from .schemas import BackendConfig
from .stdio import StdioTransport

TransportFactory = Callable[[BackendConfig], BackendTransport]


def build_transport(
    config: BackendConfig,
    default_timeout: float = 60.0,
    http_client: httpx.AsyncClient | None = None,
) -> BackendTransport:
    """Create an unstarted transport for a backend.

    Args:
        config: Backend launch descriptor.
        default_timeout: Used when the config has no timeout of its own.
        http_client: Optional shared client for http backends.

    Raises:
        ValueError: For transports that cannot be built from config alone.
    """
    timeout = config.timeout_seconds or default_timeout

    if config.transport == "stdio":
        command = config.command or ""
        args = list(config.args)
        # Unbuffered mode when running Python interpreters
        if command.strip().startswith("python") and "-u" not in args:
            args = ["-u", *args]
        return StdioTransport(
            backend_id=config.backend_id,
            command=command,
            args=args,
            env=config.env,
            cwd=config.cwd,
            timeout=timeout,
        )
    elif config.transport == "http":
        return HttpTransport(
            backend_id=config.backend_id,
            url=config.url or "",
            headers=config.headers,
            timeout=timeout,
            client=http_client,
        )
    else:
        raise ValueError(
            f"Backend '{config.backend_id}' uses transport {config.transport!r}, "
            "which needs an injected transport factory"
        )


def make_transport_factory(
    default_timeout: float = 60.0,
    http_client: httpx.AsyncClient | None = None,
) -> TransportFactory:
    """Bind defaults into a factory suitable for Gateway(transport_factory=...)."""

    def factory(config: BackendConfig) -> BackendTransport:
        return build_transport(config, default_timeout=default_timeout, http_client=http_client)

    return factory
