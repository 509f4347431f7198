import asyncio
from contextlib import asynccontextmanager, suppress
from datetime import timedelta

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from structlog import get_logger

from .config import Settings, get_settings
from .exceptions import PluginGatewayError
from .logging_config import configure_logging
from .backends.config import BackendRegistryConfig, load_backend_registry
from .backends.factory import make_transport_factory
from .exposure.schemas import ScoringWeights
from .gateway.service import Gateway
from .gateway.router import router as gateway_router
from .sessions.router import router as sessions_router
from .sessions.sweeper import run_session_sweeper
from .mcp_transport.router import router as mcp_router

logger = get_logger()

settings = get_settings()

# HTTP status per PluginGatewayError.code
ERROR_STATUS_CODES: dict[str, int] = {
    "DUPLICATE_OPERATION": 409,
    "OPERATION_NOT_FOUND": 404,
    "BACKEND_UNAVAILABLE": 503,
    "ALREADY_CONNECTED": 409,
    "INVALID_TRANSITION": 409,
    "CONNECTION_FAILED": 502,
    "BACKEND_TIMEOUT": 504,
    "BACKEND_ERROR": 502,
    "SESSION_NOT_FOUND": 404,
    "SESSION_EXISTS": 409,
    "RECORD_NOT_FOUND": 404,
}


def build_gateway(
    settings: Settings,
    registry: BackendRegistryConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> Gateway:
    """Create a Gateway wired from settings and the backend registry."""
    essential = settings.essential_tools
    if registry is not None and registry.essential_tools is not None:
        essential = registry.essential_tools

    return Gateway(
        transport_factory=make_transport_factory(
            default_timeout=settings.BACKEND_TIMEOUT_SECONDS,
            http_client=http_client,
        ),
        essential_names=essential,
        weights=ScoringWeights(
            name=settings.SCORE_NAME_WEIGHT,
            description=settings.SCORE_DESCRIPTION_WEIGHT,
            keyword=settings.SCORE_KEYWORD_WEIGHT,
            usage=settings.SCORE_USAGE_WEIGHT,
        ),
        default_list_limit=settings.DEFAULT_LIST_LIMIT,
        auto_categorize=settings.AUTO_CATEGORIZATION,
        connect_timeout=settings.BACKEND_CONNECT_TIMEOUT_SECONDS,
    )


async def connect_configured_backends(gateway: Gateway, registry: BackendRegistryConfig) -> int:
    """Connect every configured backend; failures are logged, not raised.

    Returns:
        Number of backends that connected.
    """
    connected = 0
    for config in registry.backends:
        try:
            await gateway.connect(config)
        except PluginGatewayError as e:
            logger.error("backend_startup_failed", backend_id=config.backend_id, error=e.message)
        else:
            connected += 1
    return connected


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)

    # Shared client for http backends; per-transport timeouts apply
    app.state.http_client = httpx.AsyncClient(timeout=None)

    registry = load_backend_registry(settings.BACKENDS_CONFIG_PATH)
    gateway = build_gateway(settings, registry, app.state.http_client)
    app.state.gateway = gateway

    connected = await connect_configured_backends(gateway, registry)
    logger.info("gateway_started", backends_configured=len(registry.backends), backends_connected=connected)

    sweeper = asyncio.create_task(
        run_session_sweeper(
            gateway.sessions,
            interval_seconds=settings.SESSION_SWEEP_INTERVAL_SECONDS,
            max_age=timedelta(seconds=settings.SESSION_MAX_AGE_SECONDS),
        )
    )

    yield

    # Shutdown: stop the sweeper, disconnect backends, close the HTTP client
    sweeper.cancel()
    with suppress(asyncio.CancelledError):
        await sweeper
    await gateway.shutdown()
    await app.state.http_client.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    debug=settings.DEBUG
)


# Global exception handler
@app.exception_handler(PluginGatewayError)
async def gateway_exception_handler(request: Request, exc: PluginGatewayError):
    return JSONResponse(
        status_code=ERROR_STATUS_CODES.get(exc.code, 500),
        content={"error": exc.code, "message": exc.message}
    )


@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME}


# Include routers
app.include_router(gateway_router)
app.include_router(sessions_router)
app.include_router(mcp_router)
