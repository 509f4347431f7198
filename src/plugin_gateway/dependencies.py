"""Global dependencies for the application."""

from typing import TYPE_CHECKING

from fastapi import Request

from plugin_gateway.config import Settings, get_settings

if TYPE_CHECKING:
    from plugin_gateway.gateway.service import Gateway
    from plugin_gateway.sessions.service import SessionTracker


async def get_gateway(request: Request) -> "Gateway":
    """Dependency to get the gateway built during application startup.

    The gateway is created in main.py lifespan and shared across requests
    so every caller sees the same catalog and backend connections.

    Args:
        request: The FastAPI request object.

    Returns:
        The shared Gateway instance.
    """
    return request.app.state.gateway


async def get_session_tracker(request: Request) -> "SessionTracker":
    """Dependency to get the gateway's session tracker."""
    return request.app.state.gateway.sessions


def get_app_settings() -> Settings:
    return get_settings()
