"""Background task that expires idle sessions."""

import asyncio
from datetime import timedelta

from structlog import get_logger

from .service import SessionTracker

logger = get_logger()


async def run_session_sweeper(
    tracker: SessionTracker,
    interval_seconds: float,
    max_age: timedelta,
) -> None:
    """Sweep expired sessions every ``interval_seconds`` until cancelled.

    A failing sweep is logged and the loop keeps going.
    """
    logger.info(
        "session_sweeper_started",
        interval_seconds=interval_seconds,
        max_age_seconds=max_age.total_seconds(),
    )
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            tracker.sweep_expired(max_age)
        except Exception:
            logger.exception("session_sweep_failed")
