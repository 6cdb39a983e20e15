from __future__ import annotations

"""Application factory for FastAPI app.

Centralizes app construction (state, middleware, handlers, routers) so each
call yields an isolated application with its own database handle and rate
limiter. Tests rely on this to start from empty counters.
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from event_signup import __version__
from event_signup.adapters.rate_limit.base import AbstractRateLimiter
from event_signup.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from event_signup.api.routes import (
    admin_router,
    content_router,
    health_router,
    participants_router,
    settings_router,
    sponsors_router,
    volunteers_router,
)
from event_signup.core.config import settings
from event_signup.core.exception_handlers import setup_exception_handlers
from event_signup.core.logging import configure_logging
from event_signup.core.middleware import request_id_middleware
from event_signup.core.openapi import TAGS_METADATA, apply_openapi_customizations
from event_signup.core.rate_limit import run_periodic_sweep
from event_signup.db.database import Database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the rate limiter sweep for the lifetime of the server."""
    sweeper = app.state.rate_limit_sweeper = asyncio.create_task(
        run_periodic_sweep(
            app.state.rate_limiter,
            settings.app.rate_limit_sweep_interval_seconds,
        )
    )
    logger.info(
        "app.started",
        extra={"sweep_interval_s": settings.app.rate_limit_sweep_interval_seconds},
    )
    try:
        yield
    finally:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        app.state.db.dispose()
        logger.info("app.stopped")


def create_app(
    *,
    database: Database | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        database: Database handle; built from settings when omitted.
        rate_limiter: Limiter shared by all routes of this app; a fresh
            in-memory limiter when omitted.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Event Signup API",
        description=(
            "Registration backend for a charity pickleball tournament: "
            "participant and volunteer sign-up, sponsor listing, editable "
            "page content and event settings, with admin management routes."
        ),
        version=__version__,
        openapi_tags=TAGS_METADATA,
        debug=settings.app.debug,
        lifespan=lifespan,
    )

    app.state.db = database or Database(settings.db.url, echo=settings.db.echo)
    app.state.db.create_all()
    app.state.rate_limiter = rate_limiter or InMemoryFixedWindowRateLimiter()

    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    for router in (
        participants_router,
        volunteers_router,
        sponsors_router,
        content_router,
        settings_router,
        admin_router,
    ):
        app.include_router(router, prefix="/api")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
