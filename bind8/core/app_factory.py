"""Application factory for the FastAPI app.

``create_app`` is the composition root: it builds the rate limit store and
the wedding store, hangs them on ``app.state``, and ties the rate limit
reaper to the application lifespan.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from bind8.adapters.rate_limit.in_memory import InMemoryWindowStore
from bind8.adapters.storage.base import AbstractWeddingStore
from bind8.adapters.storage.in_memory import InMemoryWeddingStore
from bind8.api.routes import health_router, rsvp_router, weddings_router
from bind8.core.config import settings, validate_required_env
from bind8.core.exception_handlers import setup_exception_handlers
from bind8.core.logging import configure_logging
from bind8.core.middleware import request_id_middleware
from bind8.core.openapi import apply_openapi_customizations
from bind8.core.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.app.validate_external_config:
        validate_required_env()

    window_store: InMemoryWindowStore = app.state.rate_limiter.store
    window_store.start()
    logger.info("app.startup", extra={"app_env": settings.app_env})
    try:
        yield
    finally:
        await window_store.shutdown()
        logger.info("app.shutdown")


def create_app(
    *,
    window_store: InMemoryWindowStore | None = None,
    wedding_store: AbstractWeddingStore | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        window_store: Rate limit counters; a fresh in-memory store by default.
        wedding_store: Wedding/RSVP storage; in-memory by default.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title=f"{settings.app.name} API",
        description=(
            "Wedding website API: wedding sites with automatic expiration of free "
            "sites, and guest RSVPs. Every /v1 route is rate limited per client IP."
        ),
        version=settings.app.version,
        lifespan=lifespan,
    )

    if window_store is None:
        window_store = InMemoryWindowStore(
            reaper_interval_seconds=settings.app.rate_limit_reaper_interval_seconds,
        )
    if wedding_store is None:
        wedding_store = InMemoryWeddingStore()
    app.state.rate_limiter = RateLimiter(window_store)
    app.state.wedding_store = wedding_store

    app.middleware("http")(request_id_middleware)
    setup_exception_handlers(app)

    app.include_router(weddings_router, prefix="/v1")
    app.include_router(rsvp_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
