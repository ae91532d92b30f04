"""listapp - FastAPI application factory.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ListAppError -> structured JSON error responses
    - AppContext built on startup and released on shutdown via the lifespan
    - A StartupError in the lifespan aborts startup; the server never serves traffic

Design Decisions:
    - Factory over module-level app: settings are injected, tests build their own app
    - Lifespan over @app.on_event: single place for acquire/release of the database
    - Static files mounted after the routes so /static never shadows them
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles

from listapp import __version__
from listapp.api.context import AppContext
from listapp.api.error_handlers import register_error_handlers
from listapp.api.routes import health, items
from listapp.config import Settings, get_settings
from listapp.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)
    if not settings.static_dir.is_dir():
        logger.warning(f"Static directory {settings.static_dir} not found")
    context = await AppContext.create(settings)
    app.state.context = context
    logger.info("listapp started")
    try:
        yield
    finally:
        app.state.context = None
        await context.close()
        logger.info("listapp shut down")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application. Falls back to environment settings."""
    settings = settings or get_settings()
    app = FastAPI(title="listapp", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.context = None

    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.include_router(health.router)
    app.include_router(items.router)

    app.mount(
        "/static",
        StaticFiles(directory=settings.static_dir, check_dir=False),
        name="static",
    )

    register_error_handlers(app)
    return app
