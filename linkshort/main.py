"""Link Shortener Service - Main FastAPI Application.

Maps long URLs to short codes and resolves them back:
- Create links
- Look up links
- Redirect short codes to their original URL
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from opentelemetry import metrics, trace

from .api.routes import health_router, links_router
from .core.config import DatabaseBackend, Settings, get_settings
from .core.database import LinkStore, MemoryLinkStore, SQLiteLinkStore
from .core.logging_config import setup_logging
from .core.postgres import PostgresLinkStore
from .middleware.logging import LoggingMiddleware

logger = logging.getLogger(__name__)


def build_store(settings: Settings, tracer: Optional[trace.Tracer] = None) -> LinkStore:
    """Create the link store selected by the settings."""
    timeouts = {
        "write_timeout": settings.write_timeout,
        "read_timeout": settings.read_timeout,
        "tracer": tracer,
    }
    if settings.database_backend == DatabaseBackend.memory:
        return MemoryLinkStore(**timeouts)
    if settings.database_backend == DatabaseBackend.sqlite:
        return SQLiteLinkStore(settings.sqlite_path, **timeouts)

    for name in settings.missing_postgres_settings():
        logger.error(f"Required environment variable is empty or does not exist: {name}")
    return PostgresLinkStore(settings.connection_string, **timeouts)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_title}...")

    if app.state.store is None:
        app.state.store = build_store(settings, tracer=app.state.tracer)
        logger.info(f"Using {settings.database_backend.value} link store")
    if settings.create_schema:
        await app.state.store.init_db()

    yield

    logger.info("Shutting down link shortener service...")
    await app.state.store.close()


def create_app(
    store: Optional[LinkStore] = None,
    settings: Optional[Settings] = None,
    tracer: Optional[trace.Tracer] = None,
    meter: Optional[metrics.Meter] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Link store to serve from. Built from settings at startup
            when omitted.
        settings: Application settings. Loaded from the environment when
            omitted.
        tracer: Tracer for request, handler and store spans. No-op when
            omitted.
        meter: Meter for the request counter and duration histogram.
            No-op when omitted.

    Returns:
        Configured FastAPI app.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_title,
        description=settings.app_description,
        version=settings.app_version,
        lifespan=lifespan,
        # Kept under /api so generated docs never shadow a short code
        docs_url="/api/docs",
        redoc_url=None,
        openapi_url="/api/openapi.json",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.tracer = tracer or trace.NoOpTracer()

    app.add_middleware(LoggingMiddleware, tracer=app.state.tracer, meter=meter)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """General exception handler."""
        logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "error_code": "500"},
        )

    # Readiness and API routes must be registered before the /{short} catch-all
    app.include_router(health_router)
    app.include_router(links_router)

    return app


def main() -> None:
    """Run the service under uvicorn until interrupted."""
    settings = get_settings()
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    app = create_app(
        settings=settings,
        tracer=trace.get_tracer("linkshort"),
        meter=metrics.get_meter("linkshort"),
    )

    # uvicorn stops accepting connections on SIGINT/SIGTERM and waits up to
    # timeout_graceful_shutdown for in-flight requests
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=settings.shutdown_timeout,
    )
