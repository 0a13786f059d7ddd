"""tourcatalog FastAPI application entry point.

Wires together the upstream provider, the ingestion pipeline, the refresh
scheduler and the routes via dependency injection.  Loads configuration
from ``.env`` and ``config/config.yaml`` and configures structured logging.

# ─── STARTUP SEQUENCE ─────────────────────────────────────────────────
#
#   1. _build_all()       store + status register (Loading) + pipeline
#   2. lifespan start     launch the first ingestion run in the background
#                         and start the refresh scheduler loop
#   3. serve requests     catalog routes redirect to /loading until the
#                         first run finishes
#   4. lifespan stop      set the stop event (the scheduler cancels its own
#                         in-flight refresh), cancel the first run if still
#                         going, close the shared httpx client
#
# The server starts accepting requests before any data is loaded.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from tourcatalog import __version__
from tourcatalog.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from tourcatalog.api.routes import router as api_router
from tourcatalog.config.loader import build_ingestion_config, build_upstream_config, load_config
from tourcatalog.config.settings import Settings
from tourcatalog.pipeline.catalog_store import CatalogStore
from tourcatalog.pipeline.orchestrator import CatalogIngestionPipeline
from tourcatalog.pipeline.scheduler import RefreshScheduler
from tourcatalog.pipeline.status_register import StatusRegister
from tourcatalog.providers.upstream.http_catalog_provider import HttpCatalogProvider
from tourcatalog.services.catalog_lookup import CatalogLookupService
from tourcatalog.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def _build_all(app_settings: Settings, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every component of the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    ingestion = build_ingestion_config(app_config)
    upstream = build_upstream_config(app_config)

    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=app_settings.upstream_timeout)

    source = HttpCatalogProvider(
        http_client=http_client,
        upstream=upstream,
        provider_name=app_settings.upstream_provider_name,
        user_agent=app_settings.upstream_user_agent,
    )

    # -- Shared state: written by ingestion, read by handlers --
    store = CatalogStore()
    status_register = StatusRegister()

    pipeline = CatalogIngestionPipeline(source=source, store=store, config=ingestion)
    scheduler = RefreshScheduler(pipeline=pipeline, status=status_register, config=ingestion)

    return {
        "http_client": http_client,
        "source": source,
        "store": store,
        "status_register": status_register,
        "pipeline": pipeline,
        "scheduler": scheduler,
        "lookup_service": CatalogLookupService(store=store),
        "stop_event": asyncio.Event(),
        "ingestion_config": ingestion,
        "upstream_config": upstream,
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Start background ingestion on startup, stop it and clean up on shutdown."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    scheduler: RefreshScheduler = components["scheduler"]
    stop_event: asyncio.Event = components["stop_event"]

    # Loading is already set; the scheduler polls until this first run ends.
    initial_load = asyncio.create_task(scheduler.refresh_once(), name="initial_load")
    refresh_loop = asyncio.create_task(scheduler.run(stop_event), name="refresh_scheduler")

    _logger.info(
        "app_startup",
        version=__version__,
        environment=settings.app_env,
        upstream=components["upstream_config"].base_url,
    )

    yield

    # -- Shutdown: stop background work, close shared httpx client --
    stop_event.set()
    if not initial_load.done():
        initial_load.cancel()
    for task in (initial_load, refresh_loop):
        with contextlib.suppress(asyncio.CancelledError):
            await task

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="Background ingestion stopped, HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="tourcatalog API",
        version=__version__,
        description=(
            "Read-mostly catalog of artists, tour locations and concert dates, "
            "mirrored from an upstream tour API and refreshed in the background."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def run() -> None:
    """Serve the application with uvicorn (``tourcatalog-serve``)."""
    uvicorn.run(
        "tourcatalog.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )


if __name__ == "__main__":
    run()
