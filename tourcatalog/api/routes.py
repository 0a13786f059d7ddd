"""FastAPI route definitions for the tourcatalog API.

Catalog endpoints are gated on the readiness register: while the catalog
is loading they redirect to a waiting page, and after a failed load they
answer 503 until the refresh scheduler gets a clean run.  All singletons
are resolved from ``app.state`` via FastAPI's ``Depends`` using the
``Annotated`` pattern.

# ─── GATING ───────────────────────────────────────────────────────────
#
#   LOADING → 303 to /api/v1/loading?requested=<original path>
#             The loading page answers with "Refresh: 1; url=<requested>",
#             so the browser polls until the catalog is ready.
#   FAILED  → 503 "Service temporarily unavailable, retrying"
#             plus "Retry-After: 1" (the scheduler retries every second).
#   LOADED  → the handler runs.
#
# /health, /status and /refresh are never gated.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from tourcatalog.api.schemas import (
    ArtistListResponse,
    HealthResponse,
    LoadingResponse,
    RefreshResponse,
    StatusResponse,
)
from tourcatalog.models.catalog import ArtistDetails
from tourcatalog.models.status import LoadingStatus, LoadState
from tourcatalog.pipeline.catalog_store import CatalogStore
from tourcatalog.pipeline.scheduler import RefreshScheduler
from tourcatalog.pipeline.status_register import StatusRegister
from tourcatalog.services.catalog_lookup import CatalogLookupService
from tourcatalog.utils.errors import CatalogLookupError, CatalogUnavailableError
from tourcatalog.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

LOADING_PATH = "/api/v1/loading"
UNAVAILABLE_DETAIL = "Service temporarily unavailable, retrying"
_DEFAULT_REQUESTED = "/api/v1/artists"


# ---------------------------------------------------------------------------
# Dependency injection helpers: resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def _get_status_register(request: Request) -> StatusRegister:
    return request.app.state.status_register


def _get_lookup_service(request: Request) -> CatalogLookupService:
    return request.app.state.lookup_service


def _get_scheduler(request: Request) -> RefreshScheduler:
    return request.app.state.scheduler


StoreDep = Annotated[CatalogStore, Depends(_get_store)]
StatusDep = Annotated[StatusRegister, Depends(_get_status_register)]
LookupDep = Annotated[CatalogLookupService, Depends(_get_lookup_service)]
SchedulerDep = Annotated[RefreshScheduler, Depends(_get_scheduler)]


def _safe_target(requested: str | None) -> str:
    """Only same-site absolute paths may be redirected to.

    Browsers read ``/\\host`` like ``//host``, so both are refused.  The
    result is percent-encoded so it is safe to place in a header.
    """
    if not requested or not requested.startswith("/") or requested[1:2] in ("/", "\\"):
        return _DEFAULT_REQUESTED
    return quote(requested, safe="/?=&%")


def _unavailable() -> CatalogUnavailableError:
    # ErrorHandlingMiddleware answers 503 with "Retry-After: 1".
    return CatalogUnavailableError(message=UNAVAILABLE_DETAIL)


def require_loaded(request: Request, status: StatusDep) -> None:
    """Gate a catalog endpoint on the readiness register."""
    state = status.state
    if state is LoadState.FAILED:
        raise _unavailable()
    if state is not LoadState.LOADED:
        # Unknown (no flag set) is treated the same as Loading.
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        raise HTTPException(
            status_code=303,
            detail="Catalog is loading",
            headers={"Location": f"{LOADING_PATH}?requested={quote(target, safe='')}"},
        )


LoadedGate = Depends(require_loaded)


def _status_response(status: LoadingStatus) -> StatusResponse:
    state = status.state
    return StatusResponse(
        state=state.value if state else None,
        is_loading=status.is_loading,
        is_loaded=status.is_loaded,
        has_failed=status.has_failed,
    )


# ---------------------------------------------------------------------------
# Service endpoints
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse, summary="Liveness and catalog counts")
async def health(store: StoreDep, status: StatusDep) -> HealthResponse:
    snapshot = store.snapshot()
    return HealthResponse(
        catalog=_status_response(status.get_status()),
        counts=snapshot.counts(),
        last_updated={kind.value: ts.isoformat() for kind, ts in snapshot.updated_at.items()},
    )


@router.get("/status", response_model=StatusResponse, summary="Catalog readiness flags")
async def get_status(status: StatusDep) -> StatusResponse:
    return _status_response(status.get_status())


@router.get("/loading", summary="Waiting page shown while the catalog loads")
async def loading_page(
    status: StatusDep,
    requested: Annotated[str | None, Query()] = None,
) -> Response:
    """Send the client on once loaded; otherwise ask it to poll again in 1 s."""
    target = _safe_target(requested)
    state = status.state
    if state is LoadState.LOADED:
        return RedirectResponse(url=target, status_code=303)
    if state is LoadState.FAILED:
        raise _unavailable()
    body = LoadingResponse(requested=target)
    return JSONResponse(content=body.model_dump(), headers={"Refresh": f"1; url={target}"})


@router.post("/refresh", response_model=RefreshResponse, summary="Run one ingestion pass now")
async def refresh(scheduler: SchedulerDep, status: StatusDep) -> RefreshResponse:
    """Run a refresh in the request and report the per-kind errors.

    Not de-duplicated against the scheduler: a refresh already in flight
    keeps running and whichever finishes last sets the final state.
    """
    logger.info("manual_refresh_requested")
    errors = await scheduler.refresh_once()
    state = status.state
    return RefreshResponse(
        state=state.value if state else LoadState.LOADING.value,
        errors=[str(error) for error in errors],
    )


# ---------------------------------------------------------------------------
# Catalog endpoints (gated)
# ---------------------------------------------------------------------------


@router.get(
    "/artists",
    response_model=ArtistListResponse,
    dependencies=[LoadedGate],
    summary="All artists in the catalog",
)
async def list_artists(lookup: LookupDep) -> ArtistListResponse:
    artists = list(lookup.list_artists())
    return ArtistListResponse(artists=artists, total=len(artists))


@router.get(
    "/artists/{artist_id}",
    response_model=ArtistDetails,
    dependencies=[LoadedGate],
    summary="One artist with locations, dates and sorted relations",
)
async def get_artist(artist_id: int, lookup: LookupDep) -> ArtistDetails:
    try:
        return lookup.get_artist_details(artist_id)
    except CatalogLookupError as exc:
        logger.info("artist_not_found", artist_id=artist_id, reason=exc.message)
        raise HTTPException(status_code=404, detail=exc.message) from exc
