"""Pydantic response schemas for the tourcatalog API.

Convention: response schemas end with "Response".  Catalog records are
returned as the frozen domain models themselves; these schemas only wrap
status and bookkeeping.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from tourcatalog.models.catalog import Artist


class ErrorResponse(BaseModel):
    """Sanitized error body returned for application errors."""

    error: str
    detail: str


class StatusResponse(BaseModel):
    """Current readiness flags plus the single derived state."""

    state: str | None
    is_loading: bool
    is_loaded: bool
    has_failed: bool


class HealthResponse(BaseModel):
    """Liveness plus what the catalog currently holds."""

    status: str = "ok"
    catalog: StatusResponse
    counts: dict[str, int] = Field(default_factory=dict)
    last_updated: dict[str, str] = Field(default_factory=dict)


class LoadingResponse(BaseModel):
    message: str = "Loading data..."
    requested: str = "/"


class ArtistListResponse(BaseModel):
    artists: list[Artist]
    total: int


class RefreshResponse(BaseModel):
    """Outcome of a manually triggered refresh."""

    state: str
    errors: list[str] = Field(default_factory=list)
