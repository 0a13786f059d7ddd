"""tourcatalog API layer: routes, schemas, and middleware."""

from tourcatalog.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from tourcatalog.api.routes import router
from tourcatalog.api.schemas import (
    ArtistListResponse,
    ErrorResponse,
    HealthResponse,
    LoadingResponse,
    RefreshResponse,
    StatusResponse,
)

__all__ = [
    "ArtistListResponse",
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "HealthResponse",
    "LoadingResponse",
    "RefreshResponse",
    "RequestLoggingMiddleware",
    "StatusResponse",
    "configure_cors",
    "router",
]
