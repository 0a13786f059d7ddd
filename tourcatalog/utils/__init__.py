"""Utility modules for tourcatalog.

- **errors** -- Exception hierarchy rooted at TourCatalogError.  Fetch
  failures (network, status, decode) are what a single attempt raises;
  retry exhaustion and deadline expiry are what a fetch task reports.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text_normalizer** -- Location-name formatting and concert-date parsing
  used when preparing relations for display.
"""

# -- Domain exception hierarchy --------------------------------------------
from tourcatalog.utils.errors import (
    CatalogFetchError,
    CatalogLookupError,
    CatalogUnavailableError,
    ConfigurationError,
    DecodeError,
    FetchTimeoutError,
    NetworkError,
    RetryExhaustedError,
    StatusError,
    TourCatalogError,
)

# -- Structured logging setup ----------------------------------------------
from tourcatalog.utils.logging import bind_ingestion_run, configure_logging, get_logger

# -- Location and date formatting ------------------------------------------
from tourcatalog.utils.text_normalizer import format_location_name, parse_concert_date

__all__ = [
    "CatalogFetchError",
    "CatalogLookupError",
    "CatalogUnavailableError",
    "ConfigurationError",
    "DecodeError",
    "FetchTimeoutError",
    "NetworkError",
    "RetryExhaustedError",
    "StatusError",
    "TourCatalogError",
    "bind_ingestion_run",
    "configure_logging",
    "format_location_name",
    "get_logger",
    "parse_concert_date",
]
