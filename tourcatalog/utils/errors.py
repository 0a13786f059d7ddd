"""Custom exception hierarchy for tourcatalog.

All application exceptions inherit from :class:`TourCatalogError`, which
carries an optional ``provider_name`` so error handlers can identify which
upstream source (e.g. "groupietrackers") caused the failure.

The hierarchy is organized by pipeline layer:

    TourCatalogError  (base -- catch-all for any tourcatalog error)
    +-- CatalogFetchError        (one fetch attempt against the upstream API)
    |   +-- NetworkError         (transport failure or per-attempt timeout)
    |   +-- StatusError          (upstream answered with a non-200 status)
    |   +-- DecodeError          (body is not JSON of the expected shape)
    +-- RetryExhaustedError      (every attempt for one resource kind failed)
    +-- FetchTimeoutError        (the enclosing task deadline expired)
    +-- CatalogUnavailableError  (data requested while loading / failed)
    +-- CatalogLookupError       (record id not present in the catalog)
    +-- ConfigurationError       (startup / invalid ingestion settings)

Only the per-attempt errors are retried.  ``RetryExhaustedError`` and
``FetchTimeoutError`` are the values the ingestion orchestrator collects
into its aggregate error list; they are returned, not raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tourcatalog.models.ingestion import ResourceKind


class TourCatalogError(Exception):
    """Base exception for all tourcatalog errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which upstream source triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[groupietrackers] API unexpected status: 500``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Single-attempt fetch errors (retried by RetryingFetchTask)
# ---------------------------------------------------------------------------

class CatalogFetchError(TourCatalogError):
    """Raised when one fetch attempt for a resource collection fails."""

    def __init__(
        self,
        message: str = "Catalog fetch failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NetworkError(CatalogFetchError):
    """Raised when the request cannot be sent or no response arrives in time."""

    def __init__(
        self,
        message: str = "Network request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StatusError(CatalogFetchError):
    """Raised when the upstream API answers with anything other than 200."""

    def __init__(
        self,
        status_code: int,
        message: str | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._status_code = status_code
        super().__init__(
            message=message or f"API unexpected status: {status_code}",
            provider_name=provider_name,
        )

    @property
    def status_code(self) -> int:
        return self._status_code


class DecodeError(CatalogFetchError):
    """Raised when the response body is not valid JSON of the expected shape."""

    def __init__(
        self,
        message: str = "JSON decode failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Per-kind terminal errors (collected by the orchestrator)
# ---------------------------------------------------------------------------

class RetryExhaustedError(TourCatalogError):
    """Raised when every attempt to fetch one resource kind has failed.

    The message names the kind's fetch operation so an aggregate error list
    is self-describing, e.g. ``FetchArtists failed after 3 attempts: ...``.
    The final per-attempt error is kept on :attr:`last_error`.
    """

    def __init__(
        self,
        kind: ResourceKind,
        attempts: int,
        last_error: BaseException | None = None,
        provider_name: str | None = None,
    ) -> None:
        self._kind = kind
        self._attempts = attempts
        self._last_error = last_error
        super().__init__(
            message=f"{kind.operation_name} failed after {attempts} attempts: {last_error}",
            provider_name=provider_name,
        )

    @property
    def kind(self) -> ResourceKind:
        return self._kind

    @property
    def attempts(self) -> int:
        return self._attempts

    @property
    def last_error(self) -> BaseException | None:
        return self._last_error


class FetchTimeoutError(TourCatalogError):
    """Raised when the enclosing deadline of a fetch task fires mid-retry."""

    def __init__(
        self,
        kind: ResourceKind,
        attempt: int,
        provider_name: str | None = None,
    ) -> None:
        self._kind = kind
        self._attempt = attempt
        super().__init__(
            message=f"{kind.operation_name} timed out on attempt {attempt}",
            provider_name=provider_name,
        )

    @property
    def kind(self) -> ResourceKind:
        return self._kind

    @property
    def attempt(self) -> int:
        return self._attempt


# ---------------------------------------------------------------------------
# Request-side errors
# ---------------------------------------------------------------------------

class CatalogUnavailableError(TourCatalogError):
    """Raised when catalog data is requested while it is loading or failed."""

    def __init__(
        self,
        message: str = "The catalog is temporarily unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class CatalogLookupError(TourCatalogError):
    """Raised when a record id is not present in the current catalog."""

    def __init__(
        self,
        message: str = "Record not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(TourCatalogError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
