"""Abstract base class for upstream catalog sources.

Defines the contract the ingestion pipeline uses to pull one resource
collection from wherever the catalog comes from.  The HTTP implementation
lives in :mod:`tourcatalog.providers.upstream.http_catalog_provider`;
tests substitute in-memory fakes through the same interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from tourcatalog.models.ingestion import ResourceKind


class ICatalogSource(ABC):
    """Contract for fetching one resource collection in a single attempt.

    Implementations perform exactly one request per call.  Retry policy,
    backoff and concurrency belong to the pipeline, not the source.
    """

    @abstractmethod
    async def fetch(self, kind: ResourceKind, timeout: float | None = None) -> tuple[Any, ...]:
        """Fetch and decode the full collection for *kind*.

        Parameters
        ----------
        kind:
            Which collection to fetch.
        timeout:
            Deadline in seconds for this single request.  ``None`` leaves
            the implementation's default in place.

        Returns
        -------
        tuple
            The decoded records, in upstream order.  Never a partial result.

        Raises
        ------
        NetworkError
            The request could not be sent or no response arrived in time.
        StatusError
            The response status was not 200.
        DecodeError
            The body was not JSON of the shape expected for *kind*.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier used in logs and error messages."""
