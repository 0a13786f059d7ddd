"""Ingestion pipeline value types: resource kinds and fetch outcomes.

``ResourceKind`` is the fixed set of upstream collections.  Each kind knows
the name of its fetch operation (used in error messages and logs) and the
default path of its endpoint.

``FetchOutcome`` is the transient result of one
:class:`~tourcatalog.pipeline.retry.RetryingFetchTask` run.  It is
produced exactly once per task and consumed exactly once by the
orchestrator; it holds either ``records`` or ``error``, never both.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ResourceKind(str, Enum):  # noqa: UP042 (StrEnum requires Python 3.11+)
    """The four upstream resource collections."""

    ARTISTS = "artists"
    LOCATIONS = "locations"
    DATES = "dates"
    RELATIONS = "relations"

    @property
    def operation_name(self) -> str:
        """Name of the fetch operation, e.g. ``"FetchArtists"``."""
        return f"Fetch{self.value.capitalize()}"

    @property
    def default_path(self) -> str:
        # The upstream API serves relations under the singular "/relation".
        if self is ResourceKind.RELATIONS:
            return "/relation"
        return f"/{self.value}"


@dataclass(frozen=True)
class FetchOutcome:
    """Result of fetching one resource kind, after retries.

    Attributes
    ----------
    kind:
        Which collection was fetched.
    records:
        The decoded collection on success, ``None`` on failure.
    error:
        The terminal error (``RetryExhaustedError`` / ``FetchTimeoutError``)
        on failure, ``None`` on success.
    attempts:
        How many fetch attempts were started.
    """

    kind: ResourceKind
    records: tuple[Any, ...] | None = None
    error: BaseException | None = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and self.records is not None
