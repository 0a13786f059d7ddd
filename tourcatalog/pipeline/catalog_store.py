"""Process-wide holder of the four current catalog collections.

One field per :class:`ResourceKind`, each an immutable tuple of frozen
records.  The ingestion orchestrator is the only writer; any number of
request handlers read concurrently.

Replacement is whole-field under a lock: a reader gets either the old
tuple or the new one, never a partially-built collection.  There is no
cross-kind atomicity -- after a partial-failure refresh Artists may be
newer than Relations.  Use :meth:`CatalogStore.snapshot` when a consistent
view of all four *as currently stored* is needed.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from tourcatalog.models.catalog import Artist, ConcertDates, Location, Relation
from tourcatalog.models.ingestion import ResourceKind
from tourcatalog.utils.logging import get_logger


@dataclass(frozen=True)
class CatalogSnapshot:
    """All four collections read under one lock acquisition."""

    artists: tuple[Artist, ...] = ()
    locations: tuple[Location, ...] = ()
    dates: tuple[ConcertDates, ...] = ()
    relations: tuple[Relation, ...] = ()
    updated_at: dict[ResourceKind, datetime] = field(default_factory=dict)

    def counts(self) -> dict[str, int]:
        return {
            ResourceKind.ARTISTS.value: len(self.artists),
            ResourceKind.LOCATIONS.value: len(self.locations),
            ResourceKind.DATES.value: len(self.dates),
            ResourceKind.RELATIONS.value: len(self.relations),
        }


class CatalogStore:
    """Thread-safe store of the current collections, one per resource kind."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._collections: dict[ResourceKind, tuple[Any, ...]] = {
            kind: () for kind in ResourceKind
        }
        self._updated_at: dict[ResourceKind, datetime] = {}
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Writer side (ingestion orchestrator only)
    # ------------------------------------------------------------------

    def replace(self, kind: ResourceKind, records: Iterable[Any]) -> None:
        """Swap in a whole new collection for *kind*."""
        collection = tuple(records)
        now = datetime.now(tz=timezone.utc)  # noqa: UP017
        with self._lock:
            self._collections[kind] = collection
            self._updated_at[kind] = now
        self._logger.info("catalog_replaced", kind=kind.value, record_count=len(collection))

    # ------------------------------------------------------------------
    # Reader side
    # ------------------------------------------------------------------

    def get(self, kind: ResourceKind) -> tuple[Any, ...]:
        with self._lock:
            return self._collections[kind]

    @property
    def artists(self) -> tuple[Artist, ...]:
        return self.get(ResourceKind.ARTISTS)

    @property
    def locations(self) -> tuple[Location, ...]:
        return self.get(ResourceKind.LOCATIONS)

    @property
    def dates(self) -> tuple[ConcertDates, ...]:
        return self.get(ResourceKind.DATES)

    @property
    def relations(self) -> tuple[Relation, ...]:
        return self.get(ResourceKind.RELATIONS)

    def last_updated(self, kind: ResourceKind) -> datetime | None:
        """When *kind* was last replaced, or ``None`` if never."""
        with self._lock:
            return self._updated_at.get(kind)

    def snapshot(self) -> CatalogSnapshot:
        with self._lock:
            return CatalogSnapshot(
                artists=self._collections[ResourceKind.ARTISTS],
                locations=self._collections[ResourceKind.LOCATIONS],
                dates=self._collections[ResourceKind.DATES],
                relations=self._collections[ResourceKind.RELATIONS],
                updated_at=dict(self._updated_at),
            )
