"""tourcatalog domain models: re-exports all public model classes.

The models are organized across three submodules by concern:
    - catalog.py   : Upstream records (Artist, Location, ConcertDates, Relation)
    - ingestion.py : Pipeline value types (ResourceKind, FetchOutcome)
    - status.py    : Catalog readiness flags (LoadingStatus, LoadState)
"""

from __future__ import annotations

from tourcatalog.models.catalog import (
    Artist,
    ArtistDetails,
    ConcertDates,
    DatesIndex,
    Location,
    LocationIndex,
    Relation,
    RelationIndex,
)
from tourcatalog.models.ingestion import FetchOutcome, ResourceKind
from tourcatalog.models.status import LoadingStatus, LoadState

__all__ = [
    # catalog
    "Artist",
    "ArtistDetails",
    "ConcertDates",
    "DatesIndex",
    "Location",
    "LocationIndex",
    "Relation",
    "RelationIndex",
    # ingestion
    "FetchOutcome",
    "ResourceKind",
    # status
    "LoadState",
    "LoadingStatus",
]
