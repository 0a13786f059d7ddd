"""Catalog records decoded from the upstream tour API.

Defines Pydantic v2 models for the four upstream resource collections:
artists, tour locations, concert dates, and date/location relations.  All
models use frozen config so a collection handed to a request handler can
never be mutated underneath another reader.

Field names follow Python conventions; the upstream camelCase keys are
accepted through aliases (``creationDate`` -> ``creation_date``).

Validation is deliberately shallow.  The ingestion layer only requires that
a body is JSON of the expected shape: every record field has a zero default,
ids of 0 or below are accepted, and empty strings / lists pass through.
Type mismatches (``"members": 5``) still fail and surface as a
``DecodeError`` one layer up.

Key relationships (by ``id``):
    - Artist.id == Location.id == ConcertDates.id == Relation.id
    - Artist.locations / concert_dates / relations hold upstream URLs of the
      matching records, not the records themselves
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _Record(BaseModel):
    """Shared config for every upstream record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Artist(_Record):
    """An artist or band as listed by the upstream ``/artists`` endpoint."""

    id: int = 0
    image: str = ""
    name: str = ""
    members: list[str] = Field(default_factory=list)
    creation_date: int = Field(default=0, alias="creationDate")
    first_album: str = Field(default="", alias="firstAlbum")
    # Upstream URLs of the matching Location / ConcertDates / Relation records.
    locations: str = ""
    concert_dates: str = Field(default="", alias="concertDates")
    relations: str = ""


class Location(_Record):
    """Tour locations for one artist (``/locations``)."""

    id: int = 0
    locations: list[str] = Field(default_factory=list)
    dates: str = ""


class ConcertDates(_Record):
    """Concert dates for one artist (``/dates``).

    Dates are kept exactly as sent (``"*23-08-2019"``); see
    :mod:`tourcatalog.utils.text_normalizer` for parsing.
    """

    id: int = 0
    dates: list[str] = Field(default_factory=list)


class Relation(_Record):
    """Mapping of location slug -> concert dates for one artist (``/relation``).

    ``sorted_locations`` is never sent by the upstream API.  It is filled in
    by :func:`tourcatalog.services.catalog_lookup.process_relation` on a
    processed copy.
    """

    id: int = 0
    dates_locations: dict[str, list[str]] = Field(default_factory=dict, alias="datesLocations")
    sorted_locations: list[str] = Field(default_factory=list, alias="sortedLocations")


# ---------------------------------------------------------------------------
# Index envelopes -- Locations / Dates / Relations arrive wrapped in
# {"index": [...]}.  The ``index`` key is required.
# ---------------------------------------------------------------------------


class LocationIndex(_Record):
    index: list[Location]


class DatesIndex(_Record):
    index: list[ConcertDates]


class RelationIndex(_Record):
    index: list[Relation]


class ArtistDetails(BaseModel):
    """Everything the artist detail view needs, bundled from the four collections."""

    model_config = ConfigDict(frozen=True)

    artist: Artist
    locations: Location
    dates: ConcertDates
    relations: Relation
