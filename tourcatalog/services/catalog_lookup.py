"""Read-side lookups over the current catalog.

Request handlers never index the store directly; they go through
:class:`CatalogLookupService`, which finds records by artist id and
prepares relations for display.

Relation processing works on a copy.  The records in the store are frozen
and shared by every concurrent reader, so formatting location names and
sorting dates must never touch them in place.

Processing a relation:

    1. Location keys are formatted  ("new-york-usa" -> "New York, USA").
    2. Dates under each location are sorted newest first; dates that do
       not parse go last in their upstream order.
    3. ``sorted_locations`` lists locations by their newest date, newest
       first, leaving out locations with no dates.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

from tourcatalog.models.catalog import Artist, ArtistDetails, ConcertDates, Location, Relation
from tourcatalog.pipeline.catalog_store import CatalogStore
from tourcatalog.utils.errors import CatalogLookupError
from tourcatalog.utils.text_normalizer import concert_date_sort_key, format_location_name

_R = TypeVar("_R")


def _find_by_id(records: Iterable[_R], record_id: int) -> _R | None:
    for record in records:
        if getattr(record, "id", None) == record_id:
            return record
    return None


def format_locations(dates_locations: dict[str, list[str]]) -> dict[str, list[str]]:
    """Return a copy with every location key formatted for display.

    Two raw keys that format to the same name have their dates merged.
    """
    formatted: dict[str, list[str]] = {}
    for raw, dates in dates_locations.items():
        formatted.setdefault(format_location_name(raw), []).extend(dates)
    return formatted


def sort_dates_in_locations(dates_locations: dict[str, list[str]]) -> dict[str, list[str]]:
    """Return a copy with each location's dates sorted newest first."""
    return {
        location: sorted(dates, key=concert_date_sort_key)
        for location, dates in dates_locations.items()
    }


def sort_locations_by_date(dates_locations: dict[str, list[str]]) -> list[str]:
    """Order locations by their first (newest) date, newest first.

    Expects dates already sorted by :func:`sort_dates_in_locations`.
    Locations without dates are excluded.
    """
    with_dates = [location for location, dates in dates_locations.items() if dates]
    return sorted(with_dates, key=lambda location: concert_date_sort_key(dates_locations[location][0]))


def process_relation(relation: Relation) -> Relation:
    """Return a display-ready copy of *relation*; the original is untouched."""
    dates_locations = sort_dates_in_locations(format_locations(relation.dates_locations))
    return relation.model_copy(
        update={
            "dates_locations": dates_locations,
            "sorted_locations": sort_locations_by_date(dates_locations),
        }
    )


class CatalogLookupService:
    """Look up catalog records by artist id.

    Parameters
    ----------
    store:
        The shared catalog store.  Only read from.
    """

    def __init__(self, store: CatalogStore) -> None:
        self._store = store

    def list_artists(self) -> tuple[Artist, ...]:
        return self._store.artists

    def get_artist(self, artist_id: int) -> Artist:
        return self._require(self._store.artists, artist_id, f"Artist ID {artist_id} not found")

    def get_locations(self, artist_id: int) -> Location:
        return self._require(
            self._store.locations, artist_id, f"No locations found for ID {artist_id}"
        )

    def get_dates(self, artist_id: int) -> ConcertDates:
        return self._require(self._store.dates, artist_id, f"No dates found for ID {artist_id}")

    def get_relations(self, artist_id: int) -> Relation:
        """Return the processed relation for *artist_id*."""
        relation = self._require(
            self._store.relations, artist_id, f"No relations found for ID {artist_id}"
        )
        return process_relation(relation)

    def get_artist_details(self, artist_id: int) -> ArtistDetails:
        """Bundle the artist with its locations, dates and processed relations.

        Raises
        ------
        CatalogLookupError
            If any of the four records is missing.
        """
        return ArtistDetails(
            artist=self.get_artist(artist_id),
            locations=self.get_locations(artist_id),
            dates=self.get_dates(artist_id),
            relations=self.get_relations(artist_id),
        )

    @staticmethod
    def _require(records: Iterable[Any], record_id: int, message: str) -> Any:
        record = _find_by_id(records, record_id)
        if record is None:
            raise CatalogLookupError(message=message)
        return record
