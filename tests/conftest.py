"""Shared pytest fixtures for the tourcatalog test suite."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import httpx
import pytest

from tourcatalog.config.ingestion import IngestionConfig, UpstreamConfig
from tourcatalog.interfaces.catalog_source import ICatalogSource
from tourcatalog.models.catalog import Artist, ConcertDates, Location, Relation
from tourcatalog.models.ingestion import ResourceKind

UPSTREAM_BASE_URL = "http://upstream.test/api"

# ---------------------------------------------------------------------------
# Upstream response bodies
# ---------------------------------------------------------------------------

ARTISTS_BODY: list[dict[str, Any]] = [
    {
        "id": 1,
        "image": "https://upstream.test/images/queen.jpeg",
        "name": "Queen",
        "members": ["Freddie Mercury", "Brian May", "John Deacon", "Roger Taylor"],
        "creationDate": 1970,
        "firstAlbum": "14-12-1973",
        "locations": "https://upstream.test/api/locations/1",
        "concertDates": "https://upstream.test/api/dates/1",
        "relations": "https://upstream.test/api/relation/1",
    },
    {
        "id": 2,
        "image": "https://upstream.test/images/soja.jpeg",
        "name": "SOJA",
        "members": ["Jacob Hemphill", "Bob Jefferson"],
        "creationDate": 1997,
        "firstAlbum": "05-06-2002",
        "locations": "https://upstream.test/api/locations/2",
        "concertDates": "https://upstream.test/api/dates/2",
        "relations": "https://upstream.test/api/relation/2",
    },
]

LOCATIONS_BODY: dict[str, Any] = {
    "index": [
        {
            "id": 1,
            "locations": ["north_carolina-usa", "georgia-usa", "osaka-japan"],
            "dates": "https://upstream.test/api/dates/1",
        },
        {
            "id": 2,
            "locations": ["playa_del_carmen-mexico"],
            "dates": "https://upstream.test/api/dates/2",
        },
    ]
}

DATES_BODY: dict[str, Any] = {
    "index": [
        {"id": 1, "dates": ["*23-08-2019", "*22-08-2019", "*28-01-2020"]},
        {"id": 2, "dates": ["*05-12-2019"]},
    ]
}

RELATIONS_BODY: dict[str, Any] = {
    "index": [
        {
            "id": 1,
            "datesLocations": {
                "north_carolina-usa": ["22-08-2019"],
                "georgia-usa": ["23-08-2019"],
                "osaka-japan": ["28-01-2020"],
            },
        },
        {
            "id": 2,
            "datesLocations": {"playa_del_carmen-mexico": ["05-12-2019"]},
        },
    ]
}

UPSTREAM_BODIES: dict[str, Any] = {
    "/api/artists": ARTISTS_BODY,
    "/api/locations": LOCATIONS_BODY,
    "/api/dates": DATES_BODY,
    "/api/relation": RELATIONS_BODY,
}


def sample_records() -> dict[ResourceKind, tuple[Any, ...]]:
    """The upstream bodies above, decoded into catalog models."""
    return {
        ResourceKind.ARTISTS: tuple(Artist.model_validate(a) for a in ARTISTS_BODY),
        ResourceKind.LOCATIONS: tuple(
            Location.model_validate(item) for item in LOCATIONS_BODY["index"]
        ),
        ResourceKind.DATES: tuple(
            ConcertDates.model_validate(item) for item in DATES_BODY["index"]
        ),
        ResourceKind.RELATIONS: tuple(
            Relation.model_validate(item) for item in RELATIONS_BODY["index"]
        ),
    }


# ---------------------------------------------------------------------------
# Fake catalog source
# ---------------------------------------------------------------------------


class FakeCatalogSource(ICatalogSource):
    """In-memory ICatalogSource with a scripted result per attempt.

    ``script[kind]`` is consumed one entry per ``fetch`` call.  An entry is
    either an exception instance (raised) or an iterable of records
    (returned).  Once the script runs out the last entry repeats.
    """

    def __init__(self, script: dict[ResourceKind, list[Any]] | None = None) -> None:
        records = sample_records()
        self.script: dict[ResourceKind, list[Any]] = {
            kind: [records[kind]] for kind in ResourceKind
        }
        self.script.update(script or {})
        self.calls: dict[ResourceKind, int] = {kind: 0 for kind in ResourceKind}
        self.timeouts: list[float | None] = []

    def get_provider_name(self) -> str:
        return "fake"

    async def fetch(self, kind: ResourceKind, timeout: float | None = None) -> tuple[Any, ...]:
        self.timeouts.append(timeout)
        entries = self.script[kind]
        entry = entries[min(self.calls[kind], len(entries) - 1)]
        self.calls[kind] += 1
        if isinstance(entry, BaseException):
            raise entry
        return tuple(entry)


@pytest.fixture
def fake_source() -> FakeCatalogSource:
    """A catalog source where every kind succeeds on the first attempt."""
    return FakeCatalogSource()


@pytest.fixture
def make_source() -> Callable[..., FakeCatalogSource]:
    """Factory for a FakeCatalogSource with a per-kind attempt script."""

    def _factory(script: dict[ResourceKind, list[Any]] | None = None) -> FakeCatalogSource:
        return FakeCatalogSource(script)

    return _factory


@pytest.fixture
def catalog_records() -> dict[ResourceKind, tuple[Any, ...]]:
    return sample_records()


@pytest.fixture
def recording_sleep() -> AsyncMock:
    """Backoff sleep that returns at once and records each call."""
    return AsyncMock(return_value=None)


@pytest.fixture
def fast_config() -> IngestionConfig:
    """Production retry shape with the waits shrunk to milliseconds."""
    return IngestionConfig(
        max_attempts=3,
        attempt_timeout=1.0,
        retry_backoff=0.0,
        loaded_refresh_interval=0.05,
        failed_refresh_interval=0.01,
        poll_interval=0.01,
    )


# ---------------------------------------------------------------------------
# Mocked upstream HTTP API
# ---------------------------------------------------------------------------


@pytest.fixture
def upstream_config() -> UpstreamConfig:
    return UpstreamConfig(base_url=UPSTREAM_BASE_URL)


@pytest.fixture
def make_upstream_client() -> Callable[..., httpx.AsyncClient]:
    """Factory for an ``httpx.AsyncClient`` served by ``httpx.MockTransport``.

    ``overrides`` maps a request path to either a body (served with 200),
    an ``httpx.Response``, or an exception instance to raise.
    """

    def _factory(overrides: dict[str, Any] | None = None) -> httpx.AsyncClient:
        routes: dict[str, Any] = {**UPSTREAM_BODIES, **(overrides or {})}

        def handler(request: httpx.Request) -> httpx.Response:
            entry = routes.get(request.url.path)
            if entry is None:
                return httpx.Response(404, text="not found")
            if isinstance(entry, BaseException):
                raise entry
            if isinstance(entry, httpx.Response):
                # Fresh copy per request so retries never share a response.
                return httpx.Response(entry.status_code, content=entry.content, headers=entry.headers)
            return httpx.Response(
                200,
                content=json.dumps(entry).encode(),
                headers={"Content-Type": "application/json"},
            )

        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _factory
