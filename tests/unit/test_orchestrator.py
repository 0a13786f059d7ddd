"""Unit tests for CatalogIngestionPipeline fan-out / fan-in."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from tourcatalog.interfaces.catalog_source import ICatalogSource
from tourcatalog.models.catalog import Artist
from tourcatalog.models.ingestion import ResourceKind
from tourcatalog.pipeline.catalog_store import CatalogStore
from tourcatalog.pipeline.orchestrator import CatalogIngestionPipeline
from tourcatalog.providers.upstream.http_catalog_provider import HttpCatalogProvider
from tourcatalog.utils.errors import (
    NetworkError,
    RetryExhaustedError,
    StatusError,
    TourCatalogError,
)


class _CrashingSource(ICatalogSource):
    """Raises a non-fetch error for one kind; serves nothing for the rest."""

    def __init__(self, crash_kind: ResourceKind) -> None:
        self._crash_kind = crash_kind

    def get_provider_name(self) -> str:
        return "crashing"

    async def fetch(self, kind: ResourceKind, timeout: float | None = None) -> tuple[Any, ...]:
        if kind is self._crash_kind:
            raise RuntimeError("decoder exploded")
        return ()


def _pipeline(source, store=None, config=None, sleep=None) -> CatalogIngestionPipeline:
    kwargs = {"sleep": sleep} if sleep is not None else {}
    return CatalogIngestionPipeline(source=source, store=store or CatalogStore(), config=config, **kwargs)


class TestInitializeData:
    @pytest.mark.asyncio
    async def test_all_healthy(self, fake_source, recording_sleep, catalog_records) -> None:
        store = CatalogStore()
        errors = await _pipeline(fake_source, store, sleep=recording_sleep).initialize_data()

        assert errors == []
        for kind in ResourceKind:
            assert store.get(kind) == catalog_records[kind]
            assert store.last_updated(kind) is not None
        recording_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_one_kind_permanently_failing(self, make_source, recording_sleep) -> None:
        source = make_source({ResourceKind.DATES: [NetworkError("unreachable")]})
        store = CatalogStore()

        errors = await _pipeline(source, store, sleep=recording_sleep).initialize_data()

        assert len(errors) == 1
        assert isinstance(errors[0], RetryExhaustedError)
        assert "FetchDates" in str(errors[0])
        assert store.dates == ()
        assert len(store.artists) == 2
        assert len(store.locations) == 2
        assert len(store.relations) == 2
        assert source.calls[ResourceKind.DATES] == 3

    @pytest.mark.asyncio
    async def test_all_failing_keeps_previous_values(
        self, make_source, recording_sleep, catalog_records
    ) -> None:
        store = CatalogStore()
        for kind, records in catalog_records.items():
            store.replace(kind, records)
        before = store.snapshot()

        source = make_source({kind: [StatusError(503)] for kind in ResourceKind})
        pipeline = _pipeline(source, store, sleep=recording_sleep)

        for _ in range(2):
            errors = await pipeline.initialize_data()
            assert len(errors) == 4
            assert all(isinstance(error, RetryExhaustedError) for error in errors)
            after = store.snapshot()
            assert after.artists == before.artists
            assert after.locations == before.locations
            assert after.dates == before.dates
            assert after.relations == before.relations
            assert after.updated_at == before.updated_at

        names = sorted(error.kind.operation_name for error in errors)
        assert names == ["FetchArtists", "FetchDates", "FetchLocations", "FetchRelations"]

    @pytest.mark.asyncio
    async def test_retries_are_transparent(self, make_source, recording_sleep, catalog_records) -> None:
        flaky = [NetworkError("reset"), NetworkError("reset"), catalog_records[ResourceKind.RELATIONS]]
        source = make_source({ResourceKind.RELATIONS: flaky})
        store = CatalogStore()

        errors = await _pipeline(source, store, sleep=recording_sleep).initialize_data()

        assert errors == []
        assert store.relations == catalog_records[ResourceKind.RELATIONS]
        assert recording_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_crashed_task_does_not_affect_others(self, recording_sleep) -> None:
        store = CatalogStore()
        errors = await _pipeline(
            _CrashingSource(ResourceKind.LOCATIONS), store, sleep=recording_sleep
        ).initialize_data()

        assert len(errors) == 1
        assert isinstance(errors[0], TourCatalogError)
        assert "FetchLocations failed unexpectedly" in str(errors[0])
        assert store.last_updated(ResourceKind.LOCATIONS) is None
        assert store.last_updated(ResourceKind.ARTISTS) is not None


class TestInitializeDataOverHttp:
    @pytest.mark.asyncio
    async def test_minimal_bodies_load_one_record_each(
        self, make_upstream_client, upstream_config, recording_sleep
    ) -> None:
        overrides = {
            "/api/artists": [{"id": 1}],
            "/api/locations": {"index": [{"id": 1}]},
            "/api/dates": {"index": [{"id": 1}]},
            "/api/relation": {"index": [{"id": 1}]},
        }
        store = CatalogStore()
        async with make_upstream_client(overrides) as client:
            source = HttpCatalogProvider(http_client=client, upstream=upstream_config)
            errors = await _pipeline(source, store, sleep=recording_sleep).initialize_data()

        assert errors == []
        assert store.snapshot().counts() == {
            "artists": 1,
            "locations": 1,
            "dates": 1,
            "relations": 1,
        }
        assert store.artists == (Artist(id=1),)

    @pytest.mark.asyncio
    async def test_artists_500_yields_single_artists_error(
        self, make_upstream_client, upstream_config, recording_sleep
    ) -> None:
        store = CatalogStore()
        async with make_upstream_client({"/api/artists": httpx.Response(500)}) as client:
            source = HttpCatalogProvider(http_client=client, upstream=upstream_config)
            errors = await _pipeline(source, store, sleep=recording_sleep).initialize_data()

        assert len(errors) == 1
        assert "Artists" in str(errors[0])
        assert store.artists == ()
        assert len(store.relations) == 2

    @pytest.mark.asyncio
    async def test_network_error_twice_then_success(self, upstream_config, recording_sleep) -> None:
        artist_calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal artist_calls
            if request.url.path == "/api/artists":
                artist_calls += 1
                if artist_calls <= 2:
                    raise httpx.ConnectError("connection refused")
                return httpx.Response(200, json=[{"id": 7, "name": "Late Bloomers"}])
            return httpx.Response(200, json={"index": [{"id": 7}]})

        store = CatalogStore()
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            source = HttpCatalogProvider(http_client=client, upstream=upstream_config)
            errors = await _pipeline(source, store, sleep=recording_sleep).initialize_data()

        assert errors == []
        assert artist_calls == 3
        assert [artist.name for artist in store.artists] == ["Late Bloomers"]
        assert recording_sleep.await_count == 2
