"""Unit tests for CatalogStore whole-field replacement."""

from __future__ import annotations

import threading

from tourcatalog.models.catalog import Artist
from tourcatalog.models.ingestion import ResourceKind
from tourcatalog.pipeline.catalog_store import CatalogStore


def test_new_store_is_empty() -> None:
    store = CatalogStore()

    assert store.artists == ()
    assert store.locations == ()
    assert store.dates == ()
    assert store.relations == ()
    assert store.last_updated(ResourceKind.ARTISTS) is None
    assert store.snapshot().counts() == {
        "artists": 0,
        "locations": 0,
        "dates": 0,
        "relations": 0,
    }


def test_replace_swaps_one_kind_only(catalog_records) -> None:
    store = CatalogStore()
    store.replace(ResourceKind.ARTISTS, catalog_records[ResourceKind.ARTISTS])

    assert store.artists == catalog_records[ResourceKind.ARTISTS]
    assert store.locations == ()
    assert store.last_updated(ResourceKind.ARTISTS) is not None
    assert store.last_updated(ResourceKind.LOCATIONS) is None


def test_replace_stores_an_immutable_copy() -> None:
    store = CatalogStore()
    records = [Artist(id=1, name="Queen")]
    store.replace(ResourceKind.ARTISTS, records)

    records.append(Artist(id=2, name="SOJA"))

    assert isinstance(store.artists, tuple)
    assert len(store.artists) == 1


def test_snapshot_reflects_all_kinds(catalog_records) -> None:
    store = CatalogStore()
    for kind, records in catalog_records.items():
        store.replace(kind, records)

    snapshot = store.snapshot()

    assert snapshot.relations == catalog_records[ResourceKind.RELATIONS]
    assert set(snapshot.updated_at) == set(ResourceKind)
    assert snapshot.counts()["dates"] == 2


def test_readers_never_see_partial_collections() -> None:
    store = CatalogStore()
    small = tuple(Artist(id=i) for i in range(3))
    large = tuple(Artist(id=i) for i in range(300))
    seen_sizes: set[int] = set()
    stop = threading.Event()

    def reader() -> None:
        while not stop.is_set():
            seen_sizes.add(len(store.artists))

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for _ in range(200):
        store.replace(ResourceKind.ARTISTS, small)
        store.replace(ResourceKind.ARTISTS, large)
    stop.set()
    for thread in threads:
        thread.join()

    assert seen_sizes <= {0, 3, 300}
