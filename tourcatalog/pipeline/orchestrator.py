"""Concurrent ingestion of the four catalog collections.

:class:`CatalogIngestionPipeline` fans out one
:class:`~tourcatalog.pipeline.retry.RetryingFetchTask` per resource kind,
then fans in as each finishes.

# ─── ONE INGESTION RUN ────────────────────────────────────────────────
#
#            ┌─ FetchArtists   ─┐
#   start ───┼─ FetchLocations ─┼──→ as_completed ──→ per outcome:
#            ├─ FetchDates     ─┤        success → store.replace(kind)
#            └─ FetchRelations ─┘        failure → errors.append(error)
#
#   Returns the aggregate error list (empty when all four succeeded).
# ──────────────────────────────────────────────────────────────────────

Partial failure is a normal outcome: three successes and one failure
replace three collections and return one error.  A failed kind keeps
whatever the store already held.  The tasks do not cancel each other and
an unexpected exception inside one task is recorded as that kind's failure.

Error order follows completion order and is not meaningful.

Calls are not serialized here.  Two overlapping runs each replace
collections independently (last writer wins per kind); the refresh
scheduler never overlaps its own runs.
"""

from __future__ import annotations

import asyncio
import time

import structlog

from tourcatalog.config.ingestion import IngestionConfig
from tourcatalog.interfaces.catalog_source import ICatalogSource
from tourcatalog.models.ingestion import FetchOutcome, ResourceKind
from tourcatalog.pipeline.catalog_store import CatalogStore
from tourcatalog.pipeline.retry import RetryingFetchTask, SleepFn
from tourcatalog.utils.errors import TourCatalogError
from tourcatalog.utils.logging import bind_ingestion_run, get_logger


class CatalogIngestionPipeline:
    """Fetches every resource kind concurrently and updates the store.

    Parameters
    ----------
    source:
        Where collections come from (HTTP in production).
    store:
        The catalog store to write successful collections into.
    config:
        Retry and timeout settings shared by all four tasks.
    sleep:
        Backoff sleep passed to every task.  Injected for tests.
    """

    def __init__(
        self,
        source: ICatalogSource,
        store: CatalogStore,
        config: IngestionConfig | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._source = source
        self._store = store
        self._config = config or IngestionConfig()
        self._sleep = sleep
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def store(self) -> CatalogStore:
        return self._store

    async def initialize_data(self) -> list[BaseException]:
        """Fetch all four collections and apply each success independently.

        Returns
        -------
        list[BaseException]
            One terminal error per failed kind.  Empty on full success.
            This method does not raise for fetch failures.
        """
        with bind_ingestion_run():
            started = time.perf_counter()
            self._logger.info(
                "ingestion_started",
                kinds=[kind.value for kind in ResourceKind],
                provider=self._source.get_provider_name(),
            )

            tasks = [
                asyncio.create_task(self._run_guarded(kind), name=kind.operation_name)
                for kind in ResourceKind
            ]
            errors: list[BaseException] = []
            loaded: list[str] = []
            try:
                for next_done in asyncio.as_completed(tasks):
                    outcome = await next_done
                    if outcome.ok:
                        self._store.replace(outcome.kind, outcome.records or ())
                        loaded.append(outcome.kind.value)
                    else:
                        errors.append(outcome.error)
            finally:
                # Only reached with pending tasks if this run was cancelled.
                for task in tasks:
                    if not task.done():
                        task.cancel()

            self._logger.info(
                "ingestion_complete",
                loaded=loaded,
                failed=len(errors),
                errors=[str(error) for error in errors],
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            return errors

    async def _run_guarded(self, kind: ResourceKind) -> FetchOutcome:
        """Run the retrying task for *kind*, turning crashes into a failed outcome."""
        task = RetryingFetchTask(kind, self._source, self._config, sleep=self._sleep)
        try:
            return await task.run()
        except Exception as exc:
            self._logger.exception("fetch_task_crashed", kind=kind.value, error=str(exc))
            return FetchOutcome(
                kind=kind,
                error=TourCatalogError(message=f"{kind.operation_name} failed unexpectedly: {exc}"),
            )
