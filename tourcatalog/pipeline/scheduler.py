"""Background refresh loop for the catalog.

:class:`RefreshScheduler` is the single long-lived actor that re-runs
ingestion.  Each pass of :meth:`RefreshScheduler.run` reads the status
register:

    LOADING  → wait ``poll_interval`` and look again.  A run is already in
               flight (startup, or a manual refresh); never start a second.
    LOADED   → wait ``loaded_refresh_interval`` (24 h), then refresh.
    FAILED   → wait ``failed_refresh_interval`` (1 s), then refresh.

A refresh sets LOADING, awaits ``initialize_data()``, then sets LOADED or
FAILED from the error list.

The loop exits when the ``stop`` event is set.  Every wait races the stop
event, so shutdown does not have to sit out a 24-hour sleep, and a refresh
still running when stop is set is cancelled.
"""

from __future__ import annotations

import asyncio
import contextlib

import structlog

from tourcatalog.config.ingestion import IngestionConfig
from tourcatalog.models.status import LoadState
from tourcatalog.pipeline.orchestrator import CatalogIngestionPipeline
from tourcatalog.pipeline.status_register import StatusRegister
from tourcatalog.utils.logging import get_logger


class RefreshScheduler:
    """Re-runs ingestion on a cadence that depends on the last outcome.

    Parameters
    ----------
    pipeline:
        The ingestion orchestrator to invoke.
    status:
        Readiness register shared with the request handlers.
    config:
        Source of ``loaded_refresh_interval``, ``failed_refresh_interval``
        and ``poll_interval``.
    """

    def __init__(
        self,
        pipeline: CatalogIngestionPipeline,
        status: StatusRegister,
        config: IngestionConfig | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._status = status
        self._config = config or IngestionConfig()
        self._refresh_count = 0
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def refresh_count(self) -> int:
        """Number of refreshes started by :meth:`refresh_once`."""
        return self._refresh_count

    async def refresh_once(self) -> list[BaseException]:
        """Run one ingestion pass and record its outcome in the status register."""
        self._refresh_count += 1
        self._status.mark_loading()
        errors = await self._pipeline.initialize_data()
        state = self._status.mark_result(errors)
        self._logger.info(
            "refresh_finished",
            state=state.value,
            error_count=len(errors),
            refresh_count=self._refresh_count,
        )
        return errors

    async def run(self, stop: asyncio.Event) -> None:
        """Loop until *stop* is set.  Safe to run as a background task."""
        self._logger.info(
            "refresh_scheduler_started",
            loaded_interval=self._config.loaded_refresh_interval,
            failed_interval=self._config.failed_refresh_interval,
        )
        while not stop.is_set():
            state = self._status.state

            if state is LoadState.LOADED:
                delay = self._config.loaded_refresh_interval
            elif state is LoadState.FAILED:
                delay = self._config.failed_refresh_interval
            else:
                # LOADING, or no flag set at all: someone else owns the run.
                if await self._wait(stop, self._config.poll_interval):
                    break
                continue

            self._logger.info("refresh_scheduled", after_state=state.value, delay_seconds=delay)
            if await self._wait(stop, delay):
                break
            self._logger.info("refreshing_data", previous_state=state.value)
            if await self._refresh_unless_stopped(stop):
                break

        self._logger.info("refresh_scheduler_stopped", refresh_count=self._refresh_count)

    async def _refresh_unless_stopped(self, stop: asyncio.Event) -> bool:
        """Run :meth:`refresh_once`; cancel it and return ``True`` if *stop* wins."""
        refresh = asyncio.create_task(self.refresh_once(), name="scheduled_refresh")
        stopper = asyncio.create_task(stop.wait())
        try:
            await asyncio.wait({refresh, stopper}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            refresh.cancel()
            raise
        finally:
            stopper.cancel()

        if refresh.done():
            refresh.result()
            return False

        refresh.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await refresh
        self._logger.info("refresh_cancelled", refresh_count=self._refresh_count)
        return True

    @staticmethod
    async def _wait(stop: asyncio.Event, seconds: float) -> bool:
        """Sleep up to *seconds*; return ``True`` if *stop* was set meanwhile."""
        try:
            await asyncio.wait_for(stop.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True
