"""Bounded retry loop around a single-attempt catalog fetch.

One :class:`RetryingFetchTask` is created per resource kind per ingestion
run.  It calls :meth:`ICatalogSource.fetch` until an attempt succeeds or
``max_attempts`` is reached.

# ─── RETRY TIMELINE (defaults: 3 attempts, 5 s timeout, 1 s backoff) ──
#
#   attempt 1 ──fail──→ sleep 1 s ──→ attempt 2 ──fail──→ sleep 1 s ──→
#   attempt 3 ──fail──→ RetryExhaustedError   (no sleep after the last)
#
#   Success on attempt k stops the loop after k-1 sleeps.
#
#   Each attempt gets a fresh deadline of ``attempt_timeout``.  An attempt
#   that overruns it counts as a NetworkError and is retried like any
#   other per-attempt failure.
#
#   If ``task_deadline`` is set and expires, the task stops at once with
#   FetchTimeoutError instead of trying again.
# ──────────────────────────────────────────────────────────────────────

Per-attempt errors never leave this module; the returned
:class:`FetchOutcome` carries either the records or the terminal error.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from tourcatalog.config.ingestion import IngestionConfig
from tourcatalog.interfaces.catalog_source import ICatalogSource
from tourcatalog.models.ingestion import FetchOutcome, ResourceKind
from tourcatalog.utils.errors import (
    CatalogFetchError,
    FetchTimeoutError,
    NetworkError,
    RetryExhaustedError,
)
from tourcatalog.utils.logging import get_logger

SleepFn = Callable[[float], Awaitable[None]]


class RetryingFetchTask:
    """Fetch one resource kind with a fixed-backoff retry policy.

    Parameters
    ----------
    kind:
        The collection to fetch.
    source:
        Single-attempt fetcher.
    config:
        Attempt count, per-attempt timeout, backoff and optional task deadline.
    sleep:
        Awaitable used for the backoff wait.  Injected so tests can count
        sleeps without waiting in real time.
    """

    def __init__(
        self,
        kind: ResourceKind,
        source: ICatalogSource,
        config: IngestionConfig | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._kind = kind
        self._source = source
        self._config = config or IngestionConfig()
        self._sleep = sleep
        self._logger: structlog.BoundLogger = get_logger(__name__).bind(kind=kind.value)

    @property
    def kind(self) -> ResourceKind:
        return self._kind

    async def run(self) -> FetchOutcome:
        """Run attempts until success, exhaustion or the task deadline."""
        loop = asyncio.get_running_loop()
        config = self._config
        deadline = loop.time() + config.task_deadline if config.task_deadline else None
        last_error: BaseException | None = None

        for attempt in range(1, config.max_attempts + 1):
            attempt_timeout = config.attempt_timeout
            if deadline is not None:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    return self._timed_out(attempt)
                attempt_timeout = min(attempt_timeout, remaining)

            try:
                records = await asyncio.wait_for(
                    self._source.fetch(self._kind, timeout=attempt_timeout),
                    timeout=attempt_timeout,
                )
            except asyncio.TimeoutError:
                last_error = NetworkError(
                    message=f"{self._kind.operation_name} attempt {attempt} "
                    f"timed out after {attempt_timeout:g}s",
                    provider_name=self._source.get_provider_name(),
                )
            except CatalogFetchError as exc:
                last_error = exc
            else:
                self._logger.info(
                    "fetch_succeeded",
                    attempt=attempt,
                    record_count=len(records),
                )
                return FetchOutcome(kind=self._kind, records=tuple(records), attempts=attempt)

            if deadline is not None and loop.time() >= deadline:
                return self._timed_out(attempt)

            self._logger.warning(
                "fetch_attempt_failed",
                attempt=attempt,
                max_attempts=config.max_attempts,
                error=str(last_error),
                error_type=type(last_error).__name__,
            )
            if attempt < config.max_attempts:
                await self._sleep(config.retry_backoff)

        error = RetryExhaustedError(
            kind=self._kind,
            attempts=config.max_attempts,
            last_error=last_error,
        )
        self._logger.error("fetch_exhausted", attempts=config.max_attempts, error=str(error))
        return FetchOutcome(kind=self._kind, error=error, attempts=config.max_attempts)

    def _timed_out(self, attempt: int) -> FetchOutcome:
        error = FetchTimeoutError(kind=self._kind, attempt=attempt)
        self._logger.error("fetch_task_deadline_exceeded", attempt=attempt)
        return FetchOutcome(kind=self._kind, error=error, attempts=attempt)
