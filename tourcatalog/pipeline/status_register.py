"""Catalog readiness register shared by request handlers and the scheduler.

Holds a single :class:`LoadingStatus` value.  ``set_status`` and
``get_status`` each take one lock, so a reader never sees a mix of an old
and a new flag set.  The lock is a ``threading.Lock`` rather than an
``asyncio.Lock`` because sync FastAPI endpoints run in a worker thread
pool while the scheduler runs on the event loop.

State machine (no terminal state):

    LOADING ──no errors──→ LOADED ──refresh──→ LOADING
    LOADING ──any error──→ FAILED ──retry────→ LOADING

A partial failure (3 of 4 collections loaded) still lands in FAILED.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

import structlog

from tourcatalog.models.status import LoadingStatus, LoadState
from tourcatalog.utils.logging import get_logger


class StatusRegister:
    """Atomic tri-state readiness flag.

    The initial value is Loading: the register is created right before the
    first ingestion run is launched.
    """

    def __init__(self, initial: LoadingStatus | None = None) -> None:
        self._lock = threading.Lock()
        self._status = initial if initial is not None else LoadingStatus.loading()
        self._logger: structlog.BoundLogger = get_logger(__name__)

    def set_status(self, loading: bool, loaded: bool, failed: bool) -> None:
        """Overwrite the flags.

        Callers pass exactly one ``True``; this is not checked.
        """
        new_status = LoadingStatus(is_loading=loading, is_loaded=loaded, has_failed=failed)
        with self._lock:
            previous = self._status
            self._status = new_status
        if previous != new_status:
            self._logger.info(
                "status_changed",
                previous=previous.state.value if previous.state else None,
                current=new_status.state.value if new_status.state else None,
            )

    def get_status(self) -> LoadingStatus:
        with self._lock:
            return self._status

    @property
    def state(self) -> LoadState | None:
        return self.get_status().state

    # -- Canonical transitions ------------------------------------------

    def mark_loading(self) -> None:
        self.set_status(True, False, False)

    def mark_loaded(self) -> None:
        self.set_status(False, True, False)

    def mark_failed(self) -> None:
        self.set_status(False, False, True)

    def mark_result(self, errors: Sequence[BaseException]) -> LoadState:
        """Record the outcome of an ingestion run and return the new state."""
        if errors:
            self.mark_failed()
            return LoadState.FAILED
        self.mark_loaded()
        return LoadState.LOADED
