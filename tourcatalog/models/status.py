"""Catalog readiness status.

The status is a tri-state flag -- Loading, Loaded, Failed -- stored as
three booleans to match the ``set_status(loading, loaded, failed)`` calling
convention used by startup and the refresh scheduler.  Exactly one flag is
expected to be true; that is a convention of the callers, not enforced
here.  ``state`` maps the flags back to a single :class:`LoadState`
(``None`` when no flag is set).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class LoadState(str, Enum):  # noqa: UP042 (StrEnum requires Python 3.11+)
    LOADING = "LOADING"
    LOADED = "LOADED"
    FAILED = "FAILED"


class LoadingStatus(BaseModel):
    """Immutable snapshot of the readiness flags."""

    model_config = ConfigDict(frozen=True)

    is_loading: bool = False
    is_loaded: bool = False
    has_failed: bool = False

    @property
    def state(self) -> LoadState | None:
        # Loading wins over the others, matching how request handlers check.
        if self.is_loading:
            return LoadState.LOADING
        if self.has_failed:
            return LoadState.FAILED
        if self.is_loaded:
            return LoadState.LOADED
        return None

    @classmethod
    def loading(cls) -> LoadingStatus:
        return cls(is_loading=True)

    @classmethod
    def loaded(cls) -> LoadingStatus:
        return cls(is_loaded=True)

    @classmethod
    def failed(cls) -> LoadingStatus:
        return cls(has_failed=True)
