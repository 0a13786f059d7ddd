"""Typed ingestion configuration.

Every timing the ingestion pipeline uses is a field here rather than a
constant in the pipeline code, so tests can shrink the 24-hour refresh
interval and the 1-second backoff to milliseconds.

Defaults reproduce the production behaviour:

    max_attempts             3      (1 try + 2 retries)
    attempt_timeout          5 s    (fresh deadline per attempt)
    retry_backoff            1 s    (fixed, no growth, no jitter)
    task_deadline            None   (no enclosing deadline per task)
    loaded_refresh_interval  24 h
    failed_refresh_interval  1 s
    poll_interval            0.1 s  (scheduler re-check while Loading)
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tourcatalog.models.ingestion import ResourceKind
from tourcatalog.utils.errors import ConfigurationError

DEFAULT_BASE_URL = "https://groupietrackers.herokuapp.com/api"


class IngestionConfig(BaseModel):
    """Retry, timeout and scheduling parameters for catalog ingestion."""

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    attempt_timeout: float = Field(default=5.0, gt=0)
    retry_backoff: float = Field(default=1.0, ge=0)
    task_deadline: float | None = Field(default=None, gt=0)
    loaded_refresh_interval: float = Field(default=24 * 60 * 60, ge=0)
    failed_refresh_interval: float = Field(default=1.0, ge=0)
    poll_interval: float = Field(default=0.1, gt=0)

    @classmethod
    def from_mapping(cls, values: dict[str, Any] | None) -> IngestionConfig:
        """Build from the ``ingestion:`` block of the merged config.

        Raises
        ------
        ConfigurationError
            If any value is missing its constraint (e.g. ``max_attempts: 0``).
        """
        try:
            return cls.model_validate(values or {})
        except ValidationError as exc:
            raise ConfigurationError(message=f"Invalid ingestion config: {exc}") from exc


class UpstreamConfig(BaseModel):
    """Where each resource collection lives on the upstream API."""

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    paths: dict[ResourceKind, str] = Field(
        default_factory=lambda: {kind: kind.default_path for kind in ResourceKind}
    )

    def endpoint(self, kind: ResourceKind) -> str:
        """Absolute URL of the endpoint serving *kind*."""
        path = self.paths.get(kind, kind.default_path)
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @classmethod
    def from_mapping(cls, values: dict[str, Any] | None) -> UpstreamConfig:
        values = dict(values or {})
        if not values.get("base_url"):
            values.pop("base_url", None)
        # Keyed by plain strings until validation so YAML keys ("artists")
        # override the defaults instead of sitting beside them.
        paths = {kind.value: kind.default_path for kind in ResourceKind}
        paths.update({str(key): value for key, value in (values.pop("paths", None) or {}).items()})
        try:
            return cls.model_validate({**values, "paths": paths})
        except ValidationError as exc:
            raise ConfigurationError(message=f"Invalid upstream config: {exc}") from exc
