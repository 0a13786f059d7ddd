"""HTTP catalog source implementing ICatalogSource.

Fetches one resource collection from the upstream tour API with a single
``GET`` through a shared ``httpx.AsyncClient``, requires HTTP 200, and
decodes the body into frozen catalog models.

Response shapes:
    /artists    -> JSON array of artist records
    /locations  -> {"index": [location records]}
    /dates      -> {"index": [concert date records]}
    /relation   -> {"index": [relation records]}

Errors map onto the fetch error taxonomy: transport failures and timeouts
become ``NetworkError``, non-200 statuses ``StatusError``, malformed or
mis-shaped bodies ``DecodeError``.  There is no retry here.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from tourcatalog.config.ingestion import UpstreamConfig
from tourcatalog.interfaces.catalog_source import ICatalogSource
from tourcatalog.models.catalog import (
    Artist,
    DatesIndex,
    LocationIndex,
    RelationIndex,
)
from tourcatalog.models.ingestion import ResourceKind
from tourcatalog.utils.errors import DecodeError, NetworkError, StatusError
from tourcatalog.utils.logging import get_logger

_ARTISTS_ADAPTER: TypeAdapter[list[Artist]] = TypeAdapter(list[Artist])


def _decode_artists(payload: Any) -> tuple[Any, ...]:
    return tuple(_ARTISTS_ADAPTER.validate_python(payload))


def _decode_locations(payload: Any) -> tuple[Any, ...]:
    return tuple(LocationIndex.model_validate(payload).index)


def _decode_dates(payload: Any) -> tuple[Any, ...]:
    return tuple(DatesIndex.model_validate(payload).index)


def _decode_relations(payload: Any) -> tuple[Any, ...]:
    return tuple(RelationIndex.model_validate(payload).index)


_DECODERS: dict[ResourceKind, Callable[[Any], tuple[Any, ...]]] = {
    ResourceKind.ARTISTS: _decode_artists,
    ResourceKind.LOCATIONS: _decode_locations,
    ResourceKind.DATES: _decode_dates,
    ResourceKind.RELATIONS: _decode_relations,
}


class HttpCatalogProvider(ICatalogSource):
    """Catalog source backed by the upstream JSON API.

    Parameters
    ----------
    http_client:
        Shared async client.  Owned by the application; not closed here.
    upstream:
        Base URL and per-kind paths.
    provider_name:
        Identifier attached to errors and log lines.
    user_agent:
        Sent with every request.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        upstream: UpstreamConfig | None = None,
        provider_name: str = "groupietrackers",
        user_agent: str = "tourcatalog/0.1.0",
    ) -> None:
        self._http = http_client
        self._upstream = upstream or UpstreamConfig()
        self._provider_name = provider_name
        self._headers = {"User-Agent": user_agent, "Accept": "application/json"}
        self._logger = get_logger(__name__)

    def get_provider_name(self) -> str:
        return self._provider_name

    def endpoint(self, kind: ResourceKind) -> str:
        return self._upstream.endpoint(kind)

    async def fetch(self, kind: ResourceKind, timeout: float | None = None) -> tuple[Any, ...]:
        """Issue one GET for *kind* and return the decoded collection."""
        url = self.endpoint(kind)
        request_kwargs: dict[str, Any] = {"headers": self._headers}
        # Passing timeout=None to httpx would disable the client default.
        if timeout is not None:
            request_kwargs["timeout"] = timeout

        try:
            response = await self._http.get(url, **request_kwargs)
        except httpx.TimeoutException as exc:
            raise NetworkError(
                message=f"Request to {url} timed out: {exc!r}",
                provider_name=self._provider_name,
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkError(
                message=f"Failed to fetch from {url} with error: {exc}",
                provider_name=self._provider_name,
            ) from exc

        if response.status_code != httpx.codes.OK:
            raise StatusError(
                status_code=response.status_code,
                provider_name=self._provider_name,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise DecodeError(
                message=f"JSON decode failed for {kind.operation_name}: {exc}",
                provider_name=self._provider_name,
            ) from exc

        try:
            records = _DECODERS[kind](payload)
        except ValidationError as exc:
            raise DecodeError(
                message=(
                    f"JSON decode failed for {kind.operation_name}: "
                    f"unexpected shape ({exc.error_count()} errors)"
                ),
                provider_name=self._provider_name,
            ) from exc

        self._logger.debug(
            "upstream_fetch_decoded",
            kind=kind.value,
            url=url,
            record_count=len(records),
        )
        return records
