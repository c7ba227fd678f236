from __future__ import annotations

import logging
from typing import Any

import httpx

from connect_samples.errors import TransportError
from connect_samples.graph.models import RawRecord
from connect_samples.http import HttpClientFactory
from connect_samples.settings import settings

logger = logging.getLogger(__name__)


class NypdClient:
    """Socrata (SODA) client for the NYPD complaint dataset.

    Docs: https://dev.socrata.com/docs/queries/

    A failed request is terminal for the invocation: no retries.
    """

    def __init__(
        self,
        base_url: str | None = None,
        app_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.nypd_base_url
        self.app_token = app_token if app_token is not None else settings.nypd_app_token
        self._client = HttpClientFactory.client(transport=transport)

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self) -> "NypdClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def build_params(self, *, limit: int, where: str | None = None) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.app_token:
            params["$$app_token"] = self.app_token
        params["$limit"] = str(limit)
        if where:
            params["$where"] = where
        return params

    async def request_data(self, *, limit: int, where: str | None = None) -> list[RawRecord]:
        params = self.build_params(limit=limit, where=where)
        logger.debug(f"GET {self.base_url} where={where!r} limit={limit}")
        try:
            r = await self._client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"NYPD request failed: {e}")
            raise TransportError(
                f"Unable to reach the NYPD complaint dataset: {type(e).__name__}", detail=str(e)
            ) from e

        if r.status_code != 200:
            logger.warning(f"NYPD request returned {r.status_code} {r.reason_phrase}")
            raise TransportError(
                r.reason_phrase or f"HTTP {r.status_code}",
                upstream_status=r.status_code,
                detail=f"HTTP {r.status_code} from {self.base_url}",
            )

        try:
            data: Any = r.json()
        except ValueError as e:
            raise TransportError("The NYPD complaint dataset returned malformed JSON", detail=str(e)) from e
        if not isinstance(data, list) or not all(isinstance(row, dict) for row in data):
            raise TransportError("The NYPD complaint dataset returned an unexpected payload")
        return data
