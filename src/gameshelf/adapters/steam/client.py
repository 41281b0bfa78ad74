"""Steam Store API client."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.adapters.http_resilience import ResilientClient
from gameshelf.adapters.provider_http import json_payload, send
from gameshelf.domain.ports import MetadataApiError

from .schema import AppDetailsResponse, SteamAppDetails, SteamSearchResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from gameshelf.config import ResilienceConfig, SteamConfig

log = getLogger(__name__)

PROVIDER_ID = "steam"


class SteamClient:
    """Low-level HTTP client for the public Steam Store endpoints."""

    def __init__(
        self,
        *,
        config: SteamConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def search(self, *, term: str) -> SteamSearchResponse:
        return asyncio.run(self._search_async(term=term))

    def app_details(self, *, app_id: str) -> SteamAppDetails | None:
        return asyncio.run(self._app_details_async(app_id=app_id))

    async def _search_async(self, *, term: str) -> SteamSearchResponse:
        params = {
            "term": term,
            "l": self._config.language,
            "cc": self._config.country_code,
        }
        async with self._client_factory(self._resilience) as client:
            response = await send(
                client.get("/api/storesearch/", params=params), provider_id=PROVIDER_ID
            )
            payload = json_payload(response, provider_id=PROVIDER_ID)
        if not isinstance(payload, dict):
            raise MetadataApiError("Unexpected Steam search payload", provider_id=PROVIDER_ID)
        return SteamSearchResponse.model_validate(payload)

    async def _app_details_async(self, *, app_id: str) -> SteamAppDetails | None:
        params = {"appids": app_id, "l": self._config.language, "cc": self._config.country_code}
        async with self._client_factory(self._resilience) as client:
            response = await send(
                client.get("/api/appdetails", params=params), provider_id=PROVIDER_ID
            )
            payload = json_payload(response, provider_id=PROVIDER_ID)
        if not isinstance(payload, dict):
            # unknown app ids come back as a bare ``null``
            log.debug("Steam appdetails returned no object for %s", app_id)
            return None
        envelope = AppDetailsResponse.validate_python(payload).get(app_id)
        if envelope is None or not envelope.success:
            return None
        return envelope.data
