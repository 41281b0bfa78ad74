"""RAWG API client."""

from __future__ import annotations

import asyncio
from http import HTTPStatus
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.adapters.http_resilience import ResilientClient
from gameshelf.adapters.provider_http import json_payload, send
from gameshelf.domain.ports import MetadataApiError

from .schema import RawgGame, RawgSearchResponse

if TYPE_CHECKING:
    from collections.abc import Callable

    from gameshelf.config import RawgConfig, ResilienceConfig

log = getLogger(__name__)

PROVIDER_ID = "rawg"
MAX_PAGE_SIZE = 40


class RawgClient:
    """Low-level HTTP client for the RAWG video game database."""

    def __init__(
        self,
        *,
        config: RawgConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def search_games(self, *, query: str, page_size: int = 10) -> RawgSearchResponse:
        return asyncio.run(self._search_games_async(query=query, page_size=page_size))

    def fetch_game(self, *, game_id: str) -> RawgGame | None:
        return asyncio.run(self._fetch_game_async(game_id=game_id))

    async def _search_games_async(self, *, query: str, page_size: int) -> RawgSearchResponse:
        params = {
            "key": self._config.api_key,
            "search": query,
            "page_size": str(min(page_size, MAX_PAGE_SIZE)),
        }
        payload = await self._get_json("/games", params=params)
        return RawgSearchResponse.model_validate(payload)

    async def _fetch_game_async(self, *, game_id: str) -> RawgGame | None:
        try:
            payload = await self._get_json(
                f"/games/{game_id}", params={"key": self._config.api_key}
            )
        except MetadataApiError as exc:
            if exc.status_code == HTTPStatus.NOT_FOUND:
                log.debug("RAWG has no game %s", game_id)
                return None
            raise
        return RawgGame.model_validate(payload)

    async def _get_json(self, path: str, *, params: dict[str, str]) -> dict[str, object]:
        async with self._client_factory(self._resilience) as client:
            response = await send(client.get(path, params=params), provider_id=PROVIDER_ID)
            payload = json_payload(response, provider_id=PROVIDER_ID)
        if not isinstance(payload, dict):
            raise MetadataApiError("Unexpected RAWG response payload", provider_id=PROVIDER_ID)
        return payload
