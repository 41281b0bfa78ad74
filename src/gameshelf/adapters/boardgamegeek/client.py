"""BoardGameGeek XML API2 client."""

from __future__ import annotations

import asyncio
import xml.etree.ElementTree as ET
from typing import TYPE_CHECKING

from gameshelf.adapters.http_resilience import ResilientClient
from gameshelf.adapters.provider_http import send
from gameshelf.domain.ports import MetadataApiError

from .schema import BggSearchItem, BggThing, parse_search, parse_thing

if TYPE_CHECKING:
    from collections.abc import Callable

    from gameshelf.config import BoardGameGeekConfig, ResilienceConfig

PROVIDER_ID = "boardgamegeek"
SEARCH_TYPES = "boardgame,boardgameexpansion"


class BoardGameGeekClient:
    """Low-level HTTP client for the BoardGameGeek XML API."""

    def __init__(
        self,
        *,
        config: BoardGameGeekConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def search(self, *, query: str) -> list[BggSearchItem]:
        return asyncio.run(self._search_async(query=query))

    def fetch_thing(self, *, thing_id: str) -> BggThing | None:
        return asyncio.run(self._fetch_thing_async(thing_id=thing_id))

    async def _search_async(self, *, query: str) -> list[BggSearchItem]:
        document = await self._get_xml("/search", params={"query": query, "type": SEARCH_TYPES})
        try:
            return parse_search(document)
        except ET.ParseError as exc:
            msg = "Malformed BoardGameGeek search XML"
            raise MetadataApiError(msg, provider_id=PROVIDER_ID) from exc

    async def _fetch_thing_async(self, *, thing_id: str) -> BggThing | None:
        document = await self._get_xml("/thing", params={"id": thing_id, "stats": "1"})
        try:
            return parse_thing(document, thing_id)
        except ET.ParseError as exc:
            msg = "Malformed BoardGameGeek thing XML"
            raise MetadataApiError(msg, provider_id=PROVIDER_ID) from exc

    async def _get_xml(self, path: str, *, params: dict[str, str]) -> str:
        headers: dict[str, str] = {}
        if self._config.api_token:
            headers["Authorization"] = f"Bearer {self._config.api_token}"
        async with self._client_factory(self._resilience) as client:
            response = await send(
                client.get(path, params=params, headers=headers), provider_id=PROVIDER_ID
            )
            return response.text
