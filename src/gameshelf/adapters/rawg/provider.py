"""RAWG metadata provider."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from gameshelf.domain.ports import ProviderCapabilities, ProviderManifest, RateLimitSettings

from .client import RawgClient
from .translator import (
    GAME_URL_PATTERN,
    PROVIDER_ID,
    game_url,
    translate_game,
    translate_search_game,
)

if TYPE_CHECKING:
    from gameshelf.config import RawgConfig
    from gameshelf.domain.ports import GameMetadata, MetadataProvider, MetadataSearchResult

    from .schema import RawgGame, RawgSearchResponse

MANIFEST = ProviderManifest(
    id=PROVIDER_ID,
    name="RAWG",
    description="Fetch game metadata from the RAWG.io video game database",
    requires_api_key=True,
    game_url_pattern=GAME_URL_PATTERN,
)
CAPABILITIES = ProviderCapabilities()
RATE_LIMIT = RateLimitSettings(request_delay_seconds=0.1)


class RawgLookupClient(Protocol):
    def search_games(self, *, query: str, page_size: int = 10) -> RawgSearchResponse: ...

    def fetch_game(self, *, game_id: str) -> RawgGame | None: ...


class RawgMetadataProvider:
    def __init__(
        self,
        *,
        config: RawgConfig | None = None,
        client: RawgLookupClient | None = None,
    ) -> None:
        if client is None:
            if config is None:
                raise ValueError("RawgMetadataProvider needs a config or a client")
            client = RawgClient(config=config)
        self._client = client

    @property
    def manifest(self) -> ProviderManifest:
        return MANIFEST

    @property
    def capabilities(self) -> ProviderCapabilities:
        return CAPABILITIES

    @property
    def rate_limit(self) -> RateLimitSettings:
        return RATE_LIMIT

    def search_games(self, query: str, limit: int = 10) -> list[MetadataSearchResult]:
        if not query.strip():
            return []
        response = self._client.search_games(query=query, page_size=limit)
        return [translate_search_game(game) for game in response.results[:limit]]

    def get_game_metadata(self, external_id: str) -> GameMetadata | None:
        game = self._client.fetch_game(game_id=external_id)
        if game is None:
            return None
        return translate_game(game)

    def get_game_url(self, external_id: str) -> str:
        return game_url(external_id)


if TYPE_CHECKING:
    _provider_check: MetadataProvider = RawgMetadataProvider()
