"""BoardGameGeek metadata provider."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from gameshelf.domain.ports import ProviderCapabilities, ProviderManifest, RateLimitSettings

from .client import BoardGameGeekClient
from .translator import (
    GAME_URL_PATTERN,
    PROVIDER_ID,
    game_url,
    translate_search_item,
    translate_thing,
)

if TYPE_CHECKING:
    from gameshelf.config import BoardGameGeekConfig
    from gameshelf.domain.ports import GameMetadata, MetadataProvider, MetadataSearchResult

    from .schema import BggSearchItem, BggThing

log = getLogger(__name__)

MANIFEST = ProviderManifest(
    id=PROVIDER_ID,
    name="BoardGameGeek",
    description="Fetch board game and card game metadata from BoardGameGeek.",
    requires_api_key=False,
    game_url_pattern=GAME_URL_PATTERN,
)
CAPABILITIES = ProviderCapabilities()
RATE_LIMIT = RateLimitSettings(request_delay_seconds=1.1)

_MIN_QUERY_LENGTH = 2


class BoardGameGeekLookupClient(Protocol):
    def search(self, *, query: str) -> list[BggSearchItem]: ...

    def fetch_thing(self, *, thing_id: str) -> BggThing | None: ...


class BoardGameGeekMetadataProvider:
    def __init__(
        self,
        *,
        config: BoardGameGeekConfig | None = None,
        client: BoardGameGeekLookupClient | None = None,
    ) -> None:
        if client is None:
            if config is None:
                raise ValueError("BoardGameGeekMetadataProvider needs a config or a client")
            client = BoardGameGeekClient(config=config)
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
        term = query.strip()
        if len(term) < _MIN_QUERY_LENGTH:
            return []
        items = self._client.search(query=term)
        return [translate_search_item(item) for item in items[:limit]]

    def get_game_metadata(self, external_id: str) -> GameMetadata | None:
        if not external_id.isdigit():
            log.debug("Ignoring non-numeric BoardGameGeek id %r", external_id)
            return None
        thing = self._client.fetch_thing(thing_id=external_id)
        if thing is None:
            return None
        return translate_thing(thing)

    def get_game_url(self, external_id: str) -> str:
        return game_url(external_id)


if TYPE_CHECKING:
    _provider_check: MetadataProvider = BoardGameGeekMetadataProvider()
