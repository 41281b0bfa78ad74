"""IGDB metadata provider, the source of accurate per-mode player counts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Protocol

from gameshelf.domain.ports import ProviderCapabilities, ProviderManifest, RateLimitSettings

from .client import IgdbClient
from .translator import (
    GAME_URL_PATTERN,
    PROVIDER_ID,
    game_url,
    translate_game,
    translate_search_game,
)

if TYPE_CHECKING:
    from gameshelf.config import IgdbConfig
    from gameshelf.domain.ports import GameMetadata, MetadataProvider, MetadataSearchResult

    from .schema import IgdbGame

MANIFEST = ProviderManifest(
    id=PROVIDER_ID,
    name="IGDB",
    description="Fetch game metadata from IGDB. Known for accurate player count data.",
    requires_api_key=True,
    game_url_pattern=GAME_URL_PATTERN,
)
CAPABILITIES = ProviderCapabilities(
    has_accurate_player_counts=True,
    supports_batch_requests=True,
)
RATE_LIMIT = RateLimitSettings(request_delay_seconds=0.3)

MAX_SEARCH_LIMIT: Final = 50
_MIN_QUERY_LENGTH: Final = 2
_METADATA_FIELDS: Final = (
    "id, name, slug, summary, storyline, first_release_date, cover.image_id, "
    "genres.name, game_modes.name, game_modes.slug, "
    "multiplayer_modes.campaigncoop, multiplayer_modes.dropin, multiplayer_modes.lancoop, "
    "multiplayer_modes.offlinecoop, multiplayer_modes.offlinecoopmax, "
    "multiplayer_modes.offlinemax, multiplayer_modes.onlinecoop, "
    "multiplayer_modes.onlinecoopmax, multiplayer_modes.onlinemax, "
    "multiplayer_modes.splitscreen"
)


class IgdbQueryClient(Protocol):
    def query_games(self, body: str) -> list[IgdbGame]: ...


def search_query(query: str, limit: int) -> str:
    escaped = query.replace("\\", "\\\\").replace('"', '\\"')
    return (
        f'search "{escaped}"; '
        "fields id, name, cover.image_id, first_release_date; "
        f"limit {min(limit, MAX_SEARCH_LIMIT)};"
    )


def metadata_query(game_id: int) -> str:
    return f"where id = {game_id}; fields {_METADATA_FIELDS}; limit 1;"


class IgdbMetadataProvider:
    def __init__(
        self,
        *,
        config: IgdbConfig | None = None,
        client: IgdbQueryClient | None = None,
    ) -> None:
        if client is None:
            if config is None:
                raise ValueError("IgdbMetadataProvider needs a config or a client")
            client = IgdbClient(config=config)
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
        if len(query.strip()) < _MIN_QUERY_LENGTH:
            return []
        games = self._client.query_games(search_query(query, limit))
        return [translate_search_game(game) for game in games]

    def get_game_metadata(self, external_id: str) -> GameMetadata | None:
        if not external_id.isdigit():
            return None
        games = self._client.query_games(metadata_query(int(external_id)))
        if not games:
            return None
        return translate_game(games[0])

    def get_game_url(self, external_id: str) -> str:
        return game_url(external_id)


if TYPE_CHECKING:
    _provider_check: MetadataProvider = IgdbMetadataProvider()
