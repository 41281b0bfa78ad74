"""Steam metadata provider."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from gameshelf.domain.ports import ProviderCapabilities, ProviderManifest, RateLimitSettings

from .client import SteamClient
from .translator import (
    PROVIDER_ID,
    STORE_URL_PATTERN,
    store_url,
    translate_app_details,
    translate_search_item,
)

if TYPE_CHECKING:
    from gameshelf.config import SteamConfig
    from gameshelf.domain.ports import GameMetadata, MetadataProvider, MetadataSearchResult

    from .schema import SteamAppDetails, SteamSearchResponse

log = getLogger(__name__)

MANIFEST = ProviderManifest(
    id=PROVIDER_ID,
    name="Steam",
    description="Fetch game metadata from the Steam Store. Works with Steam app ids.",
    requires_api_key=False,
    game_url_pattern=STORE_URL_PATTERN,
)
CAPABILITIES = ProviderCapabilities(has_store_urls=True)
RATE_LIMIT = RateLimitSettings(request_delay_seconds=0.4)

_MIN_QUERY_LENGTH = 2


class SteamStoreClient(Protocol):
    def search(self, *, term: str) -> SteamSearchResponse: ...

    def app_details(self, *, app_id: str) -> SteamAppDetails | None: ...


class SteamMetadataProvider:
    def __init__(
        self,
        *,
        config: SteamConfig | None = None,
        client: SteamStoreClient | None = None,
    ) -> None:
        if client is None:
            if config is None:
                raise ValueError("SteamMetadataProvider needs a config or a client")
            client = SteamClient(config=config)
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
        response = self._client.search(term=term)
        apps = [item for item in response.items if item.type in (None, "app")]
        return [translate_search_item(item) for item in apps[:limit]]

    def get_game_metadata(self, external_id: str) -> GameMetadata | None:
        if not external_id.isdigit():
            log.debug("Ignoring non-numeric Steam app id %r", external_id)
            return None
        details = self._client.app_details(app_id=external_id)
        if details is None:
            return None
        return translate_app_details(details)

    def get_game_url(self, external_id: str) -> str:
        return store_url(external_id)


if TYPE_CHECKING:
    _provider_check: MetadataProvider = SteamMetadataProvider()
