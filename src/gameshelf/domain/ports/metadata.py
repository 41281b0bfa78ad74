"""Port definitions for metadata providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


class MetadataApiError(RuntimeError):
    """Raised by provider adapters on transport or response errors."""

    def __init__(
        self,
        message: str,
        *,
        provider_id: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.provider_id = provider_id
        self.status_code = status_code


class MetadataRateLimitError(MetadataApiError):
    """Raised when a provider answers with HTTP 429."""


@dataclass(slots=True, frozen=True)
class ProviderManifest:
    id: str
    name: str
    description: str
    requires_api_key: bool = False
    game_url_pattern: str | None = None


@dataclass(slots=True, frozen=True)
class ProviderCapabilities:
    has_accurate_player_counts: bool = False
    has_store_urls: bool = False
    supports_batch_requests: bool = False
    supports_search: bool = True
    has_descriptions: bool = True
    has_cover_images: bool = True

    def supports(self, capability: str) -> bool:
        value = getattr(self, capability, None)
        if not isinstance(value, bool):
            msg = f"Unknown provider capability: {capability}"
            raise ValueError(msg)
        return value


@dataclass(slots=True, frozen=True)
class RateLimitSettings:
    request_delay_seconds: float = 0.0
    max_consecutive_errors: int = 5


@dataclass(slots=True, frozen=True)
class PlayerInfo:
    """Player-count facts reported by a provider. ``None`` means unknown."""

    overall_min_players: int | None = None
    overall_max_players: int | None = None
    supports_online: bool | None = None
    supports_local: bool | None = None
    supports_physical: bool | None = None
    online_max_players: int | None = None
    local_max_players: int | None = None
    physical_max_players: int | None = None

    @property
    def is_multiplayer(self) -> bool:
        return bool(self.supports_online or self.supports_local)

    @property
    def has_mode_counts(self) -> bool:
        return self.online_max_players is not None or self.local_max_players is not None


@dataclass(slots=True)
class GameMetadata:
    """Normalised metadata for one game as returned by a provider."""

    provider_id: str
    external_id: str
    name: str
    description: str | None = None
    short_description: str | None = None
    cover_image_url: str | None = None
    release_date: str | None = None
    store_url: str | None = None
    genres: list[str] = field(default_factory=list[str])
    player_info: PlayerInfo | None = None


@dataclass(slots=True, frozen=True)
class MetadataSearchResult:
    provider_id: str
    external_id: str
    name: str
    release_date: str | None = None
    cover_image_url: str | None = None


@runtime_checkable
class MetadataProvider(Protocol):
    """Contract every metadata source adapter fulfils."""

    @property
    def manifest(self) -> ProviderManifest: ...

    @property
    def capabilities(self) -> ProviderCapabilities: ...

    @property
    def rate_limit(self) -> RateLimitSettings: ...

    def search_games(self, query: str, limit: int = 10) -> list[MetadataSearchResult]: ...

    def get_game_metadata(self, external_id: str) -> GameMetadata | None: ...

    def get_game_url(self, external_id: str) -> str: ...
