"""Metadata provider configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import optional_env_var, optional_env_vars
from .http_resilience import (
    DEFAULT_USER_AGENT,
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)

STEAM_STORE_BASE_URL = "https://store.steampowered.com"
RAWG_BASE_URL = "https://api.rawg.io/api"
BOARDGAMEGEEK_BASE_URL = "https://boardgamegeek.com/xmlapi2"
IGDB_BASE_URL = "https://api.igdb.com/v4"
TWITCH_TOKEN_URL = "https://id.twitch.tv/oauth2/token"


@dataclass(frozen=True, slots=True)
class SteamConfig:
    resilience: ResilienceConfig
    country_code: str = "us"
    language: str = "english"


@dataclass(frozen=True, slots=True)
class RawgConfig:
    api_key: str
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class BoardGameGeekConfig:
    resilience: ResilienceConfig
    api_token: str | None = None


@dataclass(frozen=True, slots=True)
class IgdbConfig:
    client_id: str
    client_secret: str
    resilience: ResilienceConfig
    token_url: str = TWITCH_TOKEN_URL


@dataclass(frozen=True, slots=True)
class MetadataConfig:
    """Provider set available to the enrichment pipeline.

    Steam and BoardGameGeek are public and always present; RAWG and IGDB only
    when their credentials are configured.
    """

    steam: SteamConfig
    boardgamegeek: BoardGameGeekConfig
    rawg: RawgConfig | None = None
    igdb: IgdbConfig | None = None


def _headers() -> dict[str, str]:
    return {"User-Agent": optional_env_var("GAMESHELF_USER_AGENT") or DEFAULT_USER_AGENT}


def get_steam_config() -> SteamConfig:
    return SteamConfig(
        resilience=ResilienceConfig(
            name="steam",
            base_url=STEAM_STORE_BASE_URL,
            ratelimit=RateLimit.one_every(0.4),
            retry=RetryPolicy(total=2),
            cache=CacheConfig(backend="memory"),
            default_headers=_headers(),
        ),
        country_code=optional_env_var("STEAM_COUNTRY_CODE") or "us",
    )


def get_rawg_config() -> RawgConfig | None:
    api_key = optional_env_var("RAWG_API_KEY")
    if api_key is None:
        return None
    return RawgConfig(
        api_key=api_key,
        resilience=ResilienceConfig(
            name="rawg",
            base_url=RAWG_BASE_URL,
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
            cache=CacheConfig(backend="memory"),
            default_headers=_headers(),
        ),
    )


def get_boardgamegeek_config() -> BoardGameGeekConfig:
    return BoardGameGeekConfig(
        resilience=ResilienceConfig(
            name="boardgamegeek",
            base_url=BOARDGAMEGEEK_BASE_URL,
            ratelimit=RateLimit.one_every(1.1),
            cache=CacheConfig(backend="memory"),
            default_headers=_headers(),
        ),
        api_token=optional_env_var("BGG_API_TOKEN"),
    )


def get_igdb_config() -> IgdbConfig | None:
    values = optional_env_vars(("TWITCH_CLIENT_ID", "TWITCH_CLIENT_SECRET"))
    if values is None:
        return None
    return IgdbConfig(
        client_id=values["TWITCH_CLIENT_ID"],
        client_secret=values["TWITCH_CLIENT_SECRET"],
        resilience=ResilienceConfig(
            name="igdb",
            base_url=IGDB_BASE_URL,
            ratelimit=RateLimit(max_calls=4, per_seconds=1.0),
            # Apicalypse queries are POST bodies
            cache=None,
            default_headers=_headers(),
        ),
    )


def get_metadata_config() -> MetadataConfig:
    return MetadataConfig(
        steam=get_steam_config(),
        boardgamegeek=get_boardgamegeek_config(),
        rawg=get_rawg_config(),
        igdb=get_igdb_config(),
    )
