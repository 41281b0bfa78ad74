"""Translate Steam Store payloads into provider-neutral metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from gameshelf.domain.enrichment.text import (
    MAX_SHORT_DESCRIPTION_LENGTH,
    strip_html,
    truncate_text,
)
from gameshelf.domain.ports import GameMetadata, MetadataSearchResult, PlayerInfo

if TYPE_CHECKING:
    from .schema import SteamAppDetails, SteamCategory, SteamSearchItem

PROVIDER_ID: Final = "steam"
STORE_URL_PATTERN: Final = "https://store.steampowered.com/app/{id}"

# Steam store category ids
_SINGLE_PLAYER: Final = 2
_MULTIPLAYER: Final = frozenset({1, 9, 20, 49})
_ONLINE: Final = frozenset({20, 27, 36, 38})
_LOCAL: Final = frozenset({24, 37, 39})


def store_url(app_id: str) -> str:
    return STORE_URL_PATTERN.format(id=app_id)


def translate_search_item(item: SteamSearchItem) -> MetadataSearchResult:
    return MetadataSearchResult(
        provider_id=PROVIDER_ID,
        external_id=str(item.id),
        name=item.name,
        cover_image_url=item.tiny_image,
    )


def translate_app_details(details: SteamAppDetails) -> GameMetadata:
    app_id = str(details.steam_appid)
    description = strip_html(details.about_the_game or details.detailed_description)
    short_description = strip_html(details.short_description) or truncate_text(
        description, MAX_SHORT_DESCRIPTION_LENGTH
    )
    return GameMetadata(
        provider_id=PROVIDER_ID,
        external_id=app_id,
        name=details.name,
        description=description or None,
        short_description=short_description or None,
        cover_image_url=details.capsule_imagev5 or details.capsule_image,
        release_date=details.release_date.date if details.release_date else None,
        store_url=store_url(app_id),
        genres=[genre.description for genre in details.genres],
        player_info=extract_player_info(details.categories),
    )


def extract_player_info(categories: list[SteamCategory]) -> PlayerInfo:
    """Derive mode support from store categories.

    Steam publishes no player counts; a pure single-player game is capped at one.
    """

    ids = {category.id for category in categories}
    is_multiplayer = bool(ids & _MULTIPLAYER)
    single_only = _SINGLE_PLAYER in ids and not is_multiplayer
    return PlayerInfo(
        overall_min_players=1,
        overall_max_players=1 if single_only else None,
        supports_online=bool(ids & _ONLINE),
        supports_local=bool(ids & _LOCAL),
    )
