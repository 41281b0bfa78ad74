"""Translate BoardGameGeek documents into provider-neutral metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from gameshelf.domain.enrichment.text import (
    MAX_SHORT_DESCRIPTION_LENGTH,
    strip_html,
    truncate_text,
)
from gameshelf.domain.ports import GameMetadata, MetadataSearchResult, PlayerInfo

if TYPE_CHECKING:
    from .schema import BggSearchItem, BggThing

PROVIDER_ID: Final = "boardgamegeek"
GAME_URL_PATTERN: Final = "https://boardgamegeek.com/boardgame/{id}"


def game_url(thing_id: str) -> str:
    return GAME_URL_PATTERN.format(id=thing_id)


def translate_search_item(item: BggSearchItem) -> MetadataSearchResult:
    # search results carry no images
    return MetadataSearchResult(
        provider_id=PROVIDER_ID,
        external_id=item.id,
        name=item.name,
        release_date=item.year_published,
    )


def translate_thing(thing: BggThing) -> GameMetadata:
    description = strip_html(thing.description)
    return GameMetadata(
        provider_id=PROVIDER_ID,
        external_id=thing.id,
        name=thing.name,
        description=description or None,
        short_description=(
            truncate_text(description, MAX_SHORT_DESCRIPTION_LENGTH) if description else None
        ),
        cover_image_url=thing.image or thing.thumbnail,
        release_date=thing.year_published,
        genres=list(thing.categories),
        player_info=extract_player_info(thing),
    )


def extract_player_info(thing: BggThing) -> PlayerInfo:
    """Board games are played at the table; missing counts default to one player."""

    min_players = thing.min_players or 1
    max_players = thing.max_players or 1
    return PlayerInfo(
        overall_min_players=min_players,
        overall_max_players=max_players,
        supports_online=False,
        supports_local=max_players > 1,
        supports_physical=True,
        local_max_players=max_players,
        physical_max_players=max_players,
    )
