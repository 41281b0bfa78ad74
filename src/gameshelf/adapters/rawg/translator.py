"""Translate RAWG payloads into provider-neutral metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from gameshelf.domain.enrichment.text import (
    MAX_SHORT_DESCRIPTION_LENGTH,
    strip_html,
    truncate_text,
)
from gameshelf.domain.ports import GameMetadata, MetadataSearchResult, PlayerInfo

if TYPE_CHECKING:
    from .schema import RawgGame, RawgNamedRef

PROVIDER_ID: Final = "rawg"
GAME_URL_PATTERN: Final = "https://rawg.io/games/{id}"

_MULTIPLAYER_TAGS: Final = frozenset(
    {
        "multiplayer",
        "online-multiplayer",
        "co-op",
        "local-co-op",
        "split-screen",
        "online-co-op",
        "local-multiplayer",
    }
)
_ONLINE_TAGS: Final = frozenset(
    {"online-multiplayer", "online-co-op", "mmo", "massively-multiplayer"}
)
_LOCAL_TAGS: Final = frozenset({"local-co-op", "local-multiplayer", "split-screen"})


def game_url(game_id: str) -> str:
    return GAME_URL_PATTERN.format(id=game_id)


def translate_search_game(game: RawgGame) -> MetadataSearchResult:
    return MetadataSearchResult(
        provider_id=PROVIDER_ID,
        external_id=str(game.id),
        name=game.name,
        release_date=game.released,
        cover_image_url=game.background_image,
    )


def translate_game(game: RawgGame) -> GameMetadata:
    description = game.description_raw or strip_html(game.description)
    return GameMetadata(
        provider_id=PROVIDER_ID,
        external_id=str(game.id),
        name=game.name,
        description=description or None,
        short_description=(
            truncate_text(description, MAX_SHORT_DESCRIPTION_LENGTH) if description else None
        ),
        cover_image_url=game.background_image,
        release_date=game.released,
        genres=[genre.name for genre in game.genres],
        player_info=extract_player_info(game.tags),
    )


def extract_player_info(tags: list[RawgNamedRef]) -> PlayerInfo:
    slugs = {tag.slug.lower() for tag in tags}
    return PlayerInfo(
        overall_min_players=1,
        overall_max_players=None if slugs & _MULTIPLAYER_TAGS else 1,
        supports_online=bool(slugs & _ONLINE_TAGS),
        supports_local=bool(slugs & _LOCAL_TAGS),
    )
