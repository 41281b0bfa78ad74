"""Translate IGDB games into provider-neutral metadata."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from gameshelf.domain.enrichment.text import (
    MAX_SHORT_DESCRIPTION_LENGTH,
    strip_html,
    truncate_text,
)
from gameshelf.domain.ports import GameMetadata, MetadataSearchResult, PlayerInfo

if TYPE_CHECKING:
    from .schema import IgdbGame

PROVIDER_ID: Final = "igdb"
GAME_URL_PATTERN: Final = "https://www.igdb.com/games/{id}"
COVER_URL_PATTERN: Final = "https://images.igdb.com/igdb/image/upload/t_cover_big/{image_id}.jpg"
DEFAULT_SPLITSCREEN_MAX_PLAYERS: Final = 4

_MULTIPLAYER_MODES: Final = frozenset({"multiplayer", "co-operative", "split-screen"})
_MMO_MODE: Final = "massively-multiplayer-online-mmo"
_SINGLE_PLAYER_MODE: Final = "single-player"


def game_url(game_id: str) -> str:
    return GAME_URL_PATTERN.format(id=game_id)


def cover_url(game: IgdbGame) -> str | None:
    if game.cover is None:
        return None
    return COVER_URL_PATTERN.format(image_id=game.cover.image_id)


def release_date(timestamp: int | None) -> str | None:
    if timestamp is None:
        return None
    return datetime.fromtimestamp(timestamp, tz=UTC).date().isoformat()


def translate_search_game(game: IgdbGame) -> MetadataSearchResult:
    return MetadataSearchResult(
        provider_id=PROVIDER_ID,
        external_id=str(game.id),
        name=game.name,
        release_date=release_date(game.first_release_date),
        cover_image_url=cover_url(game),
    )


def translate_game(game: IgdbGame) -> GameMetadata:
    description = strip_html(game.summary or game.storyline)
    return GameMetadata(
        provider_id=PROVIDER_ID,
        external_id=str(game.id),
        name=game.name,
        description=description or None,
        short_description=(
            truncate_text(description, MAX_SHORT_DESCRIPTION_LENGTH) if description else None
        ),
        cover_image_url=cover_url(game),
        release_date=release_date(game.first_release_date),
        genres=[genre.name for genre in game.genres],
        player_info=extract_player_info(game),
    )


def extract_player_info(game: IgdbGame) -> PlayerInfo:
    """Build player counts from ``multiplayer_modes``.

    Online and local maxima are the largest values across all modes. Split-screen
    implies at least four local players when IGDB reports fewer.
    """

    slugs = {mode.slug for mode in game.game_modes}
    is_single_player = _SINGLE_PLAYER_MODE in slugs
    is_multiplayer = bool(slugs & _MULTIPLAYER_MODES)

    online_max: int | None = None
    local_max: int | None = None
    supports_online = False
    supports_local = False

    for mode in game.multiplayer_modes:
        for value in (mode.onlinemax, mode.onlinecoopmax):
            if value is not None and value > 0:
                supports_online = True
                online_max = max(online_max or 0, value)
        for value in (mode.offlinemax, mode.offlinecoopmax):
            if value is not None and value > 0:
                supports_local = True
                local_max = max(local_max or 0, value)
        if mode.splitscreen:
            supports_local = True
            if local_max is None or local_max < DEFAULT_SPLITSCREEN_MAX_PLAYERS:
                local_max = DEFAULT_SPLITSCREEN_MAX_PLAYERS
        if mode.lancoop:
            supports_local = True

    overall_max: int | None = None
    if online_max is not None or local_max is not None:
        overall_max = max(value for value in (online_max, local_max) if value is not None)
    elif is_single_player and not is_multiplayer:
        overall_max = 1
    elif _MMO_MODE in slugs:
        supports_online = True

    overall_min = 1 if is_single_player or (overall_max is not None and overall_max > 0) else None
    return PlayerInfo(
        overall_min_players=overall_min,
        overall_max_players=overall_max,
        supports_online=supports_online,
        supports_local=supports_local,
        online_max_players=online_max if supports_online else None,
        local_max_players=local_max if supports_local else None,
    )
