"""Rules for writing provider metadata onto a catalog title.

Provider data never blindly overwrites curated fields: descriptions and covers
are only filled in when missing or placeholder-like, and player counts are only
written when they are valid and consistent with the mode flags.
"""

from __future__ import annotations

import math
from dataclasses import replace
from typing import TYPE_CHECKING, Final

from .text import normalize_description

if TYPE_CHECKING:
    from gameshelf.domain.model import GameTitle
    from gameshelf.domain.ports import GameMetadata, PlayerInfo

MIN_VALID_DESCRIPTION_LENGTH: Final[int] = 50


def is_valid_player_count(value: object) -> bool:
    """Positive finite numbers only; 0, negatives and NaN mean "unknown"."""

    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value) and value > 0


def merge_player_counts(
    existing: PlayerInfo | None,
    enrichment: PlayerInfo | None,
) -> PlayerInfo | None:
    """Overlay the max counts of an accurate provider on top of ``existing``."""

    if enrichment is None:
        return existing
    if existing is None:
        return enrichment
    return replace(
        existing,
        overall_max_players=_first_set(
            enrichment.overall_max_players, existing.overall_max_players
        ),
        online_max_players=_first_set(enrichment.online_max_players, existing.online_max_players),
        local_max_players=_first_set(enrichment.local_max_players, existing.local_max_players),
        physical_max_players=_first_set(
            enrichment.physical_max_players, existing.physical_max_players
        ),
    )


def _first_set(preferred: int | None, fallback: int | None) -> int | None:
    return preferred if preferred is not None else fallback


def apply_metadata(
    title: GameTitle,
    metadata: GameMetadata,
    *,
    force: bool = False,
    min_description_length: int = MIN_VALID_DESCRIPTION_LENGTH,
) -> list[str]:
    """Write ``metadata`` onto ``title`` and return the names of changed fields."""

    updates: dict[str, object] = {}

    raw_description = metadata.short_description or metadata.description
    if raw_description:
        description = normalize_description(raw_description)
        current = title.description
        needs_description = (
            force
            or not current
            or len(current) < min_description_length
            or current == title.name
        )
        if description and needs_description:
            updates["description"] = description

    if metadata.cover_image_url and (force or not title.cover_image_url):
        updates["cover_image_url"] = metadata.cover_image_url

    if metadata.player_info is not None:
        updates.update(_player_updates(title, metadata.player_info))

    changed: list[str] = []
    for name, value in updates.items():
        if getattr(title, name) != value:
            setattr(title, name, value)
            changed.append(name)
    if changed:
        title.touch()
    return changed


def _player_updates(title: GameTitle, info: PlayerInfo) -> dict[str, object]:
    updates: dict[str, object] = {}

    if is_valid_player_count(info.overall_min_players):
        updates["overall_min_players"] = info.overall_min_players
    if is_valid_player_count(info.overall_max_players):
        updates["overall_max_players"] = info.overall_max_players

    _apply_mode(updates, title, "online", info.supports_online, info.online_max_players)
    _apply_mode(updates, title, "local", info.supports_local, info.local_max_players)
    if title.type.is_physical:
        _apply_mode(updates, title, "physical", info.supports_physical, info.physical_max_players)
    return updates


def _apply_mode(
    updates: dict[str, object],
    title: GameTitle,
    mode: str,
    supported: bool | None,
    max_players: int | None,
) -> None:
    flag = f"supports_{mode}"
    if supported is not None:
        updates[flag] = supported
        if not supported:
            updates[f"{mode}_min_players"] = None
            updates[f"{mode}_max_players"] = None
    will_support = updates.get(flag, getattr(title, flag))
    if will_support and is_valid_player_count(max_players):
        updates[f"{mode}_max_players"] = max_players
