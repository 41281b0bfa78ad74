"""Stable per-account identity for an aggregator entry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from .dto import IncomingGame

MISSING_ORIGINAL_GAME_ID: Final[str] = "MISSING_ORIGINAL_GAME_ID"


@dataclass(slots=True, frozen=True)
class EntitlementKey:
    key: str
    needs_review: bool
    warnings: tuple[str, ...] = ()


def resolve_entitlement_key(game: IncomingGame) -> EntitlementKey:
    """Derive the entitlement key, falling back to the Playnite database id.

    The explicit key wins, then ``playnite:<plugin>:<game id>``. The database
    fallback is only stable within one Playnite installation and is therefore
    flagged for review. A missing original game id always needs review.
    """

    if game.entitlement_key:
        key = game.entitlement_key
        needs_review = False
    elif game.original_provider_plugin_id and game.original_provider_game_id:
        key = f"playnite:{game.original_provider_plugin_id}:{game.original_provider_game_id}"
        needs_review = False
    else:
        key = f"playnite-db:{game.playnite_database_id}"
        needs_review = True

    warnings: tuple[str, ...] = ()
    if not game.original_provider_game_id:
        needs_review = True
        warnings = (MISSING_ORIGINAL_GAME_ID,)
    return EntitlementKey(key=key, needs_review=needs_review, warnings=warnings)
