from __future__ import annotations

from gameshelf.domain.ingest import MISSING_ORIGINAL_GAME_ID, resolve_entitlement_key
from tests.support.builders import STEAM_PLUGIN_ID, make_game


def test_explicit_entitlement_key_wins() -> None:
    game = make_game(entitlement_key="steam:620")

    resolved = resolve_entitlement_key(game)

    assert resolved.key == "steam:620"
    assert resolved.needs_review is False
    assert resolved.warnings == ()


def test_key_built_from_plugin_and_original_game_id() -> None:
    resolved = resolve_entitlement_key(make_game())

    assert resolved.key == f"playnite:{STEAM_PLUGIN_ID}:620"
    assert resolved.needs_review is False


def test_falls_back_to_database_id_and_needs_review() -> None:
    game = make_game("Custom Game", original_provider_game_id=None)

    resolved = resolve_entitlement_key(game)

    assert resolved.key == "playnite-db:db-custom-game"
    assert resolved.needs_review is True
    assert resolved.warnings == (MISSING_ORIGINAL_GAME_ID,)


def test_missing_original_id_flags_review_even_with_explicit_key() -> None:
    game = make_game(entitlement_key="custom:1", original_provider_game_id=None)

    resolved = resolve_entitlement_key(game)

    assert resolved.key == "custom:1"
    assert resolved.needs_review is True
    assert resolved.warnings == (MISSING_ORIGINAL_GAME_ID,)


def test_empty_plugin_id_uses_database_fallback() -> None:
    game = make_game(original_provider_plugin_id="")

    resolved = resolve_entitlement_key(game)

    assert resolved.key.startswith("playnite-db:")
    assert resolved.needs_review is True
    # the original game id is present, so no warning is raised
    assert resolved.warnings == ()
