from __future__ import annotations

import pytest

from gameshelf.domain.enrichment import MetadataProviderRegistry
from gameshelf.domain.model import GameType
from gameshelf.domain.ports import MetadataProvider, ProviderCapabilities
from tests.support.builders import FakeMetadataProvider


def _registry(*provider_ids: str) -> MetadataProviderRegistry:
    return MetadataProviderRegistry(FakeMetadataProvider(pid) for pid in provider_ids)


def test_fake_provider_satisfies_protocol() -> None:
    assert isinstance(FakeMetadataProvider("steam"), MetadataProvider)


def test_register_and_lookup() -> None:
    registry = _registry("steam", "rawg")

    assert len(registry) == 2
    assert "steam" in registry
    assert "igdb" not in registry
    assert registry.get("igdb") is None
    assert [p.manifest.id for p in registry.all()] == ["steam", "rawg"]


def test_register_replaces_same_id() -> None:
    registry = _registry("steam")
    replacement = FakeMetadataProvider("steam", name="Steam v2")

    registry.register(replacement)

    assert len(registry) == 1
    assert registry.get("steam") is replacement


@pytest.mark.parametrize(
    ("game_type", "expected"),
    [
        (GameType.VIDEO_GAME, ["steam", "rawg"]),
        (GameType.BOARD_GAME, ["boardgamegeek"]),
        (GameType.CARD_GAME, ["boardgamegeek"]),
        (GameType.TABLETOP_RPG, ["boardgamegeek"]),
        (GameType.OTHER_PHYSICAL_GAME, ["steam", "rawg"]),
        (None, ["igdb", "rawg", "boardgamegeek", "steam"]),
    ],
)
def test_for_game_type(game_type: GameType | None, expected: list[str]) -> None:
    registry = _registry("igdb", "rawg", "boardgamegeek", "steam")

    assert [p.manifest.id for p in registry.for_game_type(game_type)] == expected


def test_for_game_type_skips_unregistered_providers() -> None:
    registry = _registry("rawg")

    assert [p.manifest.id for p in registry.for_game_type(GameType.VIDEO_GAME)] == ["rawg"]
    assert registry.for_game_type(GameType.BOARD_GAME) == []


def test_by_capability() -> None:
    registry = MetadataProviderRegistry(
        [FakeMetadataProvider("steam"), FakeMetadataProvider("igdb", accurate_counts=True)]
    )

    accurate = registry.by_capability("has_accurate_player_counts")

    assert [p.manifest.id for p in accurate] == ["igdb"]


def test_unknown_capability_raises() -> None:
    with pytest.raises(ValueError, match="Unknown provider capability"):
        ProviderCapabilities().supports("teleportation")
