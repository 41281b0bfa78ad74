from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from gameshelf.domain.ingest import CatalogMappingResolver, list_pending_mappings
from gameshelf.domain.model import GameExternalMapping, GameTitle, GameType, MappingStatus

if TYPE_CHECKING:
    from uuid import UUID

    from tests.support.fakes import FakeStore

NOW = datetime(2024, 5, 1, 12, tzinfo=UTC)


def _resolver(store: FakeStore) -> CatalogMappingResolver:
    return CatalogMappingResolver(
        mappings=store.mappings,
        titles=store.titles,
        releases=store.releases,
        now=NOW,
    )


def _mapping(
    store: FakeStore, owner_id: UUID, provider: str, external_id: str
) -> GameExternalMapping | None:
    return store.mappings.get(owner_id=owner_id, provider=provider, external_game_id=external_id)


def test_first_sight_creates_title_release_and_both_mappings(
    store: FakeStore, owner_id: UUID
) -> None:
    resolution = _resolver(store).resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )

    assert resolution.created is True
    title = store.titles.get(resolution.title_id)
    release = store.releases.get(resolution.release_id)
    assert title is not None
    assert title.name == "Portal 2"
    assert title.type is GameType.VIDEO_GAME
    assert release is not None
    assert release.title_id == title.id
    assert release.platform == "PC"

    aggregator = _mapping(store, owner_id, "playnite", "key-1")
    original = _mapping(store, owner_id, "steam", "620")
    assert aggregator is not None
    assert original is not None
    assert aggregator.status is MappingStatus.MAPPED
    assert original.status is MappingStatus.MAPPED
    assert aggregator.release_id == original.release_id == release.id


def test_second_resolve_reuses_aggregator_mapping(store: FakeStore, owner_id: UUID) -> None:
    resolver = _resolver(store)
    first = resolver.resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )
    second = resolver.resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )

    assert second.created is False
    assert second.release_id == first.release_id
    assert len(store.titles.rows) == 1
    assert len(store.mappings.rows) == 2


def test_original_identity_is_reused_from_another_aggregator_key(
    store: FakeStore, owner_id: UUID
) -> None:
    resolver = _resolver(store)
    first = resolver.resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )

    other = resolver.resolve(
        "key-2", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )

    assert other.created is False
    assert other.release_id == first.release_id
    assert len(store.titles.rows) == 1
    mapping = _mapping(store, owner_id, "playnite", "key-2")
    assert mapping is not None
    assert mapping.release_id == first.release_id


def test_unknown_provider_creates_no_original_mapping(store: FakeStore, owner_id: UUID) -> None:
    _resolver(store).resolve(
        "key-1", "unknown", "abc", "Homebrew", owner_id, needs_review=False, platform="PC"
    )

    assert len(store.mappings.rows) == 1
    assert _mapping(store, owner_id, "unknown", "abc") is None


def test_needs_review_creates_pending_aggregator_mapping(
    store: FakeStore, owner_id: UUID
) -> None:
    resolution = _resolver(store).resolve(
        "playnite-db:1", "steam", None, "Mystery", owner_id, needs_review=True, platform="PC"
    )

    pending = list_pending_mappings(store.mappings, owner_id)
    assert [mapping.external_game_id for mapping in pending] == ["playnite-db:1"]
    assert pending[0].release_id == resolution.release_id


def test_pending_mapping_with_release_is_reused_and_promoted(
    store: FakeStore, owner_id: UUID
) -> None:
    resolver = _resolver(store)
    first = resolver.resolve(
        "key-1", "steam", None, "Portal 2", owner_id, needs_review=True, platform="PC"
    )

    second = resolver.resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )

    assert second.created is False
    assert second.release_id == first.release_id
    aggregator = _mapping(store, owner_id, "playnite", "key-1")
    assert aggregator is not None
    assert aggregator.status is MappingStatus.MAPPED
    original = _mapping(store, owner_id, "steam", "620")
    assert original is not None
    assert original.release_id == first.release_id
    assert list_pending_mappings(store.mappings, owner_id) == []


def test_pending_original_mapping_gets_bound_to_new_release(
    store: FakeStore, owner_id: UUID
) -> None:
    store.mappings.add(
        GameExternalMapping(owner_id=owner_id, provider="steam", external_game_id="620")
    )

    resolution = _resolver(store).resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )

    original = _mapping(store, owner_id, "steam", "620")
    assert resolution.created is True
    assert original is not None
    assert original.status is MappingStatus.MAPPED
    assert original.release_id == resolution.release_id


def test_mappings_are_scoped_per_owner(store: FakeStore, owner_id: UUID) -> None:
    resolver = _resolver(store)
    mine = resolver.resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )
    theirs = resolver.resolve(
        "key-1", "steam", "620", "Portal 2", uuid4(), needs_review=False, platform="PC"
    )

    assert theirs.created is True
    assert theirs.release_id != mine.release_id


def test_ignored_aggregator_mapping_is_left_alone(store: FakeStore, owner_id: UUID) -> None:
    ignored = GameExternalMapping(
        owner_id=owner_id,
        provider="playnite",
        external_game_id="key-1",
        status=MappingStatus.IGNORED,
    )
    store.mappings.add(ignored)

    resolution = _resolver(store).resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )

    assert resolution is None
    assert ignored.status is MappingStatus.IGNORED
    assert ignored.release_id is None
    assert store.titles.rows == {}
    assert _mapping(store, owner_id, "steam", "620") is None


def test_ignored_mapping_with_release_is_not_reused(store: FakeStore, owner_id: UUID) -> None:
    resolver = _resolver(store)
    first = resolver.resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )
    assert first is not None
    aggregator = _mapping(store, owner_id, "playnite", "key-1")
    assert aggregator is not None
    aggregator.status = MappingStatus.IGNORED

    second = resolver.resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )

    assert second is None
    assert aggregator.status is MappingStatus.IGNORED
    assert aggregator.release_id == first.release_id


def test_same_name_from_another_store_reuses_the_title(store: FakeStore, owner_id: UUID) -> None:
    resolver = _resolver(store)
    steam = resolver.resolve(
        "key-1", "steam", "620", "Portal 2", owner_id, needs_review=False, platform="PC"
    )
    epic = resolver.resolve(
        "key-2", "epic", "portal", "Portal™ 2", owner_id, needs_review=False, platform="PC"
    )

    assert steam is not None
    assert epic is not None
    assert epic.created is False
    assert epic.title_id == steam.title_id
    assert epic.release_id == steam.release_id
    assert len(store.titles.rows) == 1
    assert len(store.releases.rows) == 1


def test_edition_becomes_a_release_of_the_base_title(store: FakeStore, owner_id: UUID) -> None:
    resolver = _resolver(store)
    base = resolver.resolve(
        "key-1", "steam", "1", "The Sims 4", owner_id, needs_review=False, platform="PC"
    )
    premium = resolver.resolve(
        "key-2",
        "ea",
        "2",
        "The Sims 4 - Premium Edition",
        owner_id,
        needs_review=False,
        platform="PC",
    )
    switch = resolver.resolve(
        "key-3", "nintendo", "3", "The Sims 4", owner_id, needs_review=False, platform="Switch"
    )

    assert base is not None
    assert premium is not None
    assert switch is not None
    assert premium.created is True
    assert premium.title_id == switch.title_id == base.title_id
    assert len({base.release_id, premium.release_id, switch.release_id}) == 3
    [title] = store.titles.rows.values()
    assert title.name == "The Sims 4"
    release = store.releases.get(premium.release_id)
    assert release is not None
    assert release.edition == "Premium Edition"


def test_existing_title_is_matched_by_normalized_name(store: FakeStore, owner_id: UUID) -> None:
    existing = GameTitle(owner_id=owner_id, name="Baldur's Gate 3")
    store.titles.add(existing)

    resolution = _resolver(store).resolve(
        "key-1", "gog", "1", "Baldurs Gate 3", owner_id, needs_review=False, platform="PC"
    )

    assert resolution is not None
    assert resolution.created is True
    assert resolution.title_id == existing.id
    assert len(store.titles.rows) == 1
