from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from gameshelf.domain.merge import MergeError, MergeOperation, ReleaseDetails, execute_merge
from gameshelf.domain.model import (
    EntityType,
    GameExternalMapping,
    GameRelease,
    GameTitle,
    Item,
    MappingStatus,
    MergeKind,
)

if TYPE_CHECKING:
    from uuid import UUID

    from gameshelf.domain.merge import MergeResult
    from tests.support.fakes import FakeStore


def _title(store: FakeStore, owner_id: UUID, name: str) -> GameTitle:
    title = GameTitle(owner_id=owner_id, name=name)
    store.titles.add(title)
    return title


def _release(store: FakeStore, title: GameTitle, platform: str = "PC") -> GameRelease:
    release = GameRelease(title_id=title.id, owner_id=title.owner_id, platform=platform)
    store.releases.add(release)
    return release


def _copy(store: FakeStore, release: GameRelease) -> Item:
    item = Item(owner_id=release.owner_id, name="copy", game_release_id=release.id)
    store.items.add(item)
    return item


def _mapping(store: FakeStore, release: GameRelease, external_id: str) -> GameExternalMapping:
    mapping = GameExternalMapping(
        owner_id=release.owner_id,
        provider="steam",
        external_game_id=external_id,
        title_id=release.title_id,
        release_id=release.id,
        status=MappingStatus.MAPPED,
    )
    store.mappings.add(mapping)
    return mapping


def _merge(store: FakeStore, operation: MergeOperation) -> MergeResult:
    with store.catalog_uow() as uow:
        return execute_merge(operation, uow)


def test_merge_titles_moves_releases_and_mappings(store: FakeStore, owner_id: UUID) -> None:
    source = _title(store, owner_id, "Portal 2 (GOG)")
    target = _title(store, owner_id, "Portal 2")
    release = _release(store, source)
    mapping = _mapping(store, release, "620")

    result = _merge(store, MergeOperation(MergeKind.TITLE, source.id, target.id))

    assert result.moved == 1
    assert release.title_id == target.id
    assert mapping.title_id == target.id
    assert store.titles.get(source.id) is None
    [audit] = store.merges.rows
    assert audit.entity_type is EntityType.GAME_TITLE
    assert (audit.source_id, audit.target_id, audit.kind) == (source.id, target.id, MergeKind.TITLE)
    assert store.commits == 1


def test_merge_releases_moves_copies(store: FakeStore, owner_id: UUID) -> None:
    title = _title(store, owner_id, "Portal 2")
    other_title = _title(store, owner_id, "Portal 2 GOTY")
    source = _release(store, title)
    target = _release(store, other_title)
    copies = [_copy(store, source), _copy(store, source)]
    mapping = _mapping(store, source, "620")

    result = _merge(store, MergeOperation(MergeKind.RELEASE, source.id, target.id))

    assert result.moved == 2
    assert all(copy.game_release_id == target.id for copy in copies)
    assert mapping.release_id == target.id
    assert mapping.title_id == other_title.id
    assert store.releases.get(source.id) is None
    assert store.merges.rows[0].entity_type is EntityType.GAME_RELEASE


def test_merge_title_as_release(store: FakeStore, owner_id: UUID) -> None:
    source = _title(store, owner_id, "Zelda (Switch)")
    target = _title(store, owner_id, "Zelda")
    old_release = _release(store, source)
    copy = _copy(store, old_release)
    mapping = _mapping(store, old_release, "zelda")

    result = _merge(
        store,
        MergeOperation(
            MergeKind.AS_RELEASE,
            source.id,
            target.id,
            ReleaseDetails(platform="Nintendo Switch", edition="", region="EU"),
        ),
    )

    assert result.release_id is not None
    new_release = store.releases.get(result.release_id)
    assert new_release is not None
    assert new_release.title_id == target.id
    assert new_release.platform == "Nintendo Switch"
    assert new_release.edition is None
    assert new_release.region == "EU"
    assert copy.game_release_id == new_release.id
    assert mapping.release_id == new_release.id
    assert mapping.title_id == target.id
    assert store.releases.get(old_release.id) is None
    assert store.titles.get(source.id) is None
    assert result.moved == 1


def test_title_as_release_needs_platform(store: FakeStore, owner_id: UUID) -> None:
    source = _title(store, owner_id, "A")
    target = _title(store, owner_id, "B")

    with pytest.raises(MergeError, match="platform"):
        _merge(store, MergeOperation(MergeKind.AS_RELEASE, source.id, target.id))


def test_title_as_release_rejects_multiple_releases(store: FakeStore, owner_id: UUID) -> None:
    source = _title(store, owner_id, "A")
    target = _title(store, owner_id, "B")
    _release(store, source, "PC")
    _release(store, source, "Mac")

    with pytest.raises(MergeError, match="multiple releases"):
        _merge(
            store,
            MergeOperation(
                MergeKind.AS_RELEASE, source.id, target.id, ReleaseDetails(platform="PC")
            ),
        )
    assert store.commits == 0
    assert store.rollbacks == 1


def test_self_merge_is_rejected(store: FakeStore, owner_id: UUID) -> None:
    title = _title(store, owner_id, "A")

    with pytest.raises(MergeError, match="itself"):
        _merge(store, MergeOperation(MergeKind.TITLE, title.id, title.id))


@pytest.mark.parametrize("kind", [MergeKind.TITLE, MergeKind.RELEASE])
def test_missing_entities_are_rejected(store: FakeStore, kind: MergeKind) -> None:
    with pytest.raises(MergeError, match="not found"):
        _merge(store, MergeOperation(kind, uuid4(), uuid4()))
