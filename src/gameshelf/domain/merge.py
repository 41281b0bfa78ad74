"""Manual catalog merges: fold duplicate titles and releases together."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.domain.model import EntityMerge, EntityType, GameRelease, MergeKind, utcnow

if TYPE_CHECKING:
    from uuid import UUID

    from gameshelf.domain.model import GameTitle
    from gameshelf.domain.ports import CatalogRepositories, CatalogUnitOfWork

log = getLogger(__name__)


class MergeError(ValueError):
    """Raised when a merge request cannot be carried out."""


@dataclass(slots=True, frozen=True, kw_only=True)
class ReleaseDetails:
    """Describes the release a title turns into when merged as a release."""

    platform: str
    edition: str | None = None
    region: str | None = None
    release_date: str | None = None


@dataclass(slots=True, frozen=True)
class MergeOperation:
    kind: MergeKind
    source_id: UUID
    target_id: UUID
    extra: ReleaseDetails | None = None


@dataclass(slots=True, frozen=True)
class MergeResult:
    kind: MergeKind
    moved: int
    release_id: UUID | None = None


def execute_merge(operation: MergeOperation, uow: CatalogUnitOfWork) -> MergeResult:
    """Run one merge inside an entered unit of work and commit it."""

    if operation.source_id == operation.target_id:
        raise MergeError(f"Cannot merge {_noun(operation.kind)} with itself")

    repositories = uow.repositories
    match operation.kind:
        case MergeKind.TITLE:
            result = _merge_titles(repositories, operation)
            entity_type = EntityType.GAME_TITLE
        case MergeKind.RELEASE:
            result = _merge_releases(repositories, operation)
            entity_type = EntityType.GAME_RELEASE
        case MergeKind.AS_RELEASE:
            result = _merge_title_as_release(repositories, operation)
            entity_type = EntityType.GAME_TITLE

    repositories.merges.add(
        EntityMerge(
            entity_type=entity_type,
            source_id=operation.source_id,
            target_id=operation.target_id,
            kind=operation.kind,
        )
    )
    uow.commit()
    log.info(
        "Merged %s %s into %s (%d moved)",
        entity_type,
        operation.source_id,
        operation.target_id,
        result.moved,
    )
    return result


def _merge_titles(repositories: CatalogRepositories, operation: MergeOperation) -> MergeResult:
    source, target = _load_titles(repositories, operation)
    now = utcnow()

    releases = repositories.releases.list_for_title(source.id)
    for release in releases:
        release.title_id = target.id
        release.touch(now)
    for mapping in repositories.mappings.list_for_title(source.id):
        mapping.title_id = target.id
        mapping.touch(now)

    repositories.titles.delete(source)
    return MergeResult(MergeKind.TITLE, moved=len(releases))


def _merge_releases(repositories: CatalogRepositories, operation: MergeOperation) -> MergeResult:
    source = repositories.releases.get(operation.source_id)
    target = repositories.releases.get(operation.target_id)
    if source is None or target is None:
        raise MergeError("Source or target game release not found")
    now = utcnow()

    items = repositories.items.list_for_release(source.id)
    for item in items:
        item.game_release_id = target.id
        item.touch(now)
    for mapping in repositories.mappings.list_for_release(source.id):
        mapping.title_id = target.title_id
        mapping.release_id = target.id
        mapping.touch(now)

    repositories.releases.delete(source)
    return MergeResult(MergeKind.RELEASE, moved=len(items))


def _merge_title_as_release(
    repositories: CatalogRepositories,
    operation: MergeOperation,
) -> MergeResult:
    if operation.extra is None or not operation.extra.platform:
        raise MergeError("A platform is required to merge a title as a release")
    source, target = _load_titles(repositories, operation)

    old_releases = repositories.releases.list_for_title(source.id)
    if len(old_releases) > 1:
        raise MergeError(
            "Source title has multiple releases. Use standard merge instead, "
            "or merge releases individually."
        )
    now = utcnow()

    details = operation.extra
    new_release = GameRelease(
        title_id=target.id,
        owner_id=source.owner_id,
        platform=details.platform,
        edition=details.edition or None,
        region=details.region or None,
        release_date=details.release_date or None,
        created_at=now,
    )
    repositories.releases.add(new_release)

    moved = 0
    for old_release in old_releases:
        for item in repositories.items.list_for_release(old_release.id):
            item.game_release_id = new_release.id
            item.touch(now)
            moved += 1
        repositories.releases.delete(old_release)

    for mapping in repositories.mappings.list_for_title(source.id):
        mapping.title_id = target.id
        mapping.release_id = new_release.id
        mapping.touch(now)

    repositories.titles.delete(source)
    return MergeResult(MergeKind.AS_RELEASE, moved=moved, release_id=new_release.id)


def _load_titles(
    repositories: CatalogRepositories,
    operation: MergeOperation,
) -> tuple[GameTitle, GameTitle]:
    source = repositories.titles.get(operation.source_id)
    target = repositories.titles.get(operation.target_id)
    if source is None or target is None:
        raise MergeError("Source or target game title not found")
    return source, target


def _noun(kind: MergeKind) -> str:
    return "a release" if kind is MergeKind.RELEASE else "a title"
