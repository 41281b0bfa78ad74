"""Resolve aggregator entries to canonical catalog releases.

An owned game is known under two identities: the aggregator identity
``("playnite", entitlement key)`` and, when the export carries it, the
original storefront identity ``(provider, original game id)``. Both map to the
same release; whichever was bound first is reused by the other.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.domain.model import (
    AggregatorProvider,
    GameExternalMapping,
    GameRelease,
    GameTitle,
    GameType,
    MappingStatus,
)

from .names import extract_edition, title_match_key
from .providers import UNKNOWN_PROVIDER

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from gameshelf.domain.ports import (
        GameMappingRepository,
        GameReleaseRepository,
        GameTitleRepository,
    )

log = getLogger(__name__)

AGGREGATOR_PROVIDER_ID = AggregatorProvider.PLAYNITE.value


@dataclass(slots=True, frozen=True)
class MappingResolution:
    release_id: UUID
    title_id: UUID
    created: bool


@dataclass(slots=True, frozen=True)
class _Identity:
    provider: str
    external_game_id: str


class CatalogMappingResolver:
    def __init__(
        self,
        *,
        mappings: GameMappingRepository,
        titles: GameTitleRepository,
        releases: GameReleaseRepository,
        now: datetime,
    ) -> None:
        self._mappings = mappings
        self._titles = titles
        self._releases = releases
        self._now = now
        self._title_index: dict[tuple[UUID, str], GameTitle] = {}
        self._indexed_owners: set[UUID] = set()

    def resolve(
        self,
        key: str,
        original_provider: str,
        original_game_id: str | None,
        display_name: str,
        owner_id: UUID,
        *,
        needs_review: bool,
        platform: str,
    ) -> MappingResolution | None:
        """Return the release for this entry, or ``None`` when its mapping is ignored."""

        aggregator = _Identity(AGGREGATOR_PROVIDER_ID, key)
        original = (
            _Identity(original_provider, original_game_id)
            if original_provider != UNKNOWN_PROVIDER and original_game_id
            else None
        )
        aggregator_status = MappingStatus.PENDING if needs_review else MappingStatus.MAPPED

        aggregator_mapping = self._lookup(owner_id, aggregator)
        original_mapping = self._lookup(owner_id, original) if original else None

        if aggregator_mapping is not None and aggregator_mapping.status is MappingStatus.IGNORED:
            log.debug("Skipping %s: mapping is ignored", key)
            return None

        if aggregator_mapping is not None and aggregator_mapping.is_mapped:
            title_id, release_id = self._target_of(aggregator_mapping)
            if original is not None and original_mapping is None:
                self._create_mapping(
                    owner_id, original, display_name, title_id, release_id, MappingStatus.MAPPED
                )
            return MappingResolution(release_id, title_id, created=False)

        if original_mapping is not None and original_mapping.is_mapped:
            title_id, release_id = self._target_of(original_mapping)
            if aggregator_mapping is None:
                self._create_mapping(
                    owner_id, aggregator, display_name, title_id, release_id, aggregator_status
                )
            elif aggregator_mapping.status is MappingStatus.PENDING:
                aggregator_mapping.bind(
                    title_id=title_id, release_id=release_id, status=aggregator_status
                )
            log.debug("Reusing release %s of %s for %s", release_id, original, key)
            return MappingResolution(release_id, title_id, created=False)

        if aggregator_mapping is not None and aggregator_mapping.release_id is not None:
            title_id, release_id = self._target_of(aggregator_mapping)
            if original is not None and original_mapping is None:
                self._create_mapping(
                    owner_id, original, display_name, title_id, release_id, MappingStatus.MAPPED
                )
            if aggregator_mapping.status is MappingStatus.PENDING and not needs_review:
                aggregator_mapping.bind(
                    title_id=title_id, release_id=release_id, status=MappingStatus.MAPPED
                )
            return MappingResolution(release_id, title_id, created=False)

        title, release, created = self._get_or_create_catalog_entry(
            owner_id, display_name, platform
        )
        if aggregator_mapping is None:
            self._create_mapping(
                owner_id, aggregator, display_name, title.id, release.id, aggregator_status
            )
        else:
            aggregator_mapping.bind(
                title_id=title.id, release_id=release.id, status=aggregator_status
            )
        if original is not None:
            if original_mapping is None:
                self._create_mapping(
                    owner_id, original, display_name, title.id, release.id, MappingStatus.MAPPED
                )
            elif original_mapping.status is MappingStatus.PENDING:
                original_mapping.bind(
                    title_id=title.id, release_id=release.id, status=MappingStatus.MAPPED
                )
        log.debug("Resolved %s to release %s of title %s", key, release.id, title.id)
        return MappingResolution(release.id, title.id, created=created)

    def _lookup(self, owner_id: UUID, identity: _Identity) -> GameExternalMapping | None:
        return self._mappings.get(
            owner_id=owner_id,
            provider=identity.provider,
            external_game_id=identity.external_game_id,
        )

    def _target_of(self, mapping: GameExternalMapping) -> tuple[UUID, UUID]:
        release_id = mapping.release_id
        if release_id is None:
            msg = f"Mapping {mapping.id} has no release"
            raise ValueError(msg)
        title_id = mapping.title_id
        if title_id is None:
            release = self._releases.get(release_id)
            if release is None:
                msg = f"Mapping {mapping.id} points at missing release {release_id}"
                raise ValueError(msg)
            title_id = release.title_id
        return title_id, release_id

    def _get_or_create_catalog_entry(
        self,
        owner_id: UUID,
        name: str,
        platform: str,
    ) -> tuple[GameTitle, GameRelease, bool]:
        """Reuse a title whose name matches once editions and punctuation are ignored.

        The edition suffix picks the release: "Portal 2" and "Portal 2 GOTY" on
        the same platform share a title but get separate releases.
        """

        base_name, edition = extract_edition(name)
        index = self._titles_of(owner_id)
        match_key = (owner_id, title_match_key(base_name))
        title = index.get(match_key)
        created = False
        if title is None:
            title = GameTitle(
                owner_id=owner_id,
                name=base_name,
                type=GameType.VIDEO_GAME,
                created_at=self._now,
            )
            self._titles.add(title)
            index[match_key] = title
            created = True

        release = next(
            (
                release
                for release in self._releases.list_for_title(title.id)
                if release.platform == platform and release.edition == edition
            ),
            None,
        )
        if release is None:
            release = GameRelease(
                title_id=title.id,
                owner_id=owner_id,
                platform=platform,
                edition=edition,
                created_at=self._now,
            )
            self._releases.add(release)
            created = True
        return title, release, created

    def _titles_of(self, owner_id: UUID) -> dict[tuple[UUID, str], GameTitle]:
        if owner_id not in self._indexed_owners:
            self._indexed_owners.add(owner_id)
            for title in self._titles.list_for_owner(owner_id):
                self._title_index.setdefault((owner_id, title_match_key(title.name)), title)
        return self._title_index

    def _create_mapping(
        self,
        owner_id: UUID,
        identity: _Identity,
        display_name: str,
        title_id: UUID,
        release_id: UUID,
        status: MappingStatus,
    ) -> GameExternalMapping:
        mapping = GameExternalMapping(
            owner_id=owner_id,
            provider=identity.provider,
            external_game_id=identity.external_game_id,
            external_game_name=display_name,
            title_id=title_id,
            release_id=release_id,
            status=status,
            created_at=self._now,
        )
        self._mappings.add(mapping)
        return mapping


def list_pending_mappings(
    mappings: GameMappingRepository,
    owner_id: UUID,
) -> list[GameExternalMapping]:
    """Return the manual resolution queue for one owner."""

    return mappings.list_pending(owner_id)
