"""Ports for persisting domain aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from gameshelf.domain.model import (
    ConnectorDevice,
    EntityMerge,
    ExternalAccount,
    ExternalLibraryEntry,
    GameExternalMapping,
    GameRelease,
    GameTitle,
    Item,
    SyncJob,
)

if TYPE_CHECKING:
    from collections.abc import Collection
    from datetime import datetime
    from uuid import UUID

    from gameshelf.domain.model import SyncJobStatus


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class LookupRepository[TEntity](Repository[TEntity], Protocol):
    """Repository whose aggregates can be fetched by internal id."""

    def get(self, entity_id: UUID) -> TEntity | None: ...


@runtime_checkable
class ExternalAccountRepository(LookupRepository[ExternalAccount], Protocol):
    def find(
        self,
        *,
        owner_id: UUID,
        provider: str,
        account_name: str,
    ) -> ExternalAccount | None: ...


@runtime_checkable
class ConnectorDeviceRepository(LookupRepository[ConnectorDevice], Protocol):
    """Repository contract for connector devices."""


@runtime_checkable
class LibraryEntryRepository(Repository[ExternalLibraryEntry], Protocol):
    """Repository contract for aggregator library entries."""

    def get_by_key(
        self,
        *,
        account_id: UUID,
        external_game_id: str,
    ) -> ExternalLibraryEntry | None: ...

    def unseen_keys(self, *, account_id: UUID, seen_keys: Collection[str]) -> list[str]: ...

    def mark_uninstalled(
        self,
        *,
        account_id: UUID,
        keys: Collection[str],
        now: datetime,
    ) -> int: ...


@runtime_checkable
class GameTitleRepository(LookupRepository[GameTitle], Protocol):
    def delete(self, entity: GameTitle) -> None: ...

    def list_for_owner(self, owner_id: UUID) -> list[GameTitle]: ...


@runtime_checkable
class GameReleaseRepository(LookupRepository[GameRelease], Protocol):
    def delete(self, entity: GameRelease) -> None: ...

    def list_for_title(self, title_id: UUID) -> list[GameRelease]: ...


@runtime_checkable
class GameMappingRepository(Repository[GameExternalMapping], Protocol):
    """Repository contract for external identity mappings."""

    def get(
        self,
        *,
        owner_id: UUID,
        provider: str,
        external_game_id: str,
    ) -> GameExternalMapping | None: ...

    def list_pending(self, owner_id: UUID) -> list[GameExternalMapping]: ...

    def list_for_title(self, title_id: UUID) -> list[GameExternalMapping]: ...

    def list_for_release(self, release_id: UUID) -> list[GameExternalMapping]: ...


@runtime_checkable
class ItemRepository(Repository[Item], Protocol):
    """Repository contract for owned copies."""

    def get_by_aggregator(
        self,
        *,
        provider: str,
        account_id: UUID,
        external_game_id: str,
    ) -> Item | None: ...

    def list_for_release(self, release_id: UUID) -> list[Item]: ...

    def mark_uninstalled(
        self,
        *,
        provider: str,
        account_id: UUID,
        keys: Collection[str],
        now: datetime,
    ) -> int: ...


@runtime_checkable
class SyncJobRepository(LookupRepository[SyncJob], Protocol):
    def list_by_status(self, status: SyncJobStatus) -> list[SyncJob]: ...


@runtime_checkable
class EntityMergeRepository(Repository[EntityMerge], Protocol):
    """Repository contract for merge audit records."""
