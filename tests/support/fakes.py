"""In-memory fakes of the persistence ports for domain tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

from gameshelf.domain.model import MappingStatus
from gameshelf.domain.ports import (
    CatalogRepositories,
    LibraryImportRepositories,
    RepositoryCollection,
    SyncJobRepositories,
)

if TYPE_CHECKING:
    from collections.abc import Collection
    from datetime import datetime
    from uuid import UUID

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
        SyncJobStatus,
    )


class FakeEntityRepository[TEntity]:
    def __init__(self) -> None:
        self.rows: dict[UUID, TEntity] = {}

    def add(self, entity: TEntity) -> None:
        self.rows[entity.id] = entity  # type: ignore[attr-defined]

    def get(self, entity_id: UUID) -> TEntity | None:
        return self.rows.get(entity_id)

    def delete(self, entity: TEntity) -> None:
        self.rows.pop(entity.id, None)  # type: ignore[attr-defined]


class FakeAccountRepository(FakeEntityRepository["ExternalAccount"]):
    def find(self, *, owner_id: UUID, provider: str, account_name: str) -> ExternalAccount | None:
        for account in self.rows.values():
            if (account.owner_id, account.provider, account.account_name) == (
                owner_id,
                provider,
                account_name,
            ):
                return account
        return None


class FakeDeviceRepository(FakeEntityRepository["ConnectorDevice"]):
    pass


class FakeLibraryEntryRepository(FakeEntityRepository["ExternalLibraryEntry"]):
    def get_by_key(self, *, account_id: UUID, external_game_id: str) -> ExternalLibraryEntry | None:
        for entry in self.rows.values():
            if entry.account_id == account_id and entry.external_game_id == external_game_id:
                return entry
        return None

    def unseen_keys(self, *, account_id: UUID, seen_keys: Collection[str]) -> list[str]:
        return [
            entry.external_game_id
            for entry in self.rows.values()
            if entry.account_id == account_id and entry.external_game_id not in seen_keys
        ]

    def mark_uninstalled(self, *, account_id: UUID, keys: Collection[str], now: datetime) -> int:
        updated = 0
        for entry in self.rows.values():
            if entry.account_id == account_id and entry.external_game_id in keys:
                entry.is_installed = False
                entry.updated_at = now
                updated += 1
        return updated


class FakeTitleRepository(FakeEntityRepository["GameTitle"]):
    def list_for_owner(self, owner_id: UUID) -> list[GameTitle]:
        titles = [title for title in self.rows.values() if title.owner_id == owner_id]
        return sorted(titles, key=lambda title: title.name)


class FakeReleaseRepository(FakeEntityRepository["GameRelease"]):
    def list_for_title(self, title_id: UUID) -> list[GameRelease]:
        return [release for release in self.rows.values() if release.title_id == title_id]


class FakeMappingRepository(FakeEntityRepository["GameExternalMapping"]):
    def get(  # type: ignore[override]
        self,
        *,
        owner_id: UUID,
        provider: str,
        external_game_id: str,
    ) -> GameExternalMapping | None:
        for mapping in self.rows.values():
            if (mapping.owner_id, mapping.provider, mapping.external_game_id) == (
                owner_id,
                provider,
                external_game_id,
            ):
                return mapping
        return None

    def list_pending(self, owner_id: UUID) -> list[GameExternalMapping]:
        return [
            mapping
            for mapping in self.rows.values()
            if mapping.owner_id == owner_id and mapping.status is MappingStatus.PENDING
        ]

    def list_for_title(self, title_id: UUID) -> list[GameExternalMapping]:
        return [mapping for mapping in self.rows.values() if mapping.title_id == title_id]

    def list_for_release(self, release_id: UUID) -> list[GameExternalMapping]:
        return [mapping for mapping in self.rows.values() if mapping.release_id == release_id]


class FakeItemRepository(FakeEntityRepository["Item"]):
    def get_by_aggregator(
        self,
        *,
        provider: str,
        account_id: UUID,
        external_game_id: str,
    ) -> Item | None:
        for item in self.rows.values():
            if (
                item.aggregator_provider_id,
                item.aggregator_account_id,
                item.aggregator_external_game_id,
            ) == (provider, account_id, external_game_id):
                return item
        return None

    def list_for_release(self, release_id: UUID) -> list[Item]:
        return [item for item in self.rows.values() if item.game_release_id == release_id]

    def mark_uninstalled(
        self,
        *,
        provider: str,
        account_id: UUID,
        keys: Collection[str],
        now: datetime,
    ) -> int:
        updated = 0
        for item in self.rows.values():
            if (
                item.aggregator_provider_id == provider
                and item.aggregator_account_id == account_id
                and item.aggregator_external_game_id in keys
            ):
                item.is_installed = False
                item.updated_at = now
                updated += 1
        return updated


class FakeSyncJobRepository(FakeEntityRepository["SyncJob"]):
    def list_by_status(self, status: SyncJobStatus) -> list[SyncJob]:
        return [job for job in self.rows.values() if job.status is status]


class FakeMergeRepository:
    def __init__(self) -> None:
        self.rows: list[EntityMerge] = []

    def add(self, entity: EntityMerge) -> None:
        self.rows.append(entity)


class FakeStore:
    """One shared set of repositories; every fake unit of work sees the same rows."""

    def __init__(self) -> None:
        self.accounts = FakeAccountRepository()
        self.devices = FakeDeviceRepository()
        self.library_entries = FakeLibraryEntryRepository()
        self.titles = FakeTitleRepository()
        self.releases = FakeReleaseRepository()
        self.mappings = FakeMappingRepository()
        self.items = FakeItemRepository()
        self.sync_jobs = FakeSyncJobRepository()
        self.merges = FakeMergeRepository()
        self.commits = 0
        self.rollbacks = 0

    def library_uow(self) -> FakeUnitOfWork[LibraryImportRepositories]:
        return FakeUnitOfWork(
            self,
            LibraryImportRepositories(
                accounts=self.accounts,
                devices=self.devices,
                library_entries=self.library_entries,
                titles=self.titles,
                releases=self.releases,
                mappings=self.mappings,
                items=self.items,
            ),
        )

    def catalog_uow(self) -> FakeUnitOfWork[CatalogRepositories]:
        return FakeUnitOfWork(
            self,
            CatalogRepositories(
                titles=self.titles,
                releases=self.releases,
                mappings=self.mappings,
                items=self.items,
                merges=self.merges,
            ),
        )

    def sync_job_uow(self) -> FakeUnitOfWork[SyncJobRepositories]:
        return FakeUnitOfWork(self, SyncJobRepositories(sync_jobs=self.sync_jobs))


class FakeUnitOfWork[TRepositories: RepositoryCollection]:
    """Counts commits and rollbacks; changes are applied to the store immediately."""

    def __init__(self, store: FakeStore, repositories: TRepositories) -> None:
        self._store = store
        self._repositories = repositories

    @property
    def repositories(self) -> TRepositories:
        return self._repositories

    def __enter__(self) -> FakeUnitOfWork[TRepositories]:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: object | None,
    ) -> bool:
        if exc_type is not None:
            self.rollback()
        return False

    def commit(self) -> None:
        self._store.commits += 1

    def rollback(self) -> None:
        self._store.rollbacks += 1


__all__ = ["FakeStore", "FakeUnitOfWork"]
