"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from gameshelf.domain.ports.persistence import (
        ConnectorDeviceRepository,
        EntityMergeRepository,
        ExternalAccountRepository,
        GameMappingRepository,
        GameReleaseRepository,
        GameTitleRepository,
        ItemRepository,
        LibraryEntryRepository,
        SyncJobRepository,
    )


@runtime_checkable
class RepositoryCollection(Protocol):
    """Marker protocol for groups of repositories managed together."""


@runtime_checkable
class UnitOfWork[TRepositories: RepositoryCollection](Protocol):
    """Generic unit-of-work boundary around a repository collection."""

    @property
    def repositories(self) -> TRepositories: ...

    def __enter__(self) -> UnitOfWork[TRepositories]: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(slots=True)
class LibraryImportRepositories(RepositoryCollection):
    """Repositories touched by one library import batch."""

    accounts: ExternalAccountRepository
    devices: ConnectorDeviceRepository
    library_entries: LibraryEntryRepository
    titles: GameTitleRepository
    releases: GameReleaseRepository
    mappings: GameMappingRepository
    items: ItemRepository


@dataclass(slots=True)
class CatalogRepositories(RepositoryCollection):
    """Repositories for catalog curation: enrichment, merges and review."""

    titles: GameTitleRepository
    releases: GameReleaseRepository
    mappings: GameMappingRepository
    items: ItemRepository
    merges: EntityMergeRepository


@dataclass(slots=True)
class SyncJobRepositories(RepositoryCollection):
    sync_jobs: SyncJobRepository


type LibraryImportUnitOfWork = UnitOfWork[LibraryImportRepositories]
type CatalogUnitOfWork = UnitOfWork[CatalogRepositories]
type SyncJobUnitOfWork = UnitOfWork[SyncJobRepositories]
