"""Domain port definitions for adapters."""

from __future__ import annotations

from .metadata import (
    GameMetadata,
    MetadataApiError,
    MetadataProvider,
    MetadataRateLimitError,
    MetadataSearchResult,
    PlayerInfo,
    ProviderCapabilities,
    ProviderManifest,
    RateLimitSettings,
)
from .persistence import (
    ConnectorDeviceRepository,
    EntityMergeRepository,
    ExternalAccountRepository,
    GameMappingRepository,
    GameReleaseRepository,
    GameTitleRepository,
    ItemRepository,
    LibraryEntryRepository,
    Repository,
    SyncJobRepository,
)
from .unit_of_work import (
    CatalogRepositories,
    CatalogUnitOfWork,
    LibraryImportRepositories,
    LibraryImportUnitOfWork,
    RepositoryCollection,
    SyncJobRepositories,
    SyncJobUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "ConnectorDeviceRepository",
    "EntityMergeRepository",
    "ExternalAccountRepository",
    "GameMappingRepository",
    "GameMetadata",
    "GameReleaseRepository",
    "GameTitleRepository",
    "ItemRepository",
    "LibraryEntryRepository",
    "LibraryImportRepositories",
    "LibraryImportUnitOfWork",
    "MetadataApiError",
    "MetadataProvider",
    "MetadataRateLimitError",
    "MetadataSearchResult",
    "PlayerInfo",
    "ProviderCapabilities",
    "ProviderManifest",
    "RateLimitSettings",
    "Repository",
    "RepositoryCollection",
    "SyncJobRepositories",
    "SyncJobUnitOfWork",
    "UnitOfWork",
]
