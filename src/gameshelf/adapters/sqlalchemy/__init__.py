"""SQLAlchemy adapter package for gameshelf."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyConnectorDeviceRepository,
    SqlAlchemyEntityMergeRepository,
    SqlAlchemyExternalAccountRepository,
    SqlAlchemyGameMappingRepository,
    SqlAlchemyGameReleaseRepository,
    SqlAlchemyGameTitleRepository,
    SqlAlchemyItemRepository,
    SqlAlchemyLibraryEntryRepository,
    SqlAlchemySyncJobRepository,
)
from .unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyLibraryImportUnitOfWork,
    SqlAlchemySyncJobUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyCatalogUnitOfWork",
    "SqlAlchemyConnectorDeviceRepository",
    "SqlAlchemyEntityMergeRepository",
    "SqlAlchemyExternalAccountRepository",
    "SqlAlchemyGameMappingRepository",
    "SqlAlchemyGameReleaseRepository",
    "SqlAlchemyGameTitleRepository",
    "SqlAlchemyItemRepository",
    "SqlAlchemyLibraryEntryRepository",
    "SqlAlchemyLibraryImportUnitOfWork",
    "SqlAlchemySyncJobRepository",
    "SqlAlchemySyncJobUnitOfWork",
    "StartupError",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
