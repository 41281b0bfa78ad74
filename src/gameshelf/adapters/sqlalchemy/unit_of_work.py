"""SQLAlchemy-backed units of work for imports, catalog curation and sync jobs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from gameshelf.adapters.sqlalchemy.mappings import start_mappers
from gameshelf.adapters.sqlalchemy.migrations import upgrade_head
from gameshelf.adapters.sqlalchemy.repositories import (
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
from gameshelf.config import get_database_config
from gameshelf.domain.ports import (
    CatalogRepositories,
    LibraryImportRepositories,
    RepositoryCollection,
    SyncJobRepositories,
)

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when a SQLAlchemy unit of work is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    _engine: Engine | None = None
    _session_factory: sessionmaker[Session] | None = None

    @property
    def engine(self) -> Engine | None:
        return self._engine

    @engine.setter
    def engine(self, value: Engine | None) -> None:
        self._session_factory = None
        self._engine = value

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call gameshelf.adapters.sqlalchemy."
                "unit_of_work.startup() before requesting a unit of work."
            )
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        return self._session_factory


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Initialise the SQLAlchemy engine, metadata, and session factory."""

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine
    if resolved_engine is None:
        database_config = get_database_config()
        resolved_engine = create_engine(
            database_uri or database_config.uri,
            echo=database_config.echo,
            future=True,
        )
    start_mappers()
    upgrade_head(engine=resolved_engine)
    log.info("Database ready at %s", resolved_engine.url.render_as_string(hide_password=True))

    _STATE.engine = resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


class BaseSqlAlchemyUnitOfWork[TRepositories: RepositoryCollection](ABC):
    """Generic SQLAlchemy unit of work with pluggable repository collections.

    Leaving the block without ``commit()`` discards pending changes; an exception
    rolls back explicitly.
    """

    def __init__(self) -> None:
        self.session_factory: sessionmaker[Session] = _STATE.session_factory
        self._session: Session | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        self.session = self.session_factory()
        self._repositories = self._build_repositories(self.session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self.session.close()
        self.session = None
        return False

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._repositories

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work session not initialised")
        return self._session

    @session.setter
    def session(self, session: Session | None) -> None:
        if self._session is not None and session is not None:
            raise StartupError("Unit of work session already initialised")
        self._session = session


class SqlAlchemyLibraryImportUnitOfWork(BaseSqlAlchemyUnitOfWork[LibraryImportRepositories]):
    """Unit of work spanning one library import batch."""

    def _build_repositories(self, session: Session) -> LibraryImportRepositories:
        return LibraryImportRepositories(
            accounts=SqlAlchemyExternalAccountRepository(session),
            devices=SqlAlchemyConnectorDeviceRepository(session),
            library_entries=SqlAlchemyLibraryEntryRepository(session),
            titles=SqlAlchemyGameTitleRepository(session),
            releases=SqlAlchemyGameReleaseRepository(session),
            mappings=SqlAlchemyGameMappingRepository(session),
            items=SqlAlchemyItemRepository(session),
        )


class SqlAlchemyCatalogUnitOfWork(BaseSqlAlchemyUnitOfWork[CatalogRepositories]):
    """Unit of work for enrichment, merges and the review queue."""

    def _build_repositories(self, session: Session) -> CatalogRepositories:
        return CatalogRepositories(
            titles=SqlAlchemyGameTitleRepository(session),
            releases=SqlAlchemyGameReleaseRepository(session),
            mappings=SqlAlchemyGameMappingRepository(session),
            items=SqlAlchemyItemRepository(session),
            merges=SqlAlchemyEntityMergeRepository(session),
        )


class SqlAlchemySyncJobUnitOfWork(BaseSqlAlchemyUnitOfWork[SyncJobRepositories]):
    def _build_repositories(self, session: Session) -> SyncJobRepositories:
        return SyncJobRepositories(sync_jobs=SqlAlchemySyncJobRepository(session))


if TYPE_CHECKING:
    from gameshelf.domain.ports import CatalogUnitOfWork, LibraryImportUnitOfWork, SyncJobUnitOfWork

    _uow_import_check: LibraryImportUnitOfWork = SqlAlchemyLibraryImportUnitOfWork()
    _uow_catalog_check: CatalogUnitOfWork = SqlAlchemyCatalogUnitOfWork()
    _uow_jobs_check: SyncJobUnitOfWork = SqlAlchemySyncJobUnitOfWork()
