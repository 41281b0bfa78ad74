from __future__ import annotations

import os
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from gameshelf.adapters.sqlalchemy import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyLibraryImportUnitOfWork,
    SqlAlchemySyncJobUnitOfWork,
    shutdown,
    start_mappers,
    startup,
)
from gameshelf.adapters.sqlalchemy.migrations import upgrade_head
from tests.support.fakes import FakeStore

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def owner_id() -> UUID:
    return uuid4()


@pytest.fixture
def store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # one shared connection so every session sees the same in-memory database
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_started(sqlite_engine: Engine) -> Iterator[Engine]:
    startup(engine=sqlite_engine, force=True)
    try:
        yield sqlite_engine
    finally:
        shutdown()


@pytest.fixture
def library_uow(sqlite_started: Engine) -> type[SqlAlchemyLibraryImportUnitOfWork]:
    _ = sqlite_started
    return SqlAlchemyLibraryImportUnitOfWork


@pytest.fixture
def catalog_uow(sqlite_started: Engine) -> type[SqlAlchemyCatalogUnitOfWork]:
    _ = sqlite_started
    return SqlAlchemyCatalogUnitOfWork


@pytest.fixture
def sync_job_uow(sqlite_started: Engine) -> type[SqlAlchemySyncJobUnitOfWork]:
    _ = sqlite_started
    return SqlAlchemySyncJobUnitOfWork
