from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from gameshelf.adapters.sqlalchemy.mappings import (
    external_library_entry_table,
    game_external_mapping_table,
    game_release_table,
    game_title_table,
    item_table,
)
from gameshelf.domain.ingest import MISSING_ORIGINAL_GAME_ID, import_library
from gameshelf.domain.model import ConnectorDevice, ExternalAccount, MappingStatus
from tests.support.builders import STEAM_PLUGIN_ID, make_batch, make_game

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy import Table
    from sqlalchemy.engine import Engine

    from gameshelf.adapters.sqlalchemy import SqlAlchemyLibraryImportUnitOfWork
    from gameshelf.domain.ingest import ImportBatch, ImportResult

NOW = datetime(2024, 5, 1, 12, tzinfo=UTC)
HALF_LIFE_KEY = f"playnite:{STEAM_PLUGIN_ID}:70"

LibraryUow = type["SqlAlchemyLibraryImportUnitOfWork"]


def _device(library_uow: LibraryUow, owner_id: UUID) -> ConnectorDevice:
    account = ExternalAccount(owner_id=owner_id, account_name="desktop")
    device = ConnectorDevice(account_id=account.id, name="desktop-pc")
    with library_uow() as uow:
        uow.repositories.accounts.add(account)
        uow.repositories.devices.add(device)
        uow.commit()
    return device


def _import(
    library_uow: LibraryUow,
    batch: ImportBatch,
    device: ConnectorDevice,
    owner_id: UUID,
    now: datetime = NOW,
) -> ImportResult:
    return import_library(
        batch,
        device_id=device.id,
        owner_id=owner_id,
        unit_of_work_factory=library_uow,
        now=now,
    )


def _count(engine: Engine, table: Table) -> int:
    with engine.connect() as connection:
        return connection.execute(select(func.count()).select_from(table)).scalar_one()


def test_reimport_is_idempotent_in_the_database(
    library_uow: LibraryUow,
    sqlite_started: Engine,
    owner_id: UUID,
) -> None:
    device = _device(library_uow, owner_id)
    batch = make_batch(
        make_game("Portal 2"), make_game("Half-Life", original_provider_game_id="70")
    )

    first = _import(library_uow, batch, device, owner_id)
    second = _import(library_uow, batch, device, owner_id, now=NOW + timedelta(days=1))

    assert first.counts.created == 2
    assert second.counts.unchanged == 2
    assert second.counts.created == second.counts.updated == 0
    assert _count(sqlite_started, external_library_entry_table) == 2
    assert _count(sqlite_started, item_table) == 2
    assert _count(sqlite_started, game_title_table) == 2
    assert _count(sqlite_started, game_release_table) == 2
    assert _count(sqlite_started, game_external_mapping_table) == 4

    with library_uow() as uow:
        stored = uow.repositories.devices.get(device.id)
        assert stored is not None
        assert stored.last_import_at == NOW + timedelta(days=1)


def test_soft_removal_and_restore(library_uow: LibraryUow, owner_id: UUID) -> None:
    device = _device(library_uow, owner_id)
    portal = make_game("Portal 2")
    half_life = make_game("Half-Life", original_provider_game_id="70")
    _import(library_uow, make_batch(portal, half_life), device, owner_id)

    removed = _import(library_uow, make_batch(portal), device, owner_id)

    assert removed.counts.soft_removed == 1
    with library_uow() as uow:
        entry = uow.repositories.library_entries.get_by_key(
            account_id=device.account_id, external_game_id=HALF_LIFE_KEY
        )
        assert entry is not None
        assert entry.is_installed is False

    restored = _import(library_uow, make_batch(portal, half_life), device, owner_id)

    assert restored.counts.updated == 1
    assert restored.counts.soft_removed == 0
    with library_uow() as uow:
        entry = uow.repositories.library_entries.get_by_key(
            account_id=device.account_id, external_game_id=HALF_LIFE_KEY
        )
        assert entry is not None
        assert entry.is_installed is True


def test_games_without_original_id_are_queued_for_review(
    library_uow: LibraryUow,
    owner_id: UUID,
) -> None:
    device = _device(library_uow, owner_id)
    batch = make_batch(make_game("Emulated", original_provider_game_id=None))

    result = _import(library_uow, batch, device, owner_id)

    assert result.counts.needs_review == 1
    assert [w.code for w in result.warnings] == [MISSING_ORIGINAL_GAME_ID]
    with library_uow() as uow:
        mapping = uow.repositories.mappings.get(
            owner_id=owner_id, provider="playnite", external_game_id="playnite-db:db-emulated"
        )
        assert mapping is not None
        assert mapping.status is MappingStatus.PENDING
        assert mapping.external_game_name == "Emulated"


def test_editions_share_a_title_in_the_database(
    library_uow: LibraryUow,
    sqlite_started: Engine,
    owner_id: UUID,
) -> None:
    device = _device(library_uow, owner_id)
    batch = make_batch(
        make_game("The Sims 4", original_provider_game_id="1"),
        make_game("The Sims™ 4", original_provider_game_id="2"),
        make_game("The Sims 4 - Premium Edition", original_provider_game_id="3"),
    )

    result = _import(library_uow, batch, device, owner_id)

    assert result.counts.created == 3
    assert _count(sqlite_started, game_title_table) == 1
    assert _count(sqlite_started, game_release_table) == 2
    assert _count(sqlite_started, item_table) == 3
