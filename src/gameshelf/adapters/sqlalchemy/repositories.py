"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update

from gameshelf.adapters.sqlalchemy.mappings import (
    external_account_table,
    external_library_entry_table,
    game_external_mapping_table,
    game_release_table,
    game_title_table,
    item_table,
    sync_job_table,
)
from gameshelf.domain.model import (
    ConnectorDevice,
    EntityMerge,
    ExternalAccount,
    ExternalLibraryEntry,
    GameExternalMapping,
    GameRelease,
    GameTitle,
    Item,
    MappingStatus,
    SyncJob,
)

if TYPE_CHECKING:
    from collections.abc import Collection
    from datetime import datetime
    from uuid import UUID

    from sqlalchemy.orm import Session

    from gameshelf.domain.model import SyncJobStatus


class SqlAlchemyEntityRepository[TEntity]:
    """Shared add/get/delete for aggregates keyed by their UUID."""

    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> TEntity | None:
        return self.session.get(self._entity_cls, entity_id)

    def delete(self, entity: TEntity) -> None:
        # write pending re-points of dependants before the row goes away
        self.session.flush()
        self.session.delete(entity)


class SqlAlchemyExternalAccountRepository(SqlAlchemyEntityRepository[ExternalAccount]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, ExternalAccount)

    def find(self, *, owner_id: UUID, provider: str, account_name: str) -> ExternalAccount | None:
        stmt = (
            select(ExternalAccount)
            .where(external_account_table.c.owner_id == owner_id)
            .where(external_account_table.c.provider == provider)
            .where(external_account_table.c.account_name == account_name)
        )
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyConnectorDeviceRepository(SqlAlchemyEntityRepository[ConnectorDevice]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, ConnectorDevice)


class SqlAlchemyLibraryEntryRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ExternalLibraryEntry) -> None:
        self.session.add(entity)

    def get_by_key(self, *, account_id: UUID, external_game_id: str) -> ExternalLibraryEntry | None:
        stmt = (
            select(ExternalLibraryEntry)
            .where(external_library_entry_table.c.account_id == account_id)
            .where(external_library_entry_table.c.external_game_id == external_game_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def unseen_keys(self, *, account_id: UUID, seen_keys: Collection[str]) -> list[str]:
        # filtered in Python: a NOT IN over thousands of keys hits SQLite's variable limit
        stmt = select(external_library_entry_table.c.external_game_id).where(
            external_library_entry_table.c.account_id == account_id
        )
        seen = set(seen_keys)
        return [key for key in self.session.execute(stmt).scalars() if key not in seen]

    def mark_uninstalled(self, *, account_id: UUID, keys: Collection[str], now: datetime) -> int:
        updated = 0
        for chunk in _chunks(keys):
            stmt = (
                update(ExternalLibraryEntry)
                .where(external_library_entry_table.c.account_id == account_id)
                .where(external_library_entry_table.c.external_game_id.in_(chunk))
                .values(is_installed=False, updated_at=now)
                .execution_options(synchronize_session="fetch")
            )
            updated += _rowcount(self.session.execute(stmt))
        return updated


class SqlAlchemyGameTitleRepository(SqlAlchemyEntityRepository[GameTitle]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, GameTitle)

    def list_for_owner(self, owner_id: UUID) -> list[GameTitle]:
        stmt = (
            select(GameTitle)
            .where(game_title_table.c.owner_id == owner_id)
            .order_by(game_title_table.c.name)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyGameReleaseRepository(SqlAlchemyEntityRepository[GameRelease]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, GameRelease)

    def list_for_title(self, title_id: UUID) -> list[GameRelease]:
        stmt = (
            select(GameRelease)
            .where(game_release_table.c.title_id == title_id)
            .order_by(game_release_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyGameMappingRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: GameExternalMapping) -> None:
        self.session.add(entity)

    def get(
        self,
        *,
        owner_id: UUID,
        provider: str,
        external_game_id: str,
    ) -> GameExternalMapping | None:
        stmt = (
            select(GameExternalMapping)
            .where(game_external_mapping_table.c.owner_id == owner_id)
            .where(game_external_mapping_table.c.provider == provider)
            .where(game_external_mapping_table.c.external_game_id == external_game_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_pending(self, owner_id: UUID) -> list[GameExternalMapping]:
        stmt = (
            select(GameExternalMapping)
            .where(game_external_mapping_table.c.owner_id == owner_id)
            .where(game_external_mapping_table.c.status == MappingStatus.PENDING)
            .order_by(game_external_mapping_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())

    def list_for_title(self, title_id: UUID) -> list[GameExternalMapping]:
        stmt = select(GameExternalMapping).where(game_external_mapping_table.c.title_id == title_id)
        return list(self.session.execute(stmt).scalars())

    def list_for_release(self, release_id: UUID) -> list[GameExternalMapping]:
        stmt = select(GameExternalMapping).where(
            game_external_mapping_table.c.release_id == release_id
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyItemRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Item) -> None:
        self.session.add(entity)

    def get_by_aggregator(
        self,
        *,
        provider: str,
        account_id: UUID,
        external_game_id: str,
    ) -> Item | None:
        stmt = (
            select(Item)
            .where(item_table.c.aggregator_provider_id == provider)
            .where(item_table.c.aggregator_account_id == account_id)
            .where(item_table.c.aggregator_external_game_id == external_game_id)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_release(self, release_id: UUID) -> list[Item]:
        stmt = select(Item).where(item_table.c.game_release_id == release_id)
        return list(self.session.execute(stmt).scalars())

    def mark_uninstalled(
        self,
        *,
        provider: str,
        account_id: UUID,
        keys: Collection[str],
        now: datetime,
    ) -> int:
        updated = 0
        for chunk in _chunks(keys):
            stmt = (
                update(Item)
                .where(item_table.c.aggregator_provider_id == provider)
                .where(item_table.c.aggregator_account_id == account_id)
                .where(item_table.c.aggregator_external_game_id.in_(chunk))
                .values(is_installed=False, updated_at=now)
                .execution_options(synchronize_session="fetch")
            )
            updated += _rowcount(self.session.execute(stmt))
        return updated


class SqlAlchemySyncJobRepository(SqlAlchemyEntityRepository[SyncJob]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, SyncJob)

    def list_by_status(self, status: SyncJobStatus) -> list[SyncJob]:
        stmt = (
            select(SyncJob)
            .where(sync_job_table.c.status == status)
            .order_by(sync_job_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyEntityMergeRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: EntityMerge) -> None:
        self.session.add(entity)


_CHUNK_SIZE = 500


def _chunks(keys: Collection[str]) -> list[list[str]]:
    ordered = list(keys)
    return [ordered[i : i + _CHUNK_SIZE] for i in range(0, len(ordered), _CHUNK_SIZE)]


def _rowcount(result: object) -> int:
    count = getattr(result, "rowcount", None)
    return count if isinstance(count, int) and count >= 0 else 0
