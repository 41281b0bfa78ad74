"""SQLAlchemy mapping metadata for the gameshelf domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers

from gameshelf.domain.model import (
    AggregatorProvider,
    ConnectorDevice,
    EntityMerge,
    EntityType,
    ExternalAccount,
    ExternalLibraryEntry,
    GameCopyType,
    GameExternalMapping,
    GameRelease,
    GameTitle,
    GameType,
    Item,
    MappingStatus,
    MergeKind,
    SyncJob,
    SyncJobStatus,
    SyncJobType,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]
EXTERNAL_ID_LENGTH = 500


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def _timestamps() -> tuple[Column[datetime], Column[datetime]]:
    return (
        Column("created_at", UTCDateTime(), nullable=False),
        Column("updated_at", UTCDateTime(), nullable=True),
    )


# Aggregator side -------------------------------------------------------------

external_account_table = Table(
    "external_account",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("owner_id", UUIDColumnType, nullable=False),
    Column("provider", Enum(AggregatorProvider, native_enum=False), nullable=False),
    Column("account_name", String, nullable=False),
    *_timestamps(),
    UniqueConstraint("owner_id", "provider", "account_name", name="uq_external_account_identity"),
)

connector_device_table = Table(
    "connector_device",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "account_id",
        UUIDColumnType,
        ForeignKey("external_account.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String, nullable=False),
    Column("last_import_at", UTCDateTime(), nullable=True),
    Column("revoked_at", UTCDateTime(), nullable=True),
    *_timestamps(),
)

external_library_entry_table = Table(
    "external_library_entry",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "account_id",
        UUIDColumnType,
        ForeignKey("external_account.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("external_game_id", String(EXTERNAL_ID_LENGTH), nullable=False),
    Column("external_game_name", String, nullable=False),
    Column("playtime_minutes", Integer, nullable=True),
    Column("last_played_at", UTCDateTime(), nullable=True),
    Column("is_installed", Boolean, nullable=True),
    Column("raw_payload", JSON, nullable=True),
    Column("first_seen_at", UTCDateTime(), nullable=False),
    Column("last_seen_at", UTCDateTime(), nullable=False),
    *_timestamps(),
    UniqueConstraint("account_id", "external_game_id", name="uq_library_entry_key"),
)

# Catalog ---------------------------------------------------------------------

game_title_table = Table(
    "game_title",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("owner_id", UUIDColumnType, nullable=False, index=True),
    Column("name", String, nullable=False),
    Column("type", Enum(GameType, native_enum=False), nullable=False),
    Column("description", Text, nullable=True),
    Column("cover_image_url", String, nullable=True),
    Column("overall_min_players", Integer, nullable=True),
    Column("overall_max_players", Integer, nullable=True),
    Column("supports_online", Boolean, nullable=False, default=False),
    Column("supports_local", Boolean, nullable=False, default=False),
    Column("supports_physical", Boolean, nullable=False, default=False),
    Column("online_min_players", Integer, nullable=True),
    Column("online_max_players", Integer, nullable=True),
    Column("local_min_players", Integer, nullable=True),
    Column("local_max_players", Integer, nullable=True),
    Column("physical_min_players", Integer, nullable=True),
    Column("physical_max_players", Integer, nullable=True),
    *_timestamps(),
)

game_release_table = Table(
    "game_release",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("title_id", UUIDColumnType, ForeignKey("game_title.id"), nullable=False, index=True),
    Column("owner_id", UUIDColumnType, nullable=False),
    Column("platform", String, nullable=False),
    Column("edition", String, nullable=True),
    Column("region", String, nullable=True),
    Column("release_date", String, nullable=True),
    *_timestamps(),
)

game_external_mapping_table = Table(
    "game_external_mapping",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("owner_id", UUIDColumnType, nullable=False),
    Column("provider", String, nullable=False),
    Column("external_game_id", String(EXTERNAL_ID_LENGTH), nullable=False),
    Column("external_game_name", String, nullable=True),
    Column("title_id", UUIDColumnType, ForeignKey("game_title.id"), nullable=True),
    Column("release_id", UUIDColumnType, ForeignKey("game_release.id"), nullable=True),
    Column("status", Enum(MappingStatus, native_enum=False), nullable=False),
    *_timestamps(),
    UniqueConstraint(
        "owner_id", "provider", "external_game_id", name="uq_game_external_mapping_identity"
    ),
    Index("ix_game_external_mapping_status", "owner_id", "status"),
)

# Inventory -------------------------------------------------------------------

item_table = Table(
    "item",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("owner_id", UUIDColumnType, nullable=False),
    Column("name", String, nullable=False),
    Column("game_release_id", UUIDColumnType, ForeignKey("game_release.id"), nullable=True),
    Column("copy_type", Enum(GameCopyType, native_enum=False), nullable=False),
    Column("lendable", Boolean, nullable=False),
    Column("playtime_minutes", Integer, nullable=True),
    Column("last_played_at", UTCDateTime(), nullable=True),
    Column("is_installed", Boolean, nullable=True),
    Column("store_url", String, nullable=True),
    Column("external_account_id", UUIDColumnType, ForeignKey("external_account.id"), nullable=True),
    Column("aggregator_provider_id", String, nullable=True),
    Column("aggregator_account_id", UUIDColumnType, nullable=True),
    Column("aggregator_external_game_id", String(EXTERNAL_ID_LENGTH), nullable=True),
    Column("original_provider_plugin_id", String, nullable=True),
    Column("original_provider_name", String, nullable=True),
    Column("original_provider_game_id", String, nullable=True),
    Column("original_provider_normalized_id", String, nullable=True),
    Column("needs_review", Boolean, nullable=False, default=False),
    *_timestamps(),
    # NULL triples (manually added copies) never collide
    UniqueConstraint(
        "aggregator_provider_id",
        "aggregator_account_id",
        "aggregator_external_game_id",
        name="uq_item_aggregator_identity",
    ),
)

# Jobs and audit --------------------------------------------------------------

sync_job_table = Table(
    "sync_job",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("owner_id", UUIDColumnType, nullable=False),
    Column("account_id", UUIDColumnType, nullable=True),
    Column("job_type", Enum(SyncJobType, native_enum=False), nullable=False),
    Column("status", Enum(SyncJobStatus, native_enum=False), nullable=False, index=True),
    Column("entries_processed", Integer, nullable=False, default=0),
    Column("entries_added", Integer, nullable=False, default=0),
    Column("entries_updated", Integer, nullable=False, default=0),
    Column("error_message", Text, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
    Column("started_at", UTCDateTime(), nullable=True),
    Column("completed_at", UTCDateTime(), nullable=True),
)

entity_merge_table = Table(
    "entity_merge",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("entity_type", Enum(EntityType, native_enum=False), nullable=False),
    Column("source_id", UUIDColumnType, nullable=False),
    Column("target_id", UUIDColumnType, nullable=False),
    Column("kind", Enum(MergeKind, native_enum=False), nullable=False),
    Column("created_at", UTCDateTime(), nullable=False),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    # plain id columns only; repositories query across aggregates explicitly
    mapper_registry.map_imperatively(ExternalAccount, external_account_table)
    mapper_registry.map_imperatively(ConnectorDevice, connector_device_table)
    mapper_registry.map_imperatively(ExternalLibraryEntry, external_library_entry_table)
    mapper_registry.map_imperatively(GameTitle, game_title_table)
    mapper_registry.map_imperatively(GameRelease, game_release_table)
    mapper_registry.map_imperatively(GameExternalMapping, game_external_mapping_table)
    mapper_registry.map_imperatively(Item, item_table)
    mapper_registry.map_imperatively(SyncJob, sync_job_table)
    mapper_registry.map_imperatively(EntityMerge, entity_merge_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
