"""Public domain model surface."""

from __future__ import annotations

from gameshelf.domain.model.audit import EntityMerge
from gameshelf.domain.model.base import Entity, TimestampedEntity, new_id, utcnow
from gameshelf.domain.model.catalog import (
    DEFAULT_RELEASE_PLATFORM,
    GameExternalMapping,
    GameRelease,
    GameTitle,
)
from gameshelf.domain.model.enums import (
    AggregatorProvider,
    EntityType,
    GameCopyType,
    GameType,
    ImportOutcome,
    MappingStatus,
    MergeKind,
    SyncJobStatus,
    SyncJobType,
)
from gameshelf.domain.model.inventory import Item
from gameshelf.domain.model.library import ConnectorDevice, ExternalAccount, ExternalLibraryEntry
from gameshelf.domain.model.sync_job import STALE_JOB_MESSAGE, SyncJob, SyncJobTransitionError

__all__ = [  # noqa: RUF022
    # base
    "Entity",
    "TimestampedEntity",
    "new_id",
    "utcnow",
    # enums
    "AggregatorProvider",
    "EntityType",
    "GameCopyType",
    "GameType",
    "ImportOutcome",
    "MappingStatus",
    "MergeKind",
    "SyncJobStatus",
    "SyncJobType",
    # aggregator side
    "ExternalAccount",
    "ConnectorDevice",
    "ExternalLibraryEntry",
    # catalog
    "DEFAULT_RELEASE_PLATFORM",
    "GameTitle",
    "GameRelease",
    "GameExternalMapping",
    # inventory
    "Item",
    # jobs and audit
    "STALE_JOB_MESSAGE",
    "SyncJob",
    "SyncJobTransitionError",
    "EntityMerge",
]
