"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class AggregatorProvider(StrEnum):
    PLAYNITE = "playnite"


class EntityType(StrEnum):
    """Discriminator for audit records and typed references."""

    EXTERNAL_ACCOUNT = "external_account"
    CONNECTOR_DEVICE = "connector_device"
    LIBRARY_ENTRY = "library_entry"
    GAME_TITLE = "game_title"
    GAME_RELEASE = "game_release"
    GAME_MAPPING = "game_mapping"
    ITEM = "item"
    SYNC_JOB = "sync_job"


class GameType(StrEnum):
    VIDEO_GAME = "video_game"
    BOARD_GAME = "board_game"
    CARD_GAME = "card_game"
    TABLETOP_RPG = "tabletop_rpg"
    OTHER_PHYSICAL_GAME = "other_physical_game"

    @property
    def is_physical(self) -> bool:
        return self is not GameType.VIDEO_GAME


class GameCopyType(StrEnum):
    DIGITAL_LICENSE = "digital_license"
    PHYSICAL_COPY = "physical_copy"


class MappingStatus(StrEnum):
    PENDING = "pending"
    MAPPED = "mapped"
    IGNORED = "ignored"


class SyncJobType(StrEnum):
    LIBRARY_IMPORT = "library_import"
    METADATA_RESYNC = "metadata_resync"


class SyncJobStatus(StrEnum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {SyncJobStatus.COMPLETED, SyncJobStatus.FAILED}


class MergeKind(StrEnum):
    TITLE = "title"
    RELEASE = "release"
    AS_RELEASE = "as_release"


class ImportOutcome(StrEnum):
    """Per-record reconciliation outcome, ordered by significance."""

    UNCHANGED = "unchanged"
    UPDATED = "updated"
    CREATED = "created"

    @property
    def rank(self) -> int:
        return _OUTCOME_RANK[self]


_OUTCOME_RANK = {
    ImportOutcome.UNCHANGED: 0,
    ImportOutcome.UPDATED: 1,
    ImportOutcome.CREATED: 2,
}
