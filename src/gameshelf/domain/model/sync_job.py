"""Sync job lifecycle record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Final

from .base import Entity, utcnow
from .enums import EntityType, SyncJobStatus, SyncJobType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

STALE_JOB_MESSAGE: Final[str] = (
    "Sync interrupted by application restart. Please trigger a new sync."
)

_ALLOWED_TRANSITIONS: Final[dict[SyncJobStatus, frozenset[SyncJobStatus]]] = {
    SyncJobStatus.PENDING: frozenset({SyncJobStatus.RUNNING}),
    SyncJobStatus.RUNNING: frozenset({SyncJobStatus.COMPLETED, SyncJobStatus.FAILED}),
    SyncJobStatus.COMPLETED: frozenset(),
    SyncJobStatus.FAILED: frozenset(),
}


class SyncJobTransitionError(RuntimeError):
    """Raised when a job is moved along an edge the state machine does not have."""

    def __init__(self, job_id: UUID, current: SyncJobStatus, requested: SyncJobStatus) -> None:
        super().__init__(f"Sync job {job_id} cannot move from {current} to {requested}")
        self.job_id = job_id
        self.current = current
        self.requested = requested


@dataclass(eq=False, kw_only=True)
class SyncJob(Entity):
    """Progress of one long-running import or resync.

    PENDING -> RUNNING -> COMPLETED | FAILED. Terminal states are final; a
    failed job is never retried in place.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.SYNC_JOB

    owner_id: UUID
    job_type: SyncJobType
    account_id: UUID | None = None
    status: SyncJobStatus = SyncJobStatus.PENDING
    entries_processed: int = 0
    entries_added: int = 0
    entries_updated: int = 0
    error_message: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    def start(self, *, now: datetime | None = None) -> None:
        self._transition(SyncJobStatus.RUNNING)
        self.started_at = now or utcnow()

    def complete(
        self,
        *,
        processed: int,
        added: int,
        updated: int,
        now: datetime | None = None,
    ) -> None:
        self._transition(SyncJobStatus.COMPLETED)
        self.entries_processed = processed
        self.entries_added = added
        self.entries_updated = updated
        self.completed_at = now or utcnow()

    def fail(self, message: str, *, now: datetime | None = None) -> None:
        self._transition(SyncJobStatus.FAILED)
        self.error_message = message
        self.completed_at = now or utcnow()

    def _transition(self, requested: SyncJobStatus) -> None:
        if requested not in _ALLOWED_TRANSITIONS[self.status]:
            raise SyncJobTransitionError(self.id, self.status, requested)
        self.status = requested
