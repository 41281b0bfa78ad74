"""Sync job tracking for long-running imports and resyncs.

Every transition is committed in its own unit of work so that a job marked
FAILED stays failed even when the work it describes was rolled back.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.domain.model import STALE_JOB_MESSAGE, SyncJob, SyncJobStatus

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from gameshelf.domain.model import SyncJobType
    from gameshelf.domain.ports import SyncJobUnitOfWork

log = getLogger(__name__)


class SyncJobNotFoundError(LookupError):
    def __init__(self, job_id: UUID) -> None:
        super().__init__(f"Sync job not found: {job_id}")
        self.job_id = job_id


@dataclass(slots=True, frozen=True)
class JobCounters:
    processed: int = 0
    added: int = 0
    updated: int = 0


class SyncJobTracker:
    def __init__(self, unit_of_work_factory: Callable[[], SyncJobUnitOfWork]) -> None:
        self._uow_factory = unit_of_work_factory

    def create(
        self,
        job_type: SyncJobType,
        owner_id: UUID,
        account_id: UUID | None = None,
    ) -> SyncJob:
        job = SyncJob(owner_id=owner_id, job_type=job_type, account_id=account_id)
        with self._uow_factory() as uow:
            uow.repositories.sync_jobs.add(job)
            uow.commit()
        log.debug("Created %s job %s", job_type, job.id)
        return job

    def start(self, job_id: UUID) -> SyncJob:
        return self._apply(job_id, lambda job: job.start())

    def complete(self, job_id: UUID, processed: int, added: int, updated: int) -> SyncJob:
        return self._apply(
            job_id,
            lambda job: job.complete(processed=processed, added=added, updated=updated),
        )

    def fail(self, job_id: UUID, message: str) -> SyncJob:
        return self._apply(job_id, lambda job: job.fail(message))

    def get(self, job_id: UUID) -> SyncJob:
        with self._uow_factory() as uow:
            job = uow.repositories.sync_jobs.get(job_id)
            if job is None:
                raise SyncJobNotFoundError(job_id)
            return job

    def run(
        self,
        job_type: SyncJobType,
        owner_id: UUID,
        func: Callable[[SyncJob], JobCounters],
        *,
        account_id: UUID | None = None,
    ) -> SyncJob:
        """Create and start a job, run ``func`` and record how it ended.

        Exceptions from ``func`` fail the job and are re-raised.
        """

        job = self.create(job_type, owner_id, account_id)
        job = self.start(job.id)
        try:
            counters = func(job)
        except Exception as exc:
            log.warning("%s job %s failed: %s", job_type, job.id, exc)
            self.fail(job.id, str(exc) or exc.__class__.__name__)
            raise
        return self.complete(job.id, counters.processed, counters.added, counters.updated)

    def recover_stale_jobs(self) -> int:
        """Fail every job left RUNNING by a previous process."""

        with self._uow_factory() as uow:
            stale = uow.repositories.sync_jobs.list_by_status(SyncJobStatus.RUNNING)
            for job in stale:
                job.fail(STALE_JOB_MESSAGE)
            uow.commit()
        if stale:
            log.info("Recovered %d stale sync jobs", len(stale))
        return len(stale)

    def _apply(self, job_id: UUID, change: Callable[[SyncJob], None]) -> SyncJob:
        with self._uow_factory() as uow:
            job = uow.repositories.sync_jobs.get(job_id)
            if job is None:
                raise SyncJobNotFoundError(job_id)
            change(job)
            uow.commit()
        return job
