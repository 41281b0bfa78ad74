from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import uuid4

import pytest

from gameshelf.domain.model import (
    STALE_JOB_MESSAGE,
    SyncJob,
    SyncJobStatus,
    SyncJobTransitionError,
    SyncJobType,
)
from gameshelf.domain.sync_jobs import JobCounters, SyncJobNotFoundError, SyncJobTracker

if TYPE_CHECKING:
    from uuid import UUID

    from tests.support.fakes import FakeStore


def _tracker(store: FakeStore) -> SyncJobTracker:
    return SyncJobTracker(store.sync_job_uow)


def test_job_lifecycle(store: FakeStore, owner_id: UUID) -> None:
    tracker = _tracker(store)

    job = tracker.create(SyncJobType.LIBRARY_IMPORT, owner_id)
    assert job.status is SyncJobStatus.PENDING

    tracker.start(job.id)
    assert job.status is SyncJobStatus.RUNNING
    assert job.started_at is not None

    tracker.complete(job.id, processed=10, added=3, updated=2)
    assert job.status is SyncJobStatus.COMPLETED
    assert (job.entries_processed, job.entries_added, job.entries_updated) == (10, 3, 2)
    assert job.completed_at is not None
    assert store.commits == 3


def test_pending_job_cannot_fail_before_running(store: FakeStore, owner_id: UUID) -> None:
    tracker = _tracker(store)
    job = tracker.create(SyncJobType.METADATA_RESYNC, owner_id)

    with pytest.raises(SyncJobTransitionError, match="pending to failed"):
        tracker.fail(job.id, "boom")

    assert job.status is SyncJobStatus.PENDING
    assert job.error_message is None


@pytest.mark.parametrize("terminal", [SyncJobStatus.COMPLETED, SyncJobStatus.FAILED])
def test_terminal_states_are_final(terminal: SyncJobStatus) -> None:
    job = SyncJob(owner_id=uuid4(), job_type=SyncJobType.LIBRARY_IMPORT, status=terminal)

    with pytest.raises(SyncJobTransitionError):
        job.start()
    with pytest.raises(SyncJobTransitionError):
        job.fail("again")


def test_pending_job_cannot_complete() -> None:
    job = SyncJob(owner_id=uuid4(), job_type=SyncJobType.LIBRARY_IMPORT)

    with pytest.raises(SyncJobTransitionError, match="pending to completed"):
        job.complete(processed=1, added=1, updated=0)


def test_unknown_job_raises(store: FakeStore) -> None:
    with pytest.raises(SyncJobNotFoundError):
        _tracker(store).start(uuid4())
    with pytest.raises(SyncJobNotFoundError):
        _tracker(store).get(uuid4())


def test_run_records_counters(store: FakeStore, owner_id: UUID) -> None:
    account_id = uuid4()

    job = _tracker(store).run(
        SyncJobType.LIBRARY_IMPORT,
        owner_id,
        lambda _job: JobCounters(processed=4, added=1, updated=2),
        account_id=account_id,
    )

    assert job.status is SyncJobStatus.COMPLETED
    assert job.account_id == account_id
    assert job.entries_processed == 4


def test_run_fails_job_and_reraises(store: FakeStore, owner_id: UUID) -> None:
    def explode(_job: SyncJob) -> JobCounters:
        raise RuntimeError("provider down")

    with pytest.raises(RuntimeError, match="provider down"):
        _tracker(store).run(SyncJobType.METADATA_RESYNC, owner_id, explode)

    [job] = store.sync_jobs.rows.values()
    assert job.status is SyncJobStatus.FAILED
    assert job.error_message == "provider down"


def test_recover_stale_jobs_fails_running_jobs(store: FakeStore, owner_id: UUID) -> None:
    tracker = _tracker(store)
    running = tracker.create(SyncJobType.LIBRARY_IMPORT, owner_id)
    tracker.start(running.id)
    pending = tracker.create(SyncJobType.LIBRARY_IMPORT, owner_id)

    recovered = tracker.recover_stale_jobs()

    assert recovered == 1
    assert running.status is SyncJobStatus.FAILED
    assert running.error_message == STALE_JOB_MESSAGE
    assert pending.status is SyncJobStatus.PENDING
    assert tracker.recover_stale_jobs() == 0
