"""Catalog-wide metadata resync."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING, Final

from gameshelf.domain.model import SyncJobType
from gameshelf.domain.sync_jobs import JobCounters

if TYPE_CHECKING:
    from collections.abc import Callable
    from uuid import UUID

    from gameshelf.domain.model import SyncJob
    from gameshelf.domain.ports import CatalogUnitOfWork
    from gameshelf.domain.sync_jobs import SyncJobTracker

    from .pipeline import MetadataPipeline

log = getLogger(__name__)

DEFAULT_TITLE_DELAY_SECONDS: Final[float] = 0.5


def resync_all_metadata(
    owner_id: UUID,
    *,
    pipeline: MetadataPipeline,
    tracker: SyncJobTracker,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    delay_seconds: float = DEFAULT_TITLE_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> SyncJob:
    """Enrich every title of ``owner_id`` inside a ``metadata_resync`` job.

    Titles are handled one at a time with a fixed pause in between. A failing
    title is logged and counted; anything outside the per-title loop fails
    the job and propagates.
    """

    def run(job: SyncJob) -> JobCounters:
        with unit_of_work_factory() as uow:
            title_ids = [title.id for title in uow.repositories.titles.list_for_owner(owner_id)]
        log.info("Starting metadata resync (job %s) for %d titles", job.id, len(title_ids))

        updated = 0
        failed = 0
        for index, title_id in enumerate(title_ids):
            if index:
                sleep(delay_seconds)
            try:
                if _resync_title(title_id, pipeline, unit_of_work_factory):
                    updated += 1
            except Exception as exc:  # noqa: BLE001
                failed += 1
                log.warning("Metadata resync failed for title %s: %s", title_id, exc)

        log.info(
            "Metadata resync (job %s) complete: %d updated, %d failed out of %d titles",
            job.id,
            updated,
            failed,
            len(title_ids),
        )
        return JobCounters(processed=len(title_ids), added=0, updated=updated)

    return tracker.run(SyncJobType.METADATA_RESYNC, owner_id, run)


def _resync_title(
    title_id: UUID,
    pipeline: MetadataPipeline,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
) -> bool:
    with unit_of_work_factory() as uow:
        title = uow.repositories.titles.get(title_id)
        if title is None:
            return False
        result = pipeline.enrich(title)
        if result.updated:
            uow.commit()
            log.debug("Updated metadata for %s: %s", title.name, ", ".join(result.fields_updated))
        return result.updated
