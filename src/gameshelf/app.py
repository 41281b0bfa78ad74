"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.adapters.boardgamegeek import BoardGameGeekMetadataProvider
from gameshelf.adapters.igdb import IgdbMetadataProvider
from gameshelf.adapters.playnite import parse_import_payload
from gameshelf.adapters.rawg import RawgMetadataProvider
from gameshelf.adapters.sqlalchemy import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyLibraryImportUnitOfWork,
    SqlAlchemySyncJobUnitOfWork,
    is_started,
    startup,
)
from gameshelf.adapters.steam import SteamMetadataProvider
from gameshelf.config import get_metadata_config, get_sync_config
from gameshelf.domain.enrichment import (
    MetadataPipeline,
    MetadataProviderRegistry,
    resync_all_metadata,
    search_options,
)
from gameshelf.domain.ingest import import_library, list_pending_mappings
from gameshelf.domain.ingest.service import resolve_device
from gameshelf.domain.merge import MergeOperation, execute_merge
from gameshelf.domain.model import (
    AggregatorProvider,
    ConnectorDevice,
    ExternalAccount,
    SyncJobType,
)
from gameshelf.domain.ports import CatalogUnitOfWork, LibraryImportUnitOfWork, SyncJobUnitOfWork
from gameshelf.domain.sync_jobs import JobCounters, SyncJobTracker

if TYPE_CHECKING:
    from uuid import UUID

    from sqlalchemy.engine import Engine

    from gameshelf.config import MetadataConfig
    from gameshelf.domain.enrichment import EnrichmentResult
    from gameshelf.domain.ingest import ImportResult
    from gameshelf.domain.merge import MergeResult, ReleaseDetails
    from gameshelf.domain.model import GameExternalMapping, GameType, MergeKind, SyncJob
    from gameshelf.domain.ports import MetadataProvider, MetadataSearchResult

LibraryUnitOfWorkFactory = Callable[[], LibraryImportUnitOfWork]
CatalogUnitOfWorkFactory = Callable[[], CatalogUnitOfWork]
SyncJobUnitOfWorkFactory = Callable[[], SyncJobUnitOfWork]

log = getLogger(__name__)


def bootstrap(*, engine: Engine | None = None, database_uri: str | None = None) -> int:
    """Start the persistence adapter once and fail jobs left running by a crash."""

    if is_started():
        return 0
    startup(engine=engine, database_uri=database_uri)
    return SyncJobTracker(SqlAlchemySyncJobUnitOfWork).recover_stale_jobs()


def build_registry(config: MetadataConfig | None = None) -> MetadataProviderRegistry:
    """Register Steam and BoardGameGeek always; RAWG and IGDB when credentials exist."""

    effective = config or get_metadata_config()
    providers: list[MetadataProvider] = [
        SteamMetadataProvider(config=effective.steam),
        BoardGameGeekMetadataProvider(config=effective.boardgamegeek),
    ]
    if effective.rawg is not None:
        providers.append(RawgMetadataProvider(config=effective.rawg))
    if effective.igdb is not None:
        providers.append(IgdbMetadataProvider(config=effective.igdb))
    registry = MetadataProviderRegistry(providers)
    log.info("Metadata providers: %s", ", ".join(p.manifest.id for p in registry.all()))
    return registry


def build_pipeline(registry: MetadataProviderRegistry | None = None) -> MetadataPipeline:
    sync_config = get_sync_config()
    return MetadataPipeline(
        registry or build_registry(),
        min_description_length=sync_config.min_valid_description_length,
    )


def create_account(
    *,
    owner_id: UUID,
    account_name: str,
    device_name: str | None = None,
    unit_of_work_factory: LibraryUnitOfWorkFactory | None = None,
) -> tuple[ExternalAccount, ConnectorDevice]:
    """Link a Playnite account for ``owner_id`` and register a device for it.

    An existing account with the same name is reused.
    """

    effective_uow = unit_of_work_factory or _library_uow()
    with effective_uow() as uow:
        repositories = uow.repositories
        account = repositories.accounts.find(
            owner_id=owner_id, provider=AggregatorProvider.PLAYNITE, account_name=account_name
        )
        if account is None:
            account = ExternalAccount(owner_id=owner_id, account_name=account_name)
            repositories.accounts.add(account)
        device = ConnectorDevice(account_id=account.id, name=device_name or account_name)
        repositories.devices.add(device)
        uow.commit()

    log.info("Registered device %s for account %s (%s)", device.id, account.id, account_name)
    return account, device


def import_playnite_export(
    payload: object,
    *,
    device_id: UUID,
    owner_id: UUID,
    unit_of_work_factory: LibraryUnitOfWorkFactory | None = None,
    tracker: SyncJobTracker | None = None,
) -> ImportResult:
    """Validate a Playnite export and reconcile it inside a ``library_import`` job.

    Validation and device checks happen before a job is recorded.
    """

    batch = parse_import_payload(payload)
    effective_uow = unit_of_work_factory or _library_uow()
    effective_tracker = tracker or SyncJobTracker(_sync_job_uow())

    with effective_uow() as uow:
        context = resolve_device(uow.repositories, device_id, owner_id)

    results: list[ImportResult] = []

    def run(job: SyncJob) -> JobCounters:
        log.info("Starting library import (job %s) of %d games", job.id, len(batch.games))
        result = import_library(
            batch,
            device_id=device_id,
            owner_id=owner_id,
            unit_of_work_factory=effective_uow,
        )
        results.append(result)
        return JobCounters(
            processed=result.counts.received,
            added=result.counts.created,
            updated=result.counts.updated,
        )

    effective_tracker.run(SyncJobType.LIBRARY_IMPORT, owner_id, run, account_id=context.account_id)
    return results[0]


def enrich_title(
    title_id: UUID,
    *,
    provider_id: str | None = None,
    provider_external_id: str | None = None,
    force: bool = False,
    pipeline: MetadataPipeline | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
) -> EnrichmentResult:
    effective_uow = unit_of_work_factory or _catalog_uow()
    effective_pipeline = pipeline or build_pipeline()
    with effective_uow() as uow:
        title = uow.repositories.titles.get(title_id)
        if title is None:
            raise ValueError(f"Game title not found: {title_id}")
        result = effective_pipeline.enrich(
            title,
            provider_id=provider_id,
            provider_external_id=provider_external_id,
            force=force,
        )
        if result.updated:
            uow.commit()
    log.info("Enrichment of %s: %s", title_id, result.message)
    return result


def resync_metadata(
    owner_id: UUID,
    *,
    pipeline: MetadataPipeline | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
    tracker: SyncJobTracker | None = None,
) -> SyncJob:
    sync_config = get_sync_config()
    return resync_all_metadata(
        owner_id,
        pipeline=pipeline or build_pipeline(),
        tracker=tracker or SyncJobTracker(_sync_job_uow()),
        unit_of_work_factory=unit_of_work_factory or _catalog_uow(),
        delay_seconds=sync_config.resync_delay_seconds,
    )


def search_metadata(
    query: str,
    *,
    game_type: GameType | None = None,
    limit: int | None = None,
    pipeline: MetadataPipeline | None = None,
) -> list[MetadataSearchResult]:
    effective_limit = limit if limit is not None else get_sync_config().search_option_limit
    return search_options(pipeline or build_pipeline(), query, game_type, effective_limit)


def merge(
    kind: MergeKind,
    source_id: UUID,
    target_id: UUID,
    *,
    details: ReleaseDetails | None = None,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
) -> MergeResult:
    effective_uow = unit_of_work_factory or _catalog_uow()
    with effective_uow() as uow:
        return execute_merge(MergeOperation(kind, source_id, target_id, details), uow)


def list_review_queue(
    owner_id: UUID,
    *,
    unit_of_work_factory: CatalogUnitOfWorkFactory | None = None,
) -> list[GameExternalMapping]:
    effective_uow = unit_of_work_factory or _catalog_uow()
    with effective_uow() as uow:
        return list_pending_mappings(uow.repositories.mappings, owner_id)


def _library_uow() -> LibraryUnitOfWorkFactory:
    bootstrap()
    return SqlAlchemyLibraryImportUnitOfWork


def _catalog_uow() -> CatalogUnitOfWorkFactory:
    bootstrap()
    return SqlAlchemyCatalogUnitOfWork


def _sync_job_uow() -> SyncJobUnitOfWorkFactory:
    bootstrap()
    return SqlAlchemySyncJobUnitOfWork
