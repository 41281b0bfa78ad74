"""Library import: one idempotent reconciliation pass per device batch."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.domain.model import ImportOutcome, utcnow

from .catalog_mapping import CatalogMappingResolver
from .copies import CopyProjector
from .entitlement import resolve_entitlement_key
from .library_entries import LibraryEntryReconciler
from .providers import normalize_provider
from .soft_removal import SoftRemovalSweeper

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from uuid import UUID

    from gameshelf.domain.ports import LibraryImportRepositories, LibraryImportUnitOfWork

    from .dto import ImportBatch

log = getLogger(__name__)


class DeviceOwnershipError(RuntimeError):
    """Raised when a device cannot import on behalf of the caller."""


@dataclass(slots=True, frozen=True)
class DeviceContext:
    device_id: UUID
    account_id: UUID
    owner_id: UUID


@dataclass(slots=True)
class ImportCounts:
    received: int = 0
    created: int = 0
    updated: int = 0
    unchanged: int = 0
    soft_removed: int = 0
    needs_review: int = 0

    def record(self, outcome: ImportOutcome) -> None:
        match outcome:
            case ImportOutcome.CREATED:
                self.created += 1
            case ImportOutcome.UPDATED:
                self.updated += 1
            case ImportOutcome.UNCHANGED:
                self.unchanged += 1

    def to_payload(self) -> dict[str, int]:
        return {
            "received": self.received,
            "created": self.created,
            "updated": self.updated,
            "unchanged": self.unchanged,
            "softRemoved": self.soft_removed,
            "needsReview": self.needs_review,
        }


@dataclass(slots=True, frozen=True)
class ImportWarning:
    code: str
    count: int


@dataclass(slots=True)
class ImportResult:
    device_id: UUID
    imported_at: datetime
    counts: ImportCounts
    warnings: list[ImportWarning] = field(default_factory=list[ImportWarning])

    def to_payload(self) -> dict[str, object]:
        return {
            "deviceId": str(self.device_id),
            "importedAt": self.imported_at.isoformat(),
            "counts": self.counts.to_payload(),
            "warnings": [{"code": w.code, "count": w.count} for w in self.warnings],
        }


def resolve_device(
    repositories: LibraryImportRepositories,
    device_id: UUID,
    owner_id: UUID,
) -> DeviceContext:
    """Check that ``device_id`` may import for ``owner_id``."""

    device = repositories.devices.get(device_id)
    if device is None:
        raise DeviceOwnershipError(f"Connector device not found: {device_id}")
    if device.is_revoked:
        raise DeviceOwnershipError(f"Connector device {device_id} has been revoked")
    account = repositories.accounts.get(device.account_id)
    if account is None:
        raise DeviceOwnershipError(f"Device {device_id} has no linked account")
    if account.owner_id != owner_id:
        raise DeviceOwnershipError(f"Device {device_id} belongs to another user")
    return DeviceContext(device_id=device.id, account_id=account.id, owner_id=owner_id)


def import_library(
    batch: ImportBatch,
    *,
    device_id: UUID,
    owner_id: UUID,
    unit_of_work_factory: Callable[[], LibraryImportUnitOfWork],
    now: datetime | None = None,
) -> ImportResult:
    """Reconcile one export batch against the stored library of the device's account.

    Entries are processed in order inside a single unit of work. Any failure
    rolls the whole batch back.
    """

    imported_at = now or utcnow()
    counts = ImportCounts(received=len(batch.games))
    warning_counts: Counter[str] = Counter()
    seen_keys: set[str] = set()

    with unit_of_work_factory() as uow:
        repositories = uow.repositories
        context = resolve_device(repositories, device_id, owner_id)

        entries = LibraryEntryReconciler(repositories.library_entries, now=imported_at)
        resolver = CatalogMappingResolver(
            mappings=repositories.mappings,
            titles=repositories.titles,
            releases=repositories.releases,
            now=imported_at,
        )
        copies = CopyProjector(repositories.items, now=imported_at)

        for game in batch.games:
            entitlement = resolve_entitlement_key(game)
            seen_keys.add(entitlement.key)
            warning_counts.update(entitlement.warnings)
            if entitlement.needs_review:
                counts.needs_review += 1

            entry_outcome = entries.reconcile(context.account_id, entitlement.key, game)
            resolution = resolver.resolve(
                entitlement.key,
                normalize_provider(game.original_provider_plugin_id),
                game.original_provider_game_id,
                game.name,
                context.owner_id,
                needs_review=entitlement.needs_review,
                platform=game.primary_platform,
            )
            if resolution is None:
                counts.record(entry_outcome.outcome)
                continue
            copy_outcome = copies.project(
                context.account_id,
                context.device_id,
                entitlement.key,
                game,
                resolution.release_id,
                entitlement.needs_review,
                context.owner_id,
            )
            counts.record(max(entry_outcome.outcome, copy_outcome, key=lambda o: o.rank))

        sweeper = SoftRemovalSweeper(
            entries=repositories.library_entries,
            items=repositories.items,
            now=imported_at,
        )
        counts.soft_removed = sweeper.sweep(context.account_id, seen_keys)

        device = repositories.devices.get(context.device_id)
        if device is not None:
            device.last_import_at = imported_at
            device.touch(imported_at)
        uow.commit()

    log.info(
        "Imported %d games for device %s: %d created, %d updated, %d unchanged, "
        "%d soft-removed, %d need review",
        counts.received,
        device_id,
        counts.created,
        counts.updated,
        counts.unchanged,
        counts.soft_removed,
        counts.needs_review,
    )
    return ImportResult(
        device_id=device_id,
        imported_at=imported_at,
        counts=counts,
        warnings=[ImportWarning(code, count) for code, count in warning_counts.items()],
    )
