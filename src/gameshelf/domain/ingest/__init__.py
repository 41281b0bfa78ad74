"""Playnite library ingestion and catalog reconciliation."""

from __future__ import annotations

from .catalog_mapping import CatalogMappingResolver, MappingResolution, list_pending_mappings
from .copies import CopyProjector, copy_changed
from .dto import ImportBatch, IncomingGame, PluginInfo
from .entitlement import MISSING_ORIGINAL_GAME_ID, EntitlementKey, resolve_entitlement_key
from .library_entries import LibraryEntryOutcome, LibraryEntryReconciler, library_entry_changed
from .names import extract_edition, normalize_title, title_match_key
from .providers import (
    StoreLink,
    extract_store_url,
    normalize_provider,
    normalize_source_name,
)
from .service import (
    DeviceContext,
    DeviceOwnershipError,
    ImportCounts,
    ImportResult,
    ImportWarning,
    import_library,
)
from .soft_removal import SoftRemovalSweeper

__all__ = [
    "MISSING_ORIGINAL_GAME_ID",
    "CatalogMappingResolver",
    "CopyProjector",
    "DeviceContext",
    "DeviceOwnershipError",
    "EntitlementKey",
    "ImportBatch",
    "ImportCounts",
    "ImportResult",
    "ImportWarning",
    "IncomingGame",
    "LibraryEntryOutcome",
    "LibraryEntryReconciler",
    "MappingResolution",
    "PluginInfo",
    "SoftRemovalSweeper",
    "StoreLink",
    "copy_changed",
    "extract_edition",
    "extract_store_url",
    "import_library",
    "library_entry_changed",
    "list_pending_mappings",
    "normalize_provider",
    "normalize_source_name",
    "normalize_title",
    "resolve_entitlement_key",
    "title_match_key",
]
