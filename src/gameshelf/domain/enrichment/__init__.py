"""Metadata enrichment: provider registry, pipeline, search and resync."""

from __future__ import annotations

from .field_rules import (
    MIN_VALID_DESCRIPTION_LENGTH,
    apply_metadata,
    is_valid_player_count,
    merge_player_counts,
)
from .pipeline import EnrichmentResult, FetchResult, MetadataPipeline
from .registry import MetadataProviderRegistry
from .resync import resync_all_metadata
from .search import search_options
from .text import (
    MAX_SHORT_DESCRIPTION_LENGTH,
    normalize_description,
    strip_html,
    truncate_text,
)

__all__ = [
    "MAX_SHORT_DESCRIPTION_LENGTH",
    "MIN_VALID_DESCRIPTION_LENGTH",
    "EnrichmentResult",
    "FetchResult",
    "MetadataPipeline",
    "MetadataProviderRegistry",
    "apply_metadata",
    "is_valid_player_count",
    "merge_player_counts",
    "normalize_description",
    "resync_all_metadata",
    "search_options",
    "strip_html",
    "truncate_text",
]
