"""Synchronisation defaults for import and enrichment services."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int

DEFAULT_RESYNC_DELAY_SECONDS = 0.5
DEFAULT_MIN_VALID_DESCRIPTION_LENGTH = 50
DEFAULT_SEARCH_OPTION_LIMIT = 15


@dataclass(frozen=True, slots=True)
class SyncConfig:
    resync_delay_seconds: float = DEFAULT_RESYNC_DELAY_SECONDS
    min_valid_description_length: int = DEFAULT_MIN_VALID_DESCRIPTION_LENGTH
    search_option_limit: int = DEFAULT_SEARCH_OPTION_LIMIT


def get_sync_config() -> SyncConfig:
    return SyncConfig(
        resync_delay_seconds=env_float(
            "GAMESHELF_RESYNC_DELAY_SECONDS", DEFAULT_RESYNC_DELAY_SECONDS
        ),
        min_valid_description_length=env_int(
            "GAMESHELF_MIN_DESCRIPTION_LENGTH", DEFAULT_MIN_VALID_DESCRIPTION_LENGTH
        ),
        search_option_limit=env_int("GAMESHELF_SEARCH_LIMIT", DEFAULT_SEARCH_OPTION_LIMIT),
    )
