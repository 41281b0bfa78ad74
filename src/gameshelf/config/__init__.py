"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, optional_env_vars, require_env_vars
from .errors import ConfigurationError, InvalidConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .metadata import (
    BoardGameGeekConfig,
    IgdbConfig,
    MetadataConfig,
    RawgConfig,
    SteamConfig,
    get_metadata_config,
)
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "BoardGameGeekConfig",
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "IgdbConfig",
    "InvalidConfigurationError",
    "MetadataConfig",
    "MissingConfigurationError",
    "RateLimit",
    "RawgConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "SteamConfig",
    "StorageConfig",
    "SyncConfig",
    "configure_logging",
    "get_database_config",
    "get_metadata_config",
    "get_storage_config",
    "get_sync_config",
    "optional_env_var",
    "optional_env_vars",
    "require_env_vars",
]
