"""Where gameshelf keeps its catalog database and the provider HTTP cache.

Both live in one per-user data directory. ``GAMESHELF_DATA_DIR`` moves it;
``DATABASE_URI`` points the catalog at another database altogether (the
HTTP cache stays in the data directory either way).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env_var

APP_DIR_NAME: Final[str] = "gameshelf"
DEFAULT_DB_FILENAME: Final[str] = "gameshelf.db"
HTTP_CACHE_FILENAME: Final[str] = "provider_cache.db"

DATA_DIR_ENV: Final[str] = "GAMESHELF_DATA_DIR"
DATABASE_URI_ENV: Final[str] = "DATABASE_URI"
SQL_ECHO_ENV: Final[str] = "GAMESHELF_SQL_ECHO"

_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    def file(self, filename: str, *, ensure: bool = True) -> Path:
        """Return ``filename`` inside the data directory, creating the directory if asked."""

        directory = self.data_dir.expanduser().resolve()
        if ensure:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / filename

    def database_path(self, *, ensure: bool = True) -> Path:
        return self.file(DEFAULT_DB_FILENAME, ensure=ensure)

    def http_cache_path(self, *, ensure: bool = True) -> Path:
        return self.file(HTTP_CACHE_FILENAME, ensure=ensure)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str
    echo: bool = False


def _platform_data_home() -> Path:
    if os.name == "nt":
        local = os.getenv("LOCALAPPDATA")
        return Path(local) if local else Path.home() / "AppData" / "Local"
    xdg = os.getenv("XDG_DATA_HOME")
    return Path(xdg) if xdg else Path.home() / ".local" / "share"


def get_storage_config() -> StorageConfig:
    configured = optional_env_var(DATA_DIR_ENV)
    if configured is not None:
        return StorageConfig(data_dir=Path(configured))
    return StorageConfig(data_dir=_platform_data_home() / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    echo = (optional_env_var(SQL_ECHO_ENV) or "").lower() in _TRUTHY
    uri = optional_env_var(DATABASE_URI_ENV)
    if uri is None:
        database_path = (storage or get_storage_config()).database_path()
        uri = f"sqlite+pysqlite:///{database_path}"
    return DatabaseConfig(uri=uri, echo=echo)
