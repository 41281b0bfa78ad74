"""Root logger setup for the gameshelf CLI."""

from __future__ import annotations

import logging
from typing import Final

from .env import optional_env_var
from .errors import InvalidConfigurationError

LOG_LEVEL_ENV: Final[str] = "GAMESHELF_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# chatty below WARNING; every provider request would otherwise log twice
NOISY_LOGGERS: Final[tuple[str, ...]] = ("httpx", "httpcore", "hishel", "sqlalchemy.engine")


def log_level_from_env(default: int = logging.INFO) -> int:
    """Return the level named by ``GAMESHELF_LOG_LEVEL`` (e.g. ``debug``)."""

    name = optional_env_var(LOG_LEVEL_ENV)
    if name is None:
        return default
    level = logging.getLevelNamesMapping().get(name.upper())
    if level is None:
        raise InvalidConfigurationError(f"{LOG_LEVEL_ENV} is not a log level: {name!r}")
    return level


def configure_logging(*, verbose: bool = False, force: bool = False) -> int:
    """Configure the root logger and return the level in effect.

    ``verbose`` wins over the environment. Import and resync runs log one line
    per batch or title at INFO, so DEBUG is only needed for per-entry tracing.
    """

    level = logging.DEBUG if verbose else log_level_from_env()
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    third_party_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)
    return level
