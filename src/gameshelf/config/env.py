"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import InvalidConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Sequence


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = optional_env_var(name)
        if value is None:
            missing.append(name)
            continue
        values[name] = value

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def optional_env_var(name: str) -> str | None:
    """Return a stripped environment value, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def optional_env_vars(names: Sequence[str]) -> dict[str, str] | None:
    """Return all given variables, or ``None`` when any of them is unset.

    Used for optional integrations that need a complete set of credentials.
    """

    values: dict[str, str] = {}
    for name in names:
        value = optional_env_var(name)
        if value is None:
            return None
        values[name] = value
    return values


def env_float(name: str, default: float) -> float:
    value = optional_env_var(name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError as exc:
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}") from exc
    if parsed < 0:
        raise InvalidConfigurationError(f"{name} must be non-negative, got {value!r}")
    return parsed


def env_int(name: str, default: int) -> int:
    value = optional_env_var(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise InvalidConfigurationError(f"{name} must be positive, got {value!r}")
    return parsed
