"""Aggregator-neutral inputs for the library import."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from gameshelf.domain.model import DEFAULT_RELEASE_PLATFORM

if TYPE_CHECKING:
    from datetime import datetime

    from .providers import StoreLink


@dataclass(slots=True, frozen=True, kw_only=True)
class IncomingGame:
    """One validated game from an aggregator export."""

    playnite_database_id: str
    name: str
    original_provider_plugin_id: str
    original_provider_name: str
    entitlement_key: str | None = None
    original_provider_game_id: str | None = None
    is_custom_game: bool = False
    hidden: bool = False
    installed: bool | None = None
    install_directory: str | None = None
    last_activity: datetime | None = None
    playtime_minutes: int | None = None
    platforms: tuple[str, ...] = ()
    source_id: str | None = None
    source_name: str | None = None
    store_url: str | None = None
    links: tuple[StoreLink, ...] = ()
    raw: dict[str, object] | None = None

    @property
    def primary_platform(self) -> str:
        return self.platforms[0] if self.platforms else DEFAULT_RELEASE_PLATFORM


@dataclass(slots=True, frozen=True)
class PluginInfo:
    plugin_id: str
    name: str


@dataclass(slots=True, frozen=True, kw_only=True)
class ImportBatch:
    exported_at: datetime
    games: tuple[IncomingGame, ...]
    plugins: tuple[PluginInfo, ...] = field(default_factory=tuple)
