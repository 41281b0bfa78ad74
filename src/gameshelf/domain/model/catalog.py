"""Canonical catalog: titles, releases and external mappings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .base import TimestampedEntity
from .enums import EntityType, GameType, MappingStatus

if TYPE_CHECKING:
    from uuid import UUID

DEFAULT_RELEASE_PLATFORM = "PC"


@dataclass(eq=False, kw_only=True)
class GameTitle(TimestampedEntity):
    """A game independent of platform; player profile defaults to single-player."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GAME_TITLE

    owner_id: UUID
    name: str
    type: GameType = GameType.VIDEO_GAME
    description: str | None = None
    cover_image_url: str | None = None

    overall_min_players: int | None = 1
    overall_max_players: int | None = 1

    supports_online: bool = False
    supports_local: bool = False
    supports_physical: bool = False

    online_min_players: int | None = None
    online_max_players: int | None = None
    local_min_players: int | None = None
    local_max_players: int | None = None
    physical_min_players: int | None = None
    physical_max_players: int | None = None

    @property
    def is_multiplayer(self) -> bool:
        return self.supports_online or self.supports_local or self.supports_physical


@dataclass(eq=False, kw_only=True)
class GameRelease(TimestampedEntity):
    """One platform edition of a title. Copies reference releases, never titles."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GAME_RELEASE

    title_id: UUID
    owner_id: UUID
    platform: str = DEFAULT_RELEASE_PLATFORM
    edition: str | None = None
    region: str | None = None
    release_date: str | None = None


@dataclass(eq=False, kw_only=True)
class GameExternalMapping(TimestampedEntity):
    """Binding from ``(provider, external_game_id)`` to catalog entities."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.GAME_MAPPING

    owner_id: UUID
    provider: str
    external_game_id: str
    external_game_name: str | None = None
    title_id: UUID | None = None
    release_id: UUID | None = None
    status: MappingStatus = MappingStatus.PENDING

    @property
    def is_mapped(self) -> bool:
        return self.status is MappingStatus.MAPPED and self.release_id is not None

    def bind(self, *, title_id: UUID, release_id: UUID, status: MappingStatus) -> None:
        self.title_id = title_id
        self.release_id = release_id
        self.status = status
        self.touch()
