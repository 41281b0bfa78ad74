"""User-visible ownership records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from .base import TimestampedEntity
from .enums import EntityType, GameCopyType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class Item(TimestampedEntity):
    """A copy of a game release owned by a user.

    Aggregator-sourced copies carry two provenance layers: the aggregator
    triple ``(aggregator_provider_id, aggregator_account_id,
    aggregator_external_game_id)``, unique per item, and the original
    storefront that granted the license.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.ITEM

    owner_id: UUID
    name: str
    game_release_id: UUID | None = None
    copy_type: GameCopyType = GameCopyType.DIGITAL_LICENSE
    lendable: bool = True

    playtime_minutes: int | None = None
    last_played_at: datetime | None = None
    is_installed: bool | None = None
    store_url: str | None = None

    external_account_id: UUID | None = None
    aggregator_provider_id: str | None = None
    aggregator_account_id: UUID | None = None
    aggregator_external_game_id: str | None = None

    original_provider_plugin_id: str | None = None
    original_provider_name: str | None = None
    original_provider_game_id: str | None = None
    original_provider_normalized_id: str | None = None

    needs_review: bool = False
