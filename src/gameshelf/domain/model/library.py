"""Aggregator-side records: accounts, devices and library entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar

from .base import TimestampedEntity, utcnow
from .enums import AggregatorProvider, EntityType

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID


@dataclass(eq=False, kw_only=True)
class ExternalAccount(TimestampedEntity):
    """One owner's connection to one aggregator."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.EXTERNAL_ACCOUNT

    owner_id: UUID
    account_name: str
    provider: AggregatorProvider = AggregatorProvider.PLAYNITE


@dataclass(eq=False, kw_only=True)
class ConnectorDevice(TimestampedEntity):
    """A machine that pushes aggregator exports on behalf of an account."""

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.CONNECTOR_DEVICE

    account_id: UUID
    name: str
    last_import_at: datetime | None = None
    revoked_at: datetime | None = None

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None


@dataclass(eq=False, kw_only=True)
class ExternalLibraryEntry(TimestampedEntity):
    """The aggregator's view of one game for one account.

    ``is_installed`` is tri-state: ``None`` means the export did not say.
    Entries are never deleted; absence from an import flips ``is_installed``
    to ``False``.
    """

    ENTITY_TYPE: ClassVar[EntityType] = EntityType.LIBRARY_ENTRY

    account_id: UUID
    external_game_id: str
    external_game_name: str
    playtime_minutes: int | None = None
    last_played_at: datetime | None = None
    is_installed: bool | None = None
    raw_payload: dict[str, object] | None = None
    first_seen_at: datetime = field(default_factory=utcnow)
    last_seen_at: datetime = field(default_factory=utcnow)
