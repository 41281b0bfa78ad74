"""Reconcile the aggregator's library entries for one account."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.domain.model import ExternalLibraryEntry, ImportOutcome

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from gameshelf.domain.ports import LibraryEntryRepository

    from .dto import IncomingGame

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class LibraryEntryOutcome:
    outcome: ImportOutcome
    entry: ExternalLibraryEntry


def library_entry_changed(entry: ExternalLibraryEntry, incoming: IncomingGame) -> bool:
    """Change predicate for library entries: name, playtime and install state.

    The raw payload is never compared; it is rewritten only when one of these
    fields moved.
    """

    return (
        entry.external_game_name != incoming.name
        or entry.playtime_minutes != incoming.playtime_minutes
        or entry.is_installed != incoming.installed
    )


class LibraryEntryReconciler:
    def __init__(self, entries: LibraryEntryRepository, *, now: datetime) -> None:
        self._entries = entries
        self._now = now

    def reconcile(self, account_id: UUID, key: str, incoming: IncomingGame) -> LibraryEntryOutcome:
        entry = self._entries.get_by_key(account_id=account_id, external_game_id=key)
        if entry is None:
            entry = ExternalLibraryEntry(
                account_id=account_id,
                external_game_id=key,
                external_game_name=incoming.name,
                playtime_minutes=incoming.playtime_minutes,
                last_played_at=incoming.last_activity,
                is_installed=incoming.installed,
                raw_payload=incoming.raw,
                first_seen_at=self._now,
                last_seen_at=self._now,
                created_at=self._now,
            )
            self._entries.add(entry)
            log.debug("Library entry %s created", key)
            return LibraryEntryOutcome(ImportOutcome.CREATED, entry)

        if not library_entry_changed(entry, incoming):
            entry.last_seen_at = self._now
            return LibraryEntryOutcome(ImportOutcome.UNCHANGED, entry)

        entry.external_game_name = incoming.name
        entry.playtime_minutes = incoming.playtime_minutes
        entry.last_played_at = incoming.last_activity
        entry.is_installed = incoming.installed
        entry.raw_payload = incoming.raw
        entry.last_seen_at = self._now
        entry.touch(self._now)
        log.debug("Library entry %s updated", key)
        return LibraryEntryOutcome(ImportOutcome.UPDATED, entry)
