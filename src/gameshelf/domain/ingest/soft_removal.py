"""Mark entries missing from an import as no longer installed."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .catalog_mapping import AGGREGATOR_PROVIDER_ID

if TYPE_CHECKING:
    from collections.abc import Collection
    from datetime import datetime
    from uuid import UUID

    from gameshelf.domain.ports import ItemRepository, LibraryEntryRepository

log = getLogger(__name__)


class SoftRemovalSweeper:
    """Flip ``is_installed`` to ``False`` for unseen entries and their copies.

    Nothing is deleted. A later import that includes the key again restores
    the flag through the regular update paths.
    """

    def __init__(
        self,
        *,
        entries: LibraryEntryRepository,
        items: ItemRepository,
        now: datetime,
    ) -> None:
        self._entries = entries
        self._items = items
        self._now = now

    def sweep(self, account_id: UUID, seen_keys: Collection[str]) -> int:
        unseen = self._entries.unseen_keys(account_id=account_id, seen_keys=seen_keys)
        if not unseen:
            return 0
        self._entries.mark_uninstalled(account_id=account_id, keys=unseen, now=self._now)
        copies = self._items.mark_uninstalled(
            provider=AGGREGATOR_PROVIDER_ID,
            account_id=account_id,
            keys=unseen,
            now=self._now,
        )
        log.info(
            "Soft-removed %d library entries (%d copies) for account %s",
            len(unseen),
            copies,
            account_id,
        )
        return len(unseen)
