"""Project aggregator entries onto user-owned copies."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.domain.model import GameCopyType, ImportOutcome, Item

from .catalog_mapping import AGGREGATOR_PROVIDER_ID
from .providers import extract_store_url, normalize_provider

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from gameshelf.domain.ports import ItemRepository

    from .dto import IncomingGame

log = getLogger(__name__)


def copy_changed(item: Item, incoming: IncomingGame) -> bool:
    """Change predicate for copies.

    Broader than the library-entry predicate: a switch of the original store
    identity also counts as a change.
    """

    return (
        item.name != incoming.name
        or item.playtime_minutes != incoming.playtime_minutes
        or item.is_installed != incoming.installed
        or item.original_provider_name != incoming.original_provider_name
        or item.original_provider_game_id != incoming.original_provider_game_id
    )


def resolve_store_url(incoming: IncomingGame, provider: str) -> str | None:
    if incoming.store_url:
        return incoming.store_url
    return extract_store_url(
        incoming.links,
        provider,
        incoming.primary_platform,
        incoming.original_provider_name,
    )


class CopyProjector:
    def __init__(self, items: ItemRepository, *, now: datetime) -> None:
        self._items = items
        self._now = now

    def project(
        self,
        account_id: UUID,
        device_id: UUID,
        key: str,
        incoming: IncomingGame,
        release_id: UUID,
        needs_review: bool,
        owner_id: UUID,
    ) -> ImportOutcome:
        provider = normalize_provider(incoming.original_provider_plugin_id)
        item = self._items.get_by_aggregator(
            provider=AGGREGATOR_PROVIDER_ID,
            account_id=account_id,
            external_game_id=key,
        )

        if item is None:
            item = Item(
                owner_id=owner_id,
                name=incoming.name,
                game_release_id=release_id,
                copy_type=GameCopyType.DIGITAL_LICENSE,
                lendable=False,
                playtime_minutes=incoming.playtime_minutes,
                last_played_at=incoming.last_activity,
                is_installed=incoming.installed,
                store_url=resolve_store_url(incoming, provider),
                external_account_id=account_id,
                aggregator_provider_id=AGGREGATOR_PROVIDER_ID,
                aggregator_account_id=account_id,
                aggregator_external_game_id=key,
                original_provider_plugin_id=incoming.original_provider_plugin_id,
                original_provider_name=incoming.original_provider_name,
                original_provider_game_id=incoming.original_provider_game_id,
                original_provider_normalized_id=provider,
                needs_review=needs_review,
                created_at=self._now,
            )
            self._items.add(item)
            log.debug("Copy %s created from device %s", key, device_id)
            return ImportOutcome.CREATED

        if not copy_changed(item, incoming):
            return ImportOutcome.UNCHANGED

        item.name = incoming.name
        item.playtime_minutes = incoming.playtime_minutes
        item.last_played_at = incoming.last_activity
        item.is_installed = incoming.installed
        item.original_provider_name = incoming.original_provider_name
        item.original_provider_game_id = incoming.original_provider_game_id
        item.original_provider_normalized_id = provider
        item.needs_review = needs_review
        item.touch(self._now)
        return ImportOutcome.UPDATED
