"""Best-effort metadata enrichment across ranked providers.

One pipeline instance shares pacing and error state across every title it
processes, so a catalog-wide resync backs off a provider once it starts
failing instead of hammering it for each remaining title.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field, replace
from logging import getLogger
from typing import TYPE_CHECKING

from gameshelf.domain.ports import MetadataApiError, MetadataRateLimitError

from .field_rules import MIN_VALID_DESCRIPTION_LENGTH, apply_metadata, merge_player_counts

if TYPE_CHECKING:
    from collections.abc import Callable

    from gameshelf.domain.model import GameTitle, GameType
    from gameshelf.domain.ports import GameMetadata, MetadataProvider, MetadataSearchResult

    from .registry import MetadataProviderRegistry

log = getLogger(__name__)

_HTTP_429 = re.compile(r"\b429\b")


@dataclass(slots=True)
class EnrichmentResult:
    updated: bool
    fields_updated: list[str] = field(default_factory=list[str])
    provider_name: str | None = None
    message: str = ""


@dataclass(slots=True)
class FetchResult:
    metadata: GameMetadata | None
    provider_name: str | None = None
    message: str = ""


class MetadataPipeline:
    def __init__(
        self,
        registry: MetadataProviderRegistry,
        *,
        min_description_length: int = MIN_VALID_DESCRIPTION_LENGTH,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.registry = registry
        self._min_description_length = min_description_length
        self._sleep = sleep
        self._clock = clock
        self._rate_limited: set[str] = set()
        self._consecutive_errors: dict[str, int] = {}
        self._last_request_at: dict[str, float] = {}

    # provider state ----------------------------------------------------------

    def is_rate_limited(self, provider_id: str) -> bool:
        return provider_id in self._rate_limited

    def error_count(self, provider_id: str) -> int:
        return self._consecutive_errors.get(provider_id, 0)

    def _bench(self, provider_id: str) -> None:
        if provider_id not in self._rate_limited:
            log.warning("Provider %s is rate limited; skipping it for this run", provider_id)
        self._rate_limited.add(provider_id)

    def _handle_error(self, provider: MetadataProvider, exc: Exception) -> None:
        provider_id = provider.manifest.id
        if _is_rate_limit(exc):
            self._bench(provider_id)
            return
        errors = self._consecutive_errors.get(provider_id, 0) + 1
        self._consecutive_errors[provider_id] = errors
        if errors >= provider.rate_limit.max_consecutive_errors:
            self._bench(provider_id)

    def _pace(self, provider: MetadataProvider) -> None:
        provider_id = provider.manifest.id
        delay = provider.rate_limit.request_delay_seconds
        last = self._last_request_at.get(provider_id)
        if last is not None and delay > 0:
            elapsed = self._clock() - last
            if elapsed < delay:
                self._sleep(delay - elapsed)
        self._last_request_at[provider_id] = self._clock()

    # single provider steps ---------------------------------------------------

    def search_provider(
        self,
        provider: MetadataProvider,
        query: str,
        limit: int = 5,
    ) -> list[MetadataSearchResult]:
        provider_id = provider.manifest.id
        if self.is_rate_limited(provider_id):
            return []
        try:
            self._pace(provider)
            results = provider.search_games(query, limit)
        except Exception as exc:  # noqa: BLE001
            log.warning("Search on %s failed: %s", provider_id, exc)
            self._handle_error(provider, exc)
            return []
        self._consecutive_errors[provider_id] = 0
        return results

    def fetch_from_provider(
        self,
        provider: MetadataProvider,
        external_id: str,
    ) -> GameMetadata | None:
        provider_id = provider.manifest.id
        if self.is_rate_limited(provider_id):
            return None
        try:
            self._pace(provider)
            metadata = provider.get_game_metadata(external_id)
        except Exception as exc:  # noqa: BLE001
            log.warning("Fetch of %s from %s failed: %s", external_id, provider_id, exc)
            self._handle_error(provider, exc)
            return None
        self._consecutive_errors[provider_id] = 0
        return metadata

    # composed operations -----------------------------------------------------

    def enrich_player_counts(self, query: str, metadata: GameMetadata) -> GameMetadata:
        """Fill missing per-mode counts from providers with accurate player data."""

        info = metadata.player_info
        if info is None or not info.is_multiplayer or info.has_mode_counts:
            return metadata

        for provider in self.registry.by_capability("has_accurate_player_counts"):
            if self.is_rate_limited(provider.manifest.id):
                continue
            results = self.search_provider(provider, query, 1)
            if not results:
                continue
            extra = self.fetch_from_provider(provider, results[0].external_id)
            if extra is None or extra.player_info is None:
                continue
            log.info("Enriched %r with player counts from %s", query, provider.manifest.name)
            return replace(metadata, player_info=merge_player_counts(info, extra.player_info))
        return metadata

    def fetch_metadata(
        self,
        name: str,
        *,
        game_type: GameType | None = None,
        provider_id: str | None = None,
        provider_external_id: str | None = None,
    ) -> FetchResult:
        if provider_id is not None:
            provider = self.registry.get(provider_id)
            if provider is None:
                return FetchResult(None, message=f"Provider '{provider_id}' not found")
            if self.is_rate_limited(provider_id):
                return FetchResult(None, message=f"Provider '{provider_id}' is rate limited")
            external_id = provider_external_id
            if external_id is None:
                results = self.search_provider(provider, name, 1)
                external_id = results[0].external_id if results else None
            metadata = self.fetch_from_provider(provider, external_id) if external_id else None
            provider_name = provider.manifest.name
        else:
            metadata, provider_name = self._first_match(name, game_type)

        if metadata is None:
            return FetchResult(None, message="No metadata found from any provider")

        had_counts = _has_mode_counts(metadata)
        metadata = self.enrich_player_counts(name or metadata.name, metadata)
        if not had_counts and _has_mode_counts(metadata):
            provider_name = f"{provider_name} (enriched)"
        return FetchResult(metadata, provider_name, f"Found metadata from {provider_name}")

    def _first_match(
        self,
        name: str,
        game_type: GameType | None,
    ) -> tuple[GameMetadata | None, str | None]:
        for provider in self.registry.for_game_type(game_type):
            if self.is_rate_limited(provider.manifest.id):
                continue
            results = self.search_provider(provider, name, 1)
            if not results:
                continue
            # the first provider with a hit decides; later ones are not consulted
            metadata = self.fetch_from_provider(provider, results[0].external_id)
            return metadata, provider.manifest.name
        return None, None

    def enrich(
        self,
        title: GameTitle,
        *,
        provider_id: str | None = None,
        provider_external_id: str | None = None,
        force: bool = False,
    ) -> EnrichmentResult:
        """Fetch metadata for ``title`` and apply it in place.

        The caller owns the unit of work and decides whether to commit.
        """

        fetched = self.fetch_metadata(
            title.name,
            game_type=title.type,
            provider_id=provider_id,
            provider_external_id=provider_external_id,
        )
        if fetched.metadata is None:
            return EnrichmentResult(updated=False, message=fetched.message)

        fields_updated = apply_metadata(
            title,
            fetched.metadata,
            force=force,
            min_description_length=self._min_description_length,
        )
        if not fields_updated:
            return EnrichmentResult(
                updated=False,
                provider_name=fetched.provider_name,
                message=f"No new data from {fetched.provider_name}",
            )
        return EnrichmentResult(
            updated=True,
            fields_updated=fields_updated,
            provider_name=fetched.provider_name,
            message=f"Updated from {fetched.provider_name}: {', '.join(fields_updated)}",
        )


def _has_mode_counts(metadata: GameMetadata) -> bool:
    return metadata.player_info is not None and metadata.player_info.has_mode_counts


def _is_rate_limit(exc: Exception) -> bool:
    if isinstance(exc, MetadataRateLimitError):
        return True
    if isinstance(exc, MetadataApiError) and exc.status_code == 429:
        return True
    return _HTTP_429.search(str(exc)) is not None
