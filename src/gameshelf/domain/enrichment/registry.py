"""Provider registry, built once at process start and passed around explicitly."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from gameshelf.domain.model import GameType

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gameshelf.domain.ports import MetadataProvider

_PHYSICAL_PROVIDER_ORDER: Final[tuple[str, ...]] = ("boardgamegeek",)
_VIDEO_PROVIDER_ORDER: Final[tuple[str, ...]] = ("steam", "rawg")
_PHYSICAL_TYPES: Final[frozenset[GameType]] = frozenset(
    {GameType.BOARD_GAME, GameType.CARD_GAME, GameType.TABLETOP_RPG}
)


class MetadataProviderRegistry:
    def __init__(self, providers: Iterable[MetadataProvider] = ()) -> None:
        self._providers: dict[str, MetadataProvider] = {}
        for provider in providers:
            self.register(provider)

    def register(self, provider: MetadataProvider) -> None:
        self._providers[provider.manifest.id] = provider

    def get(self, provider_id: str) -> MetadataProvider | None:
        return self._providers.get(provider_id)

    def all(self) -> list[MetadataProvider]:
        return list(self._providers.values())

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def by_capability(self, capability: str) -> list[MetadataProvider]:
        return [p for p in self._providers.values() if p.capabilities.supports(capability)]

    def for_game_type(self, game_type: GameType | None) -> list[MetadataProvider]:
        """Rank providers for a game type; unregistered ones are skipped.

        Without a type every search-capable provider is returned.
        """

        if game_type is None:
            return self.by_capability("supports_search")
        order = _PHYSICAL_PROVIDER_ORDER if game_type in _PHYSICAL_TYPES else _VIDEO_PROVIDER_ORDER
        return [self._providers[pid] for pid in order if pid in self._providers]
