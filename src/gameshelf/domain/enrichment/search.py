"""Candidate search for manual metadata selection."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from gameshelf.domain.model import GameType
    from gameshelf.domain.ports import MetadataSearchResult

    from .pipeline import MetadataPipeline

DEFAULT_SEARCH_LIMIT: Final[int] = 15
PER_PROVIDER_LIMIT: Final[int] = 10


def search_options(
    pipeline: MetadataPipeline,
    query: str,
    game_type: GameType | None = None,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> list[MetadataSearchResult]:
    """Query every applicable provider and rank the combined candidates.

    Duplicates by name keep their first occurrence. Exact matches come first,
    then prefix matches, then shorter names.
    """

    collected: list[MetadataSearchResult] = []
    for provider in pipeline.registry.for_game_type(game_type):
        collected.extend(pipeline.search_provider(provider, query, PER_PROVIDER_LIMIT))

    seen: set[str] = set()
    unique: list[MetadataSearchResult] = []
    for result in collected:
        key = result.name.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(result)

    needle = query.strip().lower()

    def rank(result: MetadataSearchResult) -> tuple[int, int, int]:
        name = result.name.strip().lower()
        return (0 if name == needle else 1, 0 if name.startswith(needle) else 1, len(name))

    unique.sort(key=rank)
    return unique[:limit]
