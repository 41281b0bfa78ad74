"""Original-provider identification for Playnite library plugins.

Playnite imports games from many storefront plugins. These helpers map the
plugin GUID or a free-form store name to a short provider id (``"steam"``,
``"gog"``...), and pick the most trustworthy store link out of the game's
``raw.links`` list.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

UNKNOWN_PROVIDER: Final[str] = "unknown"

KNOWN_PROVIDERS: Final[dict[str, str]] = {
    "cb91dfc9-b977-43bf-8e70-55f46e410fab": "steam",
    "00000001-ebb2-4ecc-abcb-75c4f5a78e18": "epic",
    "00000002-dbb3-46d2-8dc0-f695c3f987f9": "epic",
    "aebe8b7c-6dc3-4a66-af31-e7375c6b5e9e": "gog",
    "85dd7072-2f20-4e76-a007-41035e390724": "ea",
    "00000003-dbb3-46d2-8dc0-f695c3f987f9": "origin",
    "c2f038e5-8b92-4877-91f1-da9094155fc5": "ubisoft",
    "7e4fbb5e-2ae3-48d4-8ba0-6c90e136a77c": "xbox",
    "e4ac81cb-1b1a-4ec9-8639-9a9633989a71": "playstation",
    "ed31b7dd-f6e6-4e31-9152-4d67a6f80e4a": "amazon",
    "00000004-ebb2-4ecc-abcb-75c4f5a78e18": "itch",
    "96e8c4bc-ec5c-4c8b-87e7-da65de62deb5": "humble",
    "e3c26a3d-d695-4cb7-a769-5d3d0da6d1a4": "battlenet",
}

SOURCE_NAME_ALIASES: Final[dict[str, str]] = {
    "steam": "steam",
    "steam store": "steam",
    "valve steam": "steam",
    "epic": "epic",
    "epic games": "epic",
    "epic games store": "epic",
    "epic store": "epic",
    "gog": "gog",
    "gog.com": "gog",
    "gog galaxy": "gog",
    "ea": "ea",
    "ea app": "ea",
    "ea play": "ea",
    "origin": "ea",
    "ea origin": "ea",
    "electronic arts": "ea",
    "ubisoft": "ubisoft",
    "ubisoft connect": "ubisoft",
    "uplay": "ubisoft",
    "ubi": "ubisoft",
    "xbox": "xbox",
    "xbox game pass": "xbox",
    "microsoft": "xbox",
    "microsoft store": "xbox",
    "windows store": "xbox",
    "playstation": "playstation",
    "psn": "playstation",
    "ps store": "playstation",
    "playstation store": "playstation",
    "playstation network": "playstation",
    "amazon": "amazon",
    "amazon games": "amazon",
    "amazon luna": "amazon",
    "prime gaming": "amazon",
    "itch": "itch",
    "itch.io": "itch",
    "humble": "humble",
    "humble bundle": "humble",
    "humble store": "humble",
    "battlenet": "battlenet",
    "battle.net": "battlenet",
    "blizzard": "battlenet",
    "activision blizzard": "battlenet",
    "nintendo": "nintendo",
    "nintendo eshop": "nintendo",
    "eshop": "nintendo",
    "rockstar": "rockstar",
    "rockstar games": "rockstar",
    "rockstar launcher": "rockstar",
    "bethesda": "bethesda",
    "bethesda.net": "bethesda",
    "bethesda launcher": "bethesda",
    "indiegala": "indiegala",
    "indie gala": "indiegala",
}

PROVIDER_LINK_PATTERNS: Final[dict[str, tuple[str, ...]]] = {
    "steam": ("steam", "store.steampowered.com"),
    "epic": ("epic", "epicgames.com", "epic games", "launcher.store.epicgames.com"),
    "gog": ("gog", "gog.com"),
    "ea": ("ea", "ea.com", "origin", "origin.com"),
    "ubisoft": ("ubisoft", "ubisoft.com", "ubi.com", "store.ubi.com", "uplay"),
    "xbox": ("xbox", "microsoft", "microsoft.com", "xbox.com"),
    "playstation": ("playstation", "playstation.com", "psn", "store.playstation.com"),
    "amazon": ("amazon", "amazon.com", "gaming.amazon.com"),
    "itch": ("itch", "itch.io"),
    "humble": ("humble", "humblebundle.com"),
    "battlenet": ("battle.net", "blizzard", "battlenet", "shop.battle.net"),
    "nintendo": (
        "nintendo",
        "nintendo.com",
        "eshop",
        "my nintendo store",
        "nintendo store",
        "my nintendo",
    ),
    "rockstar": ("rockstar", "rockstargames.com", "socialclub.rockstargames.com"),
    "bethesda": ("bethesda", "bethesda.net"),
    "indiegala": ("indiegala",),
}

# Nintendo runs separate eShops per console generation
PLATFORM_STORE_PATTERNS: Final[dict[str, dict[str, tuple[str, ...]]]] = {
    "nintendo": {
        "switch": (
            "nintendo.com",
            "nintendo.co.",
            "nintendo switch",
            "nintendo eshop",
            "ec.nintendo.com",
        ),
        "3ds": ("nintendo.com/3ds", "nintendo 3ds", "3ds eshop"),
        "wii u": ("nintendo.com/wiiu", "wii u eshop"),
    },
    "playstation": {
        "ps5": ("store.playstation.com", "ps5"),
        "ps4": ("store.playstation.com", "ps4"),
        "ps3": ("store.playstation.com", "ps3"),
        "vita": ("store.playstation.com", "vita"),
        "psp": ("store.playstation.com", "psp"),
    },
    "xbox": {
        "xbox series x|s": ("microsoft.com", "xbox.com", "xbox store"),
        "xbox series x": ("microsoft.com", "xbox.com"),
        "xbox series s": ("microsoft.com", "xbox.com"),
        "xbox one": ("microsoft.com", "xbox.com"),
        "xbox 360": ("marketplace.xbox.com",),
    },
}

# lower-case URL fragments that prove a link points at a store page, not a publisher site
KNOWN_STORE_URL_PATTERNS: Final[dict[str, tuple[str, ...]]] = {
    "steam": ("store.steampowered.com",),
    "epic": ("store.epicgames.com", "epicgames.com/store", "launcher.store.epicgames.com"),
    "gog": ("gog.com/game", "gog.com/en/game", "gog.com/de/game", "gog.com/fr/game"),
    "ea": ("ea.com/games", "ea.com/de-de/games", "ea.com/fr-fr/games", "origin.com/store"),
    "ubisoft": ("ubisoft.com/game", "store.ubi.com", "store.ubisoft.com"),
    "xbox": (
        "microsoft.com/store",
        "microsoft.com/en-us/store",
        "microsoft.com/de-de/store",
        "microsoft.com/fr-fr/store",
        "xbox.com/games",
        "xbox.com/en-us/games",
        "xbox.com/de-de/games",
    ),
    "playstation": ("store.playstation.com",),
    "nintendo": (
        "nintendo.com/store",
        "nintendo.com/games",
        "nintendo.com/us/store",
        "nintendo.com/en-gb/games",
        "nintendo.com/de-de/spiele",
        "nintendo.co.uk/games",
        "nintendo.de/spiele",
        "nintendo.fr/jeux",
        "nintendo.es/juegos",
        "nintendo.it/giochi",
        "nintendo.co.jp",
        "ec.nintendo.com",
    ),
    "itch": ("itch.io",),
    "humble": ("humblebundle.com/store",),
    "battlenet": ("battle.net/shop", "shop.battle.net"),
    "rockstar": ("rockstargames.com/games", "socialclub.rockstargames.com"),
    "indiegala": ("indiegala.com/store",),
}

WEBSITE_LINK_NAMES: Final[tuple[str, ...]] = (
    "website",
    "official",
    "store",
    "buy",
    "purchase",
    "shop",
)

_ALL_STORE_URL_PATTERNS: Final[tuple[str, ...]] = tuple(
    pattern for patterns in KNOWN_STORE_URL_PATTERNS.values() for pattern in patterns
)


@dataclass(slots=True, frozen=True)
class StoreLink:
    """A named link from the Playnite ``raw.links`` array."""

    name: str
    url: str


def normalize_provider(plugin_id: str | None) -> str:
    """Map a Playnite library plugin GUID to a provider id, or ``"unknown"``."""

    if not plugin_id:
        return UNKNOWN_PROVIDER
    return KNOWN_PROVIDERS.get(plugin_id.strip().lower(), UNKNOWN_PROVIDER)


def normalize_source_name(source_name: str | None) -> str:
    """Map a free-form store name to a provider id, or ``"unknown"``."""

    if not source_name:
        return UNKNOWN_PROVIDER
    normalized = source_name.strip().lower()
    direct = SOURCE_NAME_ALIASES.get(normalized)
    if direct is not None:
        return direct
    # two-letter aliases like "ea" would match inside unrelated words
    for alias, provider_id in SOURCE_NAME_ALIASES.items():
        if len(alias) > 2 and _contains_word(normalized, alias):
            return provider_id
    return UNKNOWN_PROVIDER


def extract_store_url(
    links: Sequence[StoreLink] | None,
    provider: str,
    platform: str | None = None,
    original_provider_name: str | None = None,
) -> str | None:
    """Pick the best store URL from a game's links without guessing.

    Passes run from most to least specific; the first hit wins.
    """

    if not links:
        return None

    if provider == UNKNOWN_PROVIDER and original_provider_name:
        provider = normalize_source_name(original_provider_name)
    normalized_platform = platform.strip().lower() if platform else None

    if normalized_platform:
        hit = _match_platform_store(links, provider, normalized_platform)
        if hit is not None:
            return hit

    for link in links:
        name, url = link.name.lower(), link.url.lower()
        for pattern in PROVIDER_LINK_PATTERNS.get(provider, ()):
            if pattern in name or pattern in url:
                return link.url

    store_patterns = KNOWN_STORE_URL_PATTERNS.get(provider)
    if store_patterns:
        hit = _match_known_store(links, store_patterns, original_provider_name)
        if hit is not None:
            return hit

    for link in links:
        if _url_matches(link, _ALL_STORE_URL_PATTERNS):
            return link.url

    for link in links:
        if _is_website_link(link):
            return link.url

    return None


def _match_platform_store(
    links: Sequence[StoreLink],
    provider: str,
    platform: str,
) -> str | None:
    for platform_key, patterns in PLATFORM_STORE_PATTERNS.get(provider, {}).items():
        if platform_key not in platform and platform not in platform_key:
            continue
        for link in links:
            if _url_matches(link, patterns):
                return link.url
    return None


def _match_known_store(
    links: Sequence[StoreLink],
    store_patterns: tuple[str, ...],
    original_provider_name: str | None,
) -> str | None:
    if original_provider_name and len(original_provider_name) >= 3:
        wanted = original_provider_name.lower()
        for link in links:
            link_name = link.name.lower()
            is_match = link_name == wanted
            if not is_match and len(wanted) >= 4:
                is_match = _contains_word(link_name, wanted)
            if is_match and _url_matches(link, store_patterns):
                return link.url

    for link in links:
        if _is_website_link(link) and _url_matches(link, store_patterns):
            return link.url

    for link in links:
        if _url_matches(link, store_patterns):
            return link.url
    return None


def _url_matches(link: StoreLink, patterns: Iterable[str]) -> bool:
    url = link.url.lower()
    return any(pattern in url for pattern in patterns)


def _is_website_link(link: StoreLink) -> bool:
    name = link.name.lower()
    return any(pattern in name for pattern in WEBSITE_LINK_NAMES)


def _contains_word(text: str, word: str) -> bool:
    return re.search(rf"\b{re.escape(word)}\b", text, flags=re.IGNORECASE) is not None
