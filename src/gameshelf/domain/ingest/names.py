"""Game name normalization used to match catalog titles across storefronts."""

from __future__ import annotations

import re
from typing import Final

_SEPARATOR = r"\s*[-–—:]\s*"

# ordered: specific phrases before their abbreviations
EDITION_PATTERNS: Final[tuple[tuple[re.Pattern[str], str | None], ...]] = tuple(
    (re.compile(pattern, re.IGNORECASE), edition)
    for pattern, edition in (
        (_SEPARATOR + r"Game of the Year Edition$", "Game of the Year Edition"),
        (r"\s+GOTY(?:\s+Edition)?$", "Game of the Year Edition"),
        (r"\s+Game of the Year$", "Game of the Year Edition"),
        (_SEPARATOR + r"Gold Edition$", "Gold Edition"),
        (r"\s+Gold$", "Gold Edition"),
        (_SEPARATOR + r"Complete Edition$", "Complete Edition"),
        (r"\s+Complete$", "Complete Edition"),
        (_SEPARATOR + r"Definitive Edition$", "Definitive Edition"),
        (_SEPARATOR + r"Ultimate Edition$", "Ultimate Edition"),
        (_SEPARATOR + r"Enhanced Edition$", "Enhanced Edition"),
        (_SEPARATOR + r"Deluxe Edition$", "Deluxe Edition"),
        (_SEPARATOR + r"Premium Edition$", "Premium Edition"),
        (_SEPARATOR + r"Collector'?s Edition$", "Collector's Edition"),
        (_SEPARATOR + r"Limited Edition$", "Limited Edition"),
        (_SEPARATOR + r"Special Edition$", "Special Edition"),
        (_SEPARATOR + r"Anniversary Edition$", "Anniversary Edition"),
        (_SEPARATOR + r"Director'?s Cut$", "Director's Cut"),
        (_SEPARATOR + r"Remastered$", "Remastered"),
        (_SEPARATOR + r"HD Remaster$", "HD Remaster"),
        (_SEPARATOR + r"Remake$", "Remake"),
        # the standard edition is stored as no edition at all
        (_SEPARATOR + r"Standard Edition$", None),
    )
)

_TRADEMARKS = re.compile(r"[™®©]")
_APOSTROPHES = re.compile(r"['‘’`´]")
_PUNCTUATION = re.compile(r"[.,:;!?]")
_DASHES = re.compile(r"[-–—]")
_WHITESPACE = re.compile(r"\s+")


def extract_edition(name: str) -> tuple[str, str | None]:
    """Split ``name`` into its base title and a recognised edition suffix.

    >>> extract_edition("The Sims 4 - Premium Edition")
    ('The Sims 4', 'Premium Edition')
    >>> extract_edition("Portal 2")
    ('Portal 2', None)
    """

    for pattern, edition in EDITION_PATTERNS:
        if pattern.search(name):
            base_name = pattern.sub("", name).strip()
            if base_name:
                return base_name, edition
    return name, None


def normalize_title(name: str) -> str:
    """Collapse trademark signs, punctuation, dashes and case so variants compare equal."""

    value = _TRADEMARKS.sub("", name.lower())
    value = _APOSTROPHES.sub("", value)
    value = _PUNCTUATION.sub("", value)
    value = _DASHES.sub(" ", value)
    value = value.replace("&", "and")
    return _WHITESPACE.sub(" ", value).strip()


def title_match_key(name: str) -> str:
    """Key under which two names denote the same catalog title, editions ignored."""

    base_name, _ = extract_edition(name)
    return normalize_title(base_name)
