"""Plain-text helpers for provider descriptions."""

from __future__ import annotations

import re
from typing import Final

MAX_SHORT_DESCRIPTION_LENGTH: Final[int] = 250

_BLOCK_CLOSE = re.compile(r"</(p|div|h[1-6]|li|tr|br)>", re.IGNORECASE)
_BREAK = re.compile(r"<(br|hr)\s*/?>", re.IGNORECASE)
_TAG = re.compile(r"<[^>]*>")
_DECIMAL_ENTITY = re.compile(r"&#(\d+);")
_HEX_ENTITY = re.compile(r"&#x([0-9a-fA-F]+);")

# &amp; goes last so that "&amp;lt;" decodes to "&lt;", not "<"
_NAMED_ENTITIES: Final[tuple[tuple[re.Pattern[str], str], ...]] = tuple(
    (re.compile(pattern, re.IGNORECASE), replacement)
    for pattern, replacement in (
        ("&nbsp;", " "),
        ("&lt;", "<"),
        ("&gt;", ">"),
        ("&quot;", '"'),
        ("&apos;", "'"),
        ("&#39;", "'"),
        ("&amp;", "&"),
    )
)


def _remove_tags(html: str) -> str:
    result = _BLOCK_CLOSE.sub("\n", html)
    result = _BREAK.sub("\n", result)
    previous = None
    while result != previous:
        previous = result
        result = _TAG.sub("", result)
    return result


def _decode_entities(text: str) -> str:
    result = _DECIMAL_ENTITY.sub(lambda m: _safe_chr(int(m.group(1), 10), m.group(0)), text)
    result = _HEX_ENTITY.sub(lambda m: _safe_chr(int(m.group(1), 16), m.group(0)), result)
    for pattern, replacement in _NAMED_ENTITIES:
        result = pattern.sub(replacement, result)
    return result


def _safe_chr(codepoint: int, original: str) -> str:
    try:
        return chr(codepoint)
    except (ValueError, OverflowError):
        return original


def strip_html(html: str | None) -> str:
    """Turn an HTML fragment into single-spaced plain text."""

    if not html:
        return ""
    result = _decode_entities(_remove_tags(html))
    result = re.sub(r"\s+", " ", result)
    return result.strip()


def truncate_text(text: str, max_length: int) -> str:
    if not text or len(text) <= max_length:
        return text
    return text[: max_length - 3] + "..."


def normalize_description(raw: str | None) -> str | None:
    """Strip markup from a provider description; empty results become ``None``."""

    text = strip_html(raw)
    return text or None
