"""RAWG metadata adapter."""

from __future__ import annotations

from .client import RawgClient
from .provider import RawgMetadataProvider

__all__ = ["RawgClient", "RawgMetadataProvider"]
