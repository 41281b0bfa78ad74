"""Steam Store metadata adapter."""

from __future__ import annotations

from .client import SteamClient
from .provider import SteamMetadataProvider

__all__ = ["SteamClient", "SteamMetadataProvider"]
