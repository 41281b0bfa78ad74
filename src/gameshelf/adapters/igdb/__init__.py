"""IGDB metadata adapter."""

from __future__ import annotations

from .client import IgdbClient
from .provider import IgdbMetadataProvider

__all__ = ["IgdbClient", "IgdbMetadataProvider"]
