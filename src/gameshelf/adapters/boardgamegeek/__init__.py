"""BoardGameGeek metadata adapter."""

from __future__ import annotations

from .client import BoardGameGeekClient
from .provider import BoardGameGeekMetadataProvider

__all__ = ["BoardGameGeekClient", "BoardGameGeekMetadataProvider"]
