"""RAWG API response schemas."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from gameshelf.adapters.provider_http import ProviderBaseModel


class RawgBaseModel(ProviderBaseModel):
    _provider_label: ClassVar[str] = "RAWG"
    _logged_extra_keys: ClassVar[set[str]] = set()


class RawgNamedRef(RawgBaseModel):
    id: int
    name: str
    slug: str


class RawgGame(RawgBaseModel):
    id: int
    name: str
    slug: str | None = None
    description: str | None = None
    description_raw: str | None = None
    released: str | None = None
    background_image: str | None = None
    website: str | None = None
    genres: list[RawgNamedRef] = Field(default_factory=list[RawgNamedRef])
    tags: list[RawgNamedRef] = Field(default_factory=list[RawgNamedRef])


class RawgSearchResponse(RawgBaseModel):
    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: list[RawgGame] = Field(default_factory=list[RawgGame])
