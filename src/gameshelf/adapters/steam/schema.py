"""Steam Store API response schemas."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field, TypeAdapter

from gameshelf.adapters.provider_http import ProviderBaseModel


class SteamBaseModel(ProviderBaseModel):
    _provider_label: ClassVar[str] = "Steam"
    _logged_extra_keys: ClassVar[set[str]] = set()


class SteamSearchItem(SteamBaseModel):
    id: int
    name: str
    type: str | None = None
    tiny_image: str | None = None


class SteamSearchResponse(SteamBaseModel):
    total: int = 0
    items: list[SteamSearchItem] = Field(default_factory=list[SteamSearchItem])


class SteamCategory(SteamBaseModel):
    id: int
    description: str | None = None


class SteamGenre(SteamBaseModel):
    id: str
    description: str


class SteamReleaseDate(SteamBaseModel):
    coming_soon: bool = False
    date: str | None = None


class SteamAppDetails(SteamBaseModel):
    steam_appid: int
    name: str
    type: str | None = None
    short_description: str | None = None
    about_the_game: str | None = None
    detailed_description: str | None = None
    header_image: str | None = None
    capsule_image: str | None = None
    capsule_imagev5: str | None = None
    categories: list[SteamCategory] = Field(default_factory=list[SteamCategory])
    genres: list[SteamGenre] = Field(default_factory=list[SteamGenre])
    release_date: SteamReleaseDate | None = None


class SteamAppDetailsEnvelope(SteamBaseModel):
    success: bool
    data: SteamAppDetails | None = None


# appdetails answers with {"<appid>": {"success": ..., "data": {...}}}
AppDetailsResponse = TypeAdapter(dict[str, SteamAppDetailsEnvelope])
