"""IGDB API response schemas."""

from __future__ import annotations

from typing import ClassVar

from pydantic import Field, TypeAdapter

from gameshelf.adapters.provider_http import ProviderBaseModel


class IgdbBaseModel(ProviderBaseModel):
    _provider_label: ClassVar[str] = "IGDB"
    _logged_extra_keys: ClassVar[set[str]] = set()


class TwitchToken(IgdbBaseModel):
    access_token: str
    expires_in: int
    token_type: str | None = None


class IgdbImage(IgdbBaseModel):
    id: int | None = None
    image_id: str


class IgdbNamed(IgdbBaseModel):
    id: int | None = None
    name: str


class IgdbGameMode(IgdbBaseModel):
    id: int | None = None
    name: str | None = None
    slug: str


class IgdbMultiplayerMode(IgdbBaseModel):
    id: int | None = None
    campaigncoop: bool | None = None
    dropin: bool | None = None
    lancoop: bool | None = None
    offlinecoop: bool | None = None
    offlinecoopmax: int | None = None
    offlinemax: int | None = None
    onlinecoop: bool | None = None
    onlinecoopmax: int | None = None
    onlinemax: int | None = None
    splitscreen: bool | None = None


class IgdbGame(IgdbBaseModel):
    id: int
    name: str
    slug: str | None = None
    summary: str | None = None
    storyline: str | None = None
    first_release_date: int | None = None
    cover: IgdbImage | None = None
    genres: list[IgdbNamed] = Field(default_factory=list[IgdbNamed])
    game_modes: list[IgdbGameMode] = Field(default_factory=list[IgdbGameMode])
    multiplayer_modes: list[IgdbMultiplayerMode] = Field(
        default_factory=list[IgdbMultiplayerMode]
    )


IgdbGameList = TypeAdapter(list[IgdbGame])
