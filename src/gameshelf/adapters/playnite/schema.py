"""Pydantic models describing the Playnite library export payload."""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MAX_ENTITLEMENT_KEY_LENGTH = 500


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class PlayniteBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)


class PluginPayload(PlayniteBaseModel):
    plugin_id: str
    name: str


class GamePayload(PlayniteBaseModel):
    playnite_database_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    original_provider_plugin_id: str = Field(min_length=1)
    original_provider_name: str = Field(min_length=1)
    entitlement_key: str | None = Field(
        default=None, min_length=1, max_length=MAX_ENTITLEMENT_KEY_LENGTH
    )
    is_custom_game: bool = False
    hidden: bool = False
    installed: bool | None = None
    install_directory: str | None = None
    playtime_seconds: int | None = Field(default=None, ge=0)
    last_activity: datetime | None = None
    platforms: list[str] = Field(default_factory=list[str])
    source_id: str | None = None
    source_name: str | None = None
    original_provider_game_id: str | None = None
    store_url: str | None = None
    raw: dict[str, object] | None = None

    _normalize_blanks = field_validator(
        "install_directory",
        "last_activity",
        "source_id",
        "source_name",
        "original_provider_game_id",
        "store_url",
        mode="before",
    )(_blank_to_none)

    @field_validator(
        "playnite_database_id",
        "original_provider_plugin_id",
        "original_provider_name",
        "entitlement_key",
    )
    @classmethod
    def _reject_blank_ids(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("store_url")
    @classmethod
    def _check_store_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("must be an http or https URL")
        return value


class ImportPayload(PlayniteBaseModel):
    aggregator: Literal["playnite"]
    exported_at: datetime
    plugins: list[PluginPayload] = Field(default_factory=list[PluginPayload])
    games: list[GamePayload]


class LinkPayload(BaseModel):
    """One entry of ``raw.links``; Playnite writes either case for the keys."""

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    url: str | None = None
