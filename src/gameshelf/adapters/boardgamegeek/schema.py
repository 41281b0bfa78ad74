"""BoardGameGeek XML API2 documents parsed into pydantic models."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import ClassVar

from pydantic import Field

from gameshelf.adapters.provider_http import ProviderBaseModel


class BggBaseModel(ProviderBaseModel):
    _provider_label: ClassVar[str] = "BoardGameGeek"
    _logged_extra_keys: ClassVar[set[str]] = set()


class BggSearchItem(BggBaseModel):
    id: str
    name: str
    item_type: str | None = None
    year_published: str | None = None


class BggThing(BggBaseModel):
    id: str
    name: str
    item_type: str | None = None
    description: str | None = None
    year_published: str | None = None
    min_players: int | None = None
    max_players: int | None = None
    image: str | None = None
    thumbnail: str | None = None
    categories: list[str] = Field(default_factory=list[str])


def parse_search(document: str) -> list[BggSearchItem]:
    root = ET.fromstring(document)
    items: list[BggSearchItem] = []
    for item in root.iter("item"):
        item_id = item.get("id")
        name = _primary_name(item)
        if not item_id or name is None:
            continue
        items.append(
            BggSearchItem.model_validate(
                {
                    "id": item_id,
                    "name": name,
                    "item_type": item.get("type"),
                    "year_published": _value(item, "yearpublished"),
                }
            )
        )
    return items


def parse_thing(document: str, thing_id: str) -> BggThing | None:
    root = ET.fromstring(document)
    for item in root.iter("item"):
        if item.get("id") != thing_id:
            continue
        return BggThing.model_validate(
            {
                "id": thing_id,
                "name": _primary_name(item) or f"BoardGame {thing_id}",
                "item_type": item.get("type"),
                "description": _text(item, "description"),
                "year_published": _value(item, "yearpublished"),
                "min_players": _int_value(item, "minplayers"),
                "max_players": _int_value(item, "maxplayers"),
                "image": _text(item, "image"),
                "thumbnail": _text(item, "thumbnail"),
                "categories": [
                    link.get("value", "")
                    for link in item.iter("link")
                    if link.get("type") == "boardgamecategory" and link.get("value")
                ],
            }
        )
    return None


def _primary_name(item: ET.Element) -> str | None:
    names = item.findall("name")
    for name in names:
        if name.get("type") == "primary" and name.get("value"):
            return name.get("value")
    # search results for expansions sometimes only carry an alternate name
    for name in names:
        if name.get("value"):
            return name.get("value")
    return None


def _value(item: ET.Element, tag: str) -> str | None:
    node = item.find(tag)
    if node is None:
        return None
    return node.get("value") or None


def _int_value(item: ET.Element, tag: str) -> int | None:
    value = _value(item, tag)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _text(item: ET.Element, tag: str) -> str | None:
    node = item.find(tag)
    if node is None or node.text is None:
        return None
    return node.text.strip() or None
