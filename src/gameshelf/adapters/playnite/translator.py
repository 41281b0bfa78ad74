"""Validate Playnite exports and translate them into import batches."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from gameshelf.domain.ingest import ImportBatch, IncomingGame, PluginInfo, StoreLink

from .schema import GamePayload, ImportPayload, LinkPayload

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ValidationIssue:
    location: str
    message: str


class ImportValidationError(ValueError):
    """Raised when an export payload violates the schema; carries every violation."""

    def __init__(self, errors: list[ValidationIssue]) -> None:
        summary = "; ".join(f"{issue.location}: {issue.message}" for issue in errors)
        super().__init__(f"Invalid import payload: {summary}")
        self.errors = errors


def parse_import_payload(payload: object) -> ImportBatch:
    """Validate a decoded JSON export and translate it into an ``ImportBatch``."""

    try:
        validated = ImportPayload.model_validate(payload)
    except ValidationError as exc:
        issues = [
            ValidationIssue(
                location=".".join(str(part) for part in error["loc"]) or "<root>",
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        log.warning("Rejected import payload with %d validation errors", len(issues))
        raise ImportValidationError(issues) from exc
    return translate_payload(validated)


def translate_payload(payload: ImportPayload) -> ImportBatch:
    return ImportBatch(
        exported_at=_as_utc(payload.exported_at),
        games=tuple(translate_game(game) for game in payload.games),
        plugins=tuple(PluginInfo(plugin.plugin_id, plugin.name) for plugin in payload.plugins),
    )


def translate_game(game: GamePayload) -> IncomingGame:
    return IncomingGame(
        playnite_database_id=game.playnite_database_id,
        name=game.name,
        original_provider_plugin_id=game.original_provider_plugin_id,
        original_provider_name=game.original_provider_name,
        entitlement_key=game.entitlement_key,
        original_provider_game_id=game.original_provider_game_id,
        is_custom_game=game.is_custom_game,
        hidden=game.hidden,
        installed=game.installed,
        install_directory=game.install_directory,
        last_activity=_as_utc(game.last_activity) if game.last_activity else None,
        playtime_minutes=playtime_minutes(game.playtime_seconds),
        platforms=tuple(game.platforms),
        source_id=game.source_id,
        source_name=game.source_name,
        store_url=game.store_url,
        links=extract_links(game.raw),
        raw=game.raw,
    )


def playtime_minutes(seconds: int | None) -> int | None:
    if not seconds:
        return None
    # half minutes round up
    return int(seconds / 60 + 0.5)


def extract_links(raw: Mapping[str, object] | None) -> tuple[StoreLink, ...]:
    if not raw:
        return ()
    entries = raw.get("links") or raw.get("Links")
    if not isinstance(entries, list):
        return ()

    links: list[StoreLink] = []
    for entry in cast("list[object]", entries):
        if not isinstance(entry, dict):
            continue
        fields = cast("dict[object, object]", entry)
        data = {str(key).lower(): value for key, value in fields.items()}
        try:
            link = LinkPayload.model_validate(data)
        except ValidationError:
            log.debug("Skipping malformed link %r", entry)
            continue
        if link.url:
            links.append(StoreLink(name=link.name or "", url=link.url))
    return tuple(links)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
