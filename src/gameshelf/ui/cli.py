# ruff: noqa: T201

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from gameshelf.adapters.playnite import ImportValidationError
from gameshelf.app import (
    create_account,
    enrich_title,
    import_playnite_export,
    list_review_queue,
    merge,
    resync_metadata,
    search_metadata,
)
from gameshelf.config import configure_logging
from gameshelf.domain.merge import ReleaseDetails
from gameshelf.domain.model import GameType, MergeKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

_MERGE_KINDS = {
    "titles": MergeKind.TITLE,
    "releases": MergeKind.RELEASE,
    "title-as-release": MergeKind.AS_RELEASE,
}


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Import and curate a game library")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    subparsers = parser.add_subparsers(dest="command", required=True)

    account = subparsers.add_parser("account", help="Aggregator account management")
    account_sub = account.add_subparsers(dest="account_command", required=True)
    account_create = account_sub.add_parser(
        "create", help="Link a Playnite account and register a device"
    )
    account_create.add_argument("--owner-id", type=str, required=True, help="Owning user id")
    account_create.add_argument(
        "--name", type=str, required=True, help="Account name as shown in Playnite"
    )
    account_create.add_argument(
        "--device-name",
        type=str,
        help="Name of the device that pushes exports (defaults to the account name)",
    )

    library_import = subparsers.add_parser("import", help="Import a Playnite library export")
    library_import.add_argument("file", type=Path, help="Path to the JSON export")
    library_import.add_argument("--device-id", type=str, required=True, help="Connector device id")
    library_import.add_argument("--owner-id", type=str, required=True, help="Owning user id")

    enrich = subparsers.add_parser("enrich", help="Fetch metadata for one game title")
    enrich.add_argument("--title-id", type=str, required=True, help="Game title id")
    enrich.add_argument("--provider", type=str, help="Metadata provider id, e.g. steam")
    enrich.add_argument(
        "--external-id",
        type=str,
        help="Game id at the provider (searches by name when omitted)",
    )
    enrich.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing values instead of only filling gaps",
    )

    resync = subparsers.add_parser("resync", help="Refresh metadata for every title")
    resync.add_argument("--owner-id", type=str, required=True, help="Owning user id")

    search = subparsers.add_parser("search", help="Search metadata providers for candidates")
    search.add_argument("query", type=str, help="Game name to search for")
    search.add_argument(
        "--game-type",
        choices=[game_type.value for game_type in GameType],
        help="Restrict the search to providers for this kind of game",
    )
    search.add_argument(
        "--limit", type=int, help="Maximum number of candidates (defaults to config)"
    )

    merge_parser = subparsers.add_parser("merge", help="Merge duplicate catalog entries")
    merge_parser.add_argument("kind", choices=sorted(_MERGE_KINDS), help="What to merge")
    merge_parser.add_argument("source", type=str, help="Id of the entry that goes away")
    merge_parser.add_argument("target", type=str, help="Id of the entry that is kept")
    merge_parser.add_argument("--platform", type=str, help="Platform of the new release")
    merge_parser.add_argument("--edition", type=str, help="Edition of the new release")
    merge_parser.add_argument("--region", type=str, help="Region of the new release")
    merge_parser.add_argument("--release-date", type=str, help="Release date of the new release")

    review = subparsers.add_parser("review", help="List games waiting for manual mapping")
    review.add_argument("--owner-id", type=str, required=True, help="Owning user id")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _read_export(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Export {path} is not valid JSON: {exc}") from exc


def _release_details(args: argparse.Namespace) -> ReleaseDetails | None:
    if args.kind != "title-as-release":
        return None
    if not args.platform:
        raise ValueError("--platform is required for title-as-release merges")
    return ReleaseDetails(
        platform=args.platform,
        edition=args.edition,
        region=args.region,
        release_date=args.release_date,
    )


def _run(args: argparse.Namespace) -> None:  # noqa: C901
    if args.command == "account" and args.account_command == "create":
        account, device = create_account(
            owner_id=_parse_uuid(args.owner_id),
            account_name=args.name,
            device_name=args.device_name,
        )
        print(json.dumps({"accountId": str(account.id), "deviceId": str(device.id)}))
    elif args.command == "import":
        result = import_playnite_export(
            _read_export(args.file),
            device_id=_parse_uuid(args.device_id),
            owner_id=_parse_uuid(args.owner_id),
        )
        print(json.dumps(result.to_payload(), indent=2))
    elif args.command == "enrich":
        enrichment = enrich_title(
            _parse_uuid(args.title_id),
            provider_id=args.provider,
            provider_external_id=args.external_id,
            force=args.force,
        )
        print(enrichment.message)
    elif args.command == "resync":
        job = resync_metadata(_parse_uuid(args.owner_id))
        log.info(
            "Metadata resync %s finished: status=%s, processed=%s, updated=%s",
            job.id,
            job.status,
            job.entries_processed,
            job.entries_updated,
        )
    elif args.command == "search":
        game_type = GameType(args.game_type) if args.game_type else None
        for candidate in search_metadata(args.query, game_type=game_type, limit=args.limit):
            print(f"{candidate.provider_id}\t{candidate.external_id}\t{candidate.name}")
    elif args.command == "merge":
        outcome = merge(
            _MERGE_KINDS[args.kind],
            _parse_uuid(args.source),
            _parse_uuid(args.target),
            details=_release_details(args),
        )
        log.info("Merge finished: kind=%s, moved=%s", outcome.kind, outcome.moved)
    elif args.command == "review":
        for mapping in list_review_queue(_parse_uuid(args.owner_id)):
            print(f"{mapping.provider}\t{mapping.external_game_id}\t{mapping.external_game_name}")
    else:
        raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        configure_logging(verbose=parsed_args.verbose)
        _run(parsed_args)
    except ImportValidationError as exc:
        for issue in exc.errors:
            log.error("Invalid export at %s: %s", issue.location, issue.message)  # noqa: TRY400
        sys.exit(2)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
