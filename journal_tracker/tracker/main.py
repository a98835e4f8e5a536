"""CLI entrypoint for tracker commands."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from journal_tracker.reconcile.export import status_label, write_csv
from journal_tracker.reconcile.filters import JournalFilter
from journal_tracker.reconcile.merge import MERGE_MODE, REPLACE_MODE
from journal_tracker.shared.config import load_config
from journal_tracker.shared.errors import (
    CatalogUnavailableError,
    InputError,
    PersistenceError,
)
from journal_tracker.tracker.service import TrackerService, build_service


def build_parser() -> argparse.ArgumentParser:
    """
    Build CLI parser.

    Returns:
        Argument parser.
    """
    parser = argparse.ArgumentParser(
        description="Track journal title changes against the Third Iron catalog"
    )
    parser.add_argument(
        "--config",
        type=str,
        default="",
        help="Path to a JSON config file. Defaults to $JOURNAL_TRACKER_CONFIG.",
    )
    parser.add_argument(
        "--verbose",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Enable debug logging.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    ingest = commands.add_parser("ingest", help="Merge a spreadsheet of journals.")
    ingest.add_argument("file", type=str, help="Excel or CSV file with Title and ISSN.")
    ingest.add_argument(
        "--replace",
        action="store_true",
        help="Replace the master list instead of merging into it.",
    )

    commands.add_parser("refresh", help="Re-check tracked titles in the catalog.")

    lookup = commands.add_parser("lookup", help="Look up ISSNs in the catalog.")
    lookup.add_argument("issns", nargs="+", help="ISSNs, with or without hyphens.")

    listing = commands.add_parser("list", help="Print tracked journals.")
    listing.add_argument("--search", type=str, default="", help="ISSN or title text.")
    listing.add_argument(
        "--changed-only", action="store_true", help="Only show updated titles."
    )

    export = commands.add_parser("export", help="Export tracked journals as CSV.")
    export.add_argument(
        "--changed-only", action="store_true", help="Only export updated titles."
    )
    export.add_argument(
        "--output",
        type=str,
        default="all_journals.csv",
        help="Output CSV path.",
    )
    return parser


async def run_command(args: argparse.Namespace, service: TrackerService) -> int:
    """
    Execute one CLI command.

    Args:
        args: Parsed CLI arguments.
        service: Tracker service.

    Returns:
        Process exit code.
    """
    if args.command == "ingest":
        mode = REPLACE_MODE if args.replace else MERGE_MODE
        result = await service.ingest_file(Path(args.file), mode)
        print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
        return 0

    if args.command == "refresh":
        outcome = await service.refresh()
        print(json.dumps(outcome.to_dict(), ensure_ascii=False, indent=2))
        return 0

    if args.command == "lookup":
        issns, items = await service.lookup_catalog(args.issns)
        print(
            json.dumps(
                {"issns": issns, "items": items}, ensure_ascii=False, indent=2
            )
        )
        return 0

    if args.command == "list":
        records, summary = await service.query(
            JournalFilter(query=args.search or None, changed_only=args.changed_only)
        )
        for record in records:
            previous = record.previous_title or "-"
            print(f"{record.issn}\t{record.title}\t{previous}\t{status_label(record)}")
        print(
            f"Total: {summary.total} | Updated: {summary.updated_count} | "
            f"Unchanged: {summary.unchanged_count}"
        )
        return 0

    if args.command == "export":
        records = await service.list_all()
        path = write_csv(Path(args.output), records, args.changed_only)
        print(f"Exported CSV to {path}")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


async def _run(args: argparse.Namespace) -> int:
    config = load_config(Path(args.config) if args.config else None)
    service = build_service(config)
    try:
        return await run_command(args, service)
    except (InputError, PersistenceError, CatalogUnavailableError) as exc:
        print(f"Error: {exc}")
        if isinstance(exc, PersistenceError) and exc.partial:
            print(
                f"Warning: {exc.committed_chunks} chunk(s) were committed before "
                "the failure; the store may be partially updated."
            )
        return 1
    finally:
        await service.aclose()


def main() -> None:
    """
    Parse CLI arguments and run the selected command.

    Returns:
        None.
    """
    parser = build_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    raise SystemExit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
