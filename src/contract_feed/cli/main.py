"""Main CLI entry point."""

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from contract_feed.errors import ContractFeedError

SOURCES = ["federal", "ny", "il"]
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _add_store_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        metavar="DB_PATH",
        help="Path to SQLite database (default: $CONTRACT_FEED_DB or config file)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (database, sources, fetch sections)",
    )


def main(argv: Optional[list[str]] = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(prog="contract-feed", description="Government contract opportunity feed")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Logging level (default: settings log_level, INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ingest
    ingest_parser = subparsers.add_parser("ingest", help="Fetch, normalize and store contracts from a source")
    which = ingest_parser.add_mutually_exclusive_group(required=True)
    which.add_argument("--source", choices=SOURCES, help="Source to ingest from")
    which.add_argument("--all", action="store_true", help="Ingest every source in turn")
    _add_store_args(ingest_parser)
    ingest_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write run report JSON to file (default: stdout)",
    )

    # contracts
    contracts_parser = subparsers.add_parser("contracts", help="Query stored contracts")
    contracts_parser.add_argument("action", choices=["list", "count"], help="List contracts or show count")
    _add_store_args(contracts_parser)
    contracts_parser.add_argument("--category", type=str, default=None, help="NAICS code")
    contracts_parser.add_argument("--value-min", type=float, default=None, help="Minimum award amount")
    contracts_parser.add_argument("--set-aside", type=str, default=None, help="Set-aside code, e.g. SBA")
    contracts_parser.add_argument(
        "--date-from",
        type=str,
        default=None,
        help="Only contracts posted on/after this date (YYYY-MM-DD)",
    )
    contracts_parser.add_argument("--search", type=str, default=None, help="Text in title or description")
    contracts_parser.add_argument("--state", type=str, default=None, help="Place-of-performance state code")
    contracts_parser.add_argument("--source", choices=SOURCES, default=None, help="Only contracts from this source")
    contracts_parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    contracts_parser.add_argument("--page-size", type=int, default=50, help="Results per page, max 100 (default: 50)")

    # runs
    runs_parser = subparsers.add_parser("runs", help="Show recent ingestion runs")
    _add_store_args(runs_parser)
    runs_parser.add_argument("--source", choices=SOURCES, default=None, help="Only runs for this source")
    runs_parser.add_argument("--limit", type=int, default=10, help="Number of runs (default: 10)")

    args = parser.parse_args(argv)

    try:
        if args.command == "ingest":
            _run_ingest(args)
        elif args.command == "contracts":
            _run_contracts(args)
        elif args.command == "runs":
            _run_runs(args)
        else:
            parser.print_help()
    except ContractFeedError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)


def _load_settings(args: argparse.Namespace):
    """Settings from --config or the environment, with --db taking precedence. Also configures logging."""
    from contract_feed.config import Settings

    settings = Settings.from_yaml(args.config) if args.config else Settings.from_env()
    if args.db is not None:
        settings = settings.model_copy(update={"database_path": args.db})

    level = (args.log_level or settings.log_level).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    return settings


def _open_store(settings):
    from contract_feed.store import ContractStore

    return ContractStore(settings.require_database())


def _run_ingest(args: argparse.Namespace) -> None:
    """Run ingest command. Exits 1 when any source fails."""
    from contract_feed.pipeline import run_all, run_ingestion

    settings = _load_settings(args)
    with _open_store(settings) as store:
        if args.all:
            reports = run_all(store=store, settings=settings)
            output = json.dumps(
                {tag: r.model_dump(mode="json") for tag, r in reports.items()},
                indent=2,
            )
            failed = [tag for tag, r in reports.items() if not r.success]
        else:
            report = run_ingestion(args.source, store=store, settings=settings)
            output = report.model_dump_json(indent=2)
            failed = [] if report.success else [args.source]

    if args.output:
        args.output.write_text(output, encoding="utf-8")
        print(f"Wrote run report to {args.output}")
    else:
        print(output)

    if failed:
        print(f"Ingestion failed for: {', '.join(failed)}", file=sys.stderr)
        raise SystemExit(1)


def _run_contracts(args: argparse.Namespace) -> None:
    """Run contracts command."""
    from pydantic import ValidationError

    from contract_feed.query import ContractQuery

    date_from = None
    if args.date_from:
        try:
            date_from = datetime.strptime(args.date_from, "%Y-%m-%d").replace(tzinfo=timezone.utc)
        except ValueError:
            raise SystemExit("Invalid --date-from format. Use YYYY-MM-DD.")

    try:
        query = ContractQuery(
            category=args.category,
            value_min=args.value_min,
            set_aside=args.set_aside,
            date_from=date_from,
            search=args.search,
            state=args.state,
            source=args.source,
            page=args.page,
            page_size=args.page_size,
        )
    except ValidationError as e:
        raise SystemExit(f"Invalid query: {e.errors()[0]['loc'][0]}: {e.errors()[0]['msg']}")

    settings = _load_settings(args)
    with _open_store(settings) as store:
        if args.action == "count":
            print(store.count(query))
            return
        page = store.find(query)

    output = json.dumps(
        {
            "total": page.total,
            "page": page.page,
            "page_size": page.page_size,
            "pages": page.pages,
            "items": [c.model_dump(mode="json") for c in page.items],
        },
        indent=2,
    )
    print(output)


def _run_runs(args: argparse.Namespace) -> None:
    """Run runs command."""
    settings = _load_settings(args)
    with _open_store(settings) as store:
        runs = store.recent_runs(source=args.source, limit=args.limit)
    if not runs:
        print("No runs recorded.")
        return
    for run in runs:
        finished = run.finished_at.isoformat() if run.finished_at else "-"
        print(
            f"  #{run.id} [{run.status}] {run.source} started {run.started_at.isoformat()} finished {finished}: "
            f"{run.total_fetched} fetched, {run.total_upserted} new, {run.total_modified} modified, {run.pages} page(s)"
        )


if __name__ == "__main__":
    main()
