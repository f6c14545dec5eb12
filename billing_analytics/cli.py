#!/usr/bin/env python3
"""
Billing Analytics CLI — run join/window queries, export reports, serve the API.

USAGE:
  python -m billing_analytics.cli run                          # Run and print every query
  python -m billing_analytics.cli run rank quartiles           # Selected queries
  python -m billing_analytics.cli run --period month --year 2024 --month 3
  python -m billing_analytics.cli list                         # List available queries

  python -m billing_analytics.cli validate --data-dir ./data   # Load + integrity check only
  python -m billing_analytics.cli seed --output ./data         # Write the sample dataset as CSVs
  python -m billing_analytics.cli report                       # Excel workbook of all queries

  python -m billing_analytics.cli serve --port 8000            # Start API server
"""
from __future__ import annotations

import argparse
import datetime as dt
import os
import sys
from datetime import datetime
from pathlib import Path

from billing_analytics.config import DATA_FOLDER, REPORTS_FOLDER
from billing_analytics.data.schemas import PeriodFilter, PeriodType
from billing_analytics.data.store import DataStore
from billing_analytics.errors import BillingDataError, UnknownQueryError


def _build_period(args) -> PeriodFilter | None:
    """Build a PeriodFilter from CLI args."""
    pt = getattr(args, "period", None)
    if pt is None:
        return None
    return PeriodFilter(
        period_type=PeriodType(pt),
        year=getattr(args, "year", None),
        month=getattr(args, "month", None),
        quarter=getattr(args, "quarter", None),
        start_date=getattr(args, "start", None),
        end_date=getattr(args, "end", None),
    )


def _load_store(args) -> DataStore:
    data_dir = None if getattr(args, "seed", False) else Path(args.data_dir)
    return DataStore().load(data_dir)


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  BILLING ANALYTICS — {title}")
    print("=" * 70)


def cmd_run(args) -> int:
    """Run queries and print them as aligned tables."""
    from billing_analytics.reports.catalog import QUERIES, get_query
    from billing_analytics.reports.text import render_table

    try:
        specs = [get_query(n) for n in args.queries] if args.queries else list(QUERIES.values())
    except UnknownQueryError as exc:
        print(f"  {exc}")
        return 1

    store = _load_store(args)
    period = _build_period(args)
    _banner("QUERY RESULTS")
    print(f"  Source: {store.source}  |  Period: {period.label if period else 'All Time'}"
          f"  |  {store.date_range(period)}")

    for spec in specs:
        print(f"\n{spec.title.upper()}  [{spec.name}]")
        print(f"  {spec.description}\n")
        print(render_table(spec.columns, spec.run(store, period)))

    print()
    return 0


def cmd_list(args) -> int:
    """List the query catalog."""
    from billing_analytics.reports.catalog import QUERIES

    print(f"\nQUERIES ({len(QUERIES)}):\n")
    for i, spec in enumerate(QUERIES.values(), 1):
        print(f"{i:<4}{spec.name:<32}{spec.title}")
    print()
    return 0


def cmd_validate(args) -> int:
    """Load the tables and run integrity checks only."""
    _banner("VALIDATE")
    store = DataStore().load(Path(args.data_dir), use_seed=False)
    for table, count in store.row_counts().items():
        print(f"  {table:<14}{count:>8,} rows")
    print(f"  Warnings: {len(store.warnings)}")
    print("  OK\n")
    return 0


def cmd_seed(args) -> int:
    """Write the embedded sample dataset as CSV files."""
    from billing_analytics.data.loader import write_tables
    from billing_analytics.data.seed import seed_tables

    out = Path(args.output)
    for path in write_tables(seed_tables(), out):
        print(f"   {path}")
    print(f"\nSeed data written to: {out}\n")
    return 0


def cmd_report(args) -> int:
    """Write the Excel workbook with every query."""
    from billing_analytics.reports.workbook import generate_excel

    _banner("WORKBOOK REPORT")
    print(f"  Started: {datetime.now():%Y-%m-%d %H:%M:%S}")
    store = _load_store(args)
    period = _build_period(args)

    if args.output:
        out = Path(args.output)
    else:
        out = REPORTS_FOLDER / f"Billing_Report_{datetime.now():%Y%m%d_%H%M%S}.xlsx"
    path = generate_excel(store, out, period, args.queries or None)
    print(f"\n  Report saved to: {path}")
    print("=" * 70 + "\n")
    return 0


def cmd_serve(args) -> int:
    """Start the API server."""
    import uvicorn
    os.environ["BILLING_DATA_DIR"] = str(Path(args.data_dir).resolve())
    print(f"\nStarting Billing Analytics API on port {args.port}...")
    uvicorn.run("billing_analytics.main:app", host="0.0.0.0", port=args.port, reload=args.reload)
    return 0


def _add_data_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--data-dir", default=str(DATA_FOLDER), help=f"CSV folder (default {DATA_FOLDER})")
    p.add_argument("--seed", action="store_true", help="Ignore CSVs and use the embedded sample data")


def _add_period_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--period", choices=[t.value for t in PeriodType], help="Period type")
    p.add_argument("--year", type=int, help="Year")
    p.add_argument("--month", type=int, choices=range(1, 13), metavar="1-12", help="Month (1-12)")
    p.add_argument("--quarter", type=int, choices=range(1, 5), metavar="1-4", help="Quarter (1-4)")
    p.add_argument("--start", type=dt.date.fromisoformat, help="Custom period start (YYYY-MM-DD)")
    p.add_argument("--end", type=dt.date.fromisoformat, help="Custom period end (YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="billing-analytics",
        description="Billing Analytics — SQL-style joins and window functions over telecom billing data",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # run subcommand
    run_parser = subparsers.add_parser("run", help="Run queries and print the results")
    run_parser.add_argument("queries", nargs="*", help="Query name(s); all when omitted")
    _add_data_args(run_parser)
    _add_period_args(run_parser)
    run_parser.set_defaults(func=cmd_run)

    # list subcommand
    list_parser = subparsers.add_parser("list", help="List available queries")
    list_parser.set_defaults(func=cmd_list)

    # validate subcommand
    validate_parser = subparsers.add_parser("validate", help="Load CSVs and check integrity")
    validate_parser.add_argument("--data-dir", default=str(DATA_FOLDER), help="CSV folder")
    validate_parser.set_defaults(func=cmd_validate)

    # seed subcommand
    seed_parser = subparsers.add_parser("seed", help="Write the sample dataset as CSVs")
    seed_parser.add_argument("--output", default=str(DATA_FOLDER), help="Output folder")
    seed_parser.set_defaults(func=cmd_seed)

    # report subcommand
    report_parser = subparsers.add_parser("report", help="Generate the Excel workbook")
    report_parser.add_argument("queries", nargs="*", help="Query name(s); all when omitted")
    report_parser.add_argument("--output", help="Output .xlsx path")
    _add_data_args(report_parser)
    _add_period_args(report_parser)
    report_parser.set_defaults(func=cmd_report)

    # serve subcommand
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.add_argument("--data-dir", default=str(DATA_FOLDER), help="CSV folder")
    serve_parser.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except (BillingDataError, UnknownQueryError, FileNotFoundError, ValueError) as exc:
        print(f"\n  ERROR: {exc}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
