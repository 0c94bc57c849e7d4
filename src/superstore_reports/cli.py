"""Command-line interface for running the Superstore reports.

Provides subcommands: `list` and `run`. Each command is implemented as a
`cmd_*` function that accepts an argparse namespace and returns an exit code.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from dotenv import load_dotenv

from superstore_reports.aggregate.formatting import format_report
from superstore_reports.config import get_settings
from superstore_reports.engine import REPORTS, REPORTS_BY_NAME, AggregationEngine, currency_columns_for
from superstore_reports.ingest.load_orders import OrderLoadError, load_orders_csv
from superstore_reports.logging_config import configure_logging

log = logging.getLogger(__name__)


# --------------------------------------------------
# LIST
# --------------------------------------------------
def cmd_list(_: argparse.Namespace, out: TextIO | None = None) -> int:
    """Print every report name with its title."""
    out = out or sys.stdout
    width = max(len(d.name) for d in REPORTS)
    for i, d in enumerate(REPORTS, start=1):
        out.write(f"{i:>2}. {d.name:<{width}}  {d.title}\n")
    return 0


# --------------------------------------------------
# RUN
# --------------------------------------------------
def cmd_run(args: argparse.Namespace, out: TextIO | None = None) -> int:
    """Load the orders CSV, run the selected reports and print them.

    Args:
        args: argparse namespace with `csv`, `report` and `lenient`.
    """
    out = out or sys.stdout
    s = get_settings()
    csv_path = Path(args.csv) if args.csv else s.orders_csv

    if not csv_path.exists():
        log.error("Orders file not found: %s", csv_path)
        return 1

    try:
        orders = load_orders_csv(csv_path, encoding=s.csv_encoding, strict=not args.lenient)
    except OrderLoadError as e:
        log.error("Could not load orders: %s", e)
        return 1

    engine = AggregationEngine(
        orders,
        profit_threshold=s.profit_threshold,
        high_volume_min_orders=s.high_volume_min_orders,
    )

    for name, df in engine.run_all(args.report).items():
        shown = format_report(df, currency_columns_for(name, df), s.currency_symbol)
        out.write(f"\n== {REPORTS_BY_NAME[name].title} ==\n")
        if shown.empty:
            out.write("(no rows)\n")
        else:
            out.write(shown.to_string(index=False, na_rep=""))
            out.write("\n")

    log.info("Printed %d reports.", len(args.report or REPORTS))
    return 0


# --------------------------------------------------
# CLI
# --------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    """Build and return the top-level argument parser for the CLI.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    p = argparse.ArgumentParser(prog="superstore-reports")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list")

    p_run = sub.add_parser("run")
    p_run.add_argument("--csv", default=None, help="Superstore CSV (defaults to SUPERSTORE_CSV)")
    p_run.add_argument(
        "--report",
        action="append",
        choices=[d.name for d in REPORTS],
        default=None,
        help="Report to run; repeat for several. Defaults to all.",
    )
    p_run.add_argument("--lenient", action="store_true", help="Drop malformed rows instead of failing")

    return p


def main(argv: list[str] | None = None) -> int:
    """CLI entry point: parse args, configure logging and dispatch commands."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_path)

    if args.cmd == "list":
        return cmd_list(args)
    if args.cmd == "run":
        return cmd_run(args)
    raise SystemExit(2)


if __name__ == "__main__":
    sys.exit(main())
