#!/usr/bin/env python3
"""Database maintenance CLI for the Portfolio Tracker.

Creates the schema and default reference data, and optionally seeds the demo
position set, clears cached price history, loads a positions file into the
active set, or loads an FX rates file.

Usage::

    python scripts/init_db.py                          # schema + defaults, demo if fresh
    python scripts/init_db.py --no-demo                # schema + defaults only
    python scripts/init_db.py --clear-cache            # also delete prices and FX rates
    python scripts/init_db.py --import-file data/positions.json
    python scripts/init_db.py --import-fx-file data/fxRates.json
"""

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path so ``src.*`` imports work when this
# script is invoked directly (e.g. ``python scripts/init_db.py``).
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from src.core.database import close_db_connection
from src.core.exceptions import PortfolioError
from src.portfolio.demo_data import clear_cached_data, initialize_database_on_startup
from src.portfolio.fx_rates import import_fx_rates_file
from src.portfolio.positions_admin import import_positions_from_file


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Parsed namespace with ``no_demo``, ``clear_cache``, ``import_file``
        and ``import_fx_file``.
    """
    parser = argparse.ArgumentParser(
        description="Initialize the portfolio tracker database.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python scripts/init_db.py\n"
            "  python scripts/init_db.py --no-demo\n"
            "  python scripts/init_db.py --clear-cache\n"
            "  python scripts/init_db.py --import-file data/positions.json\n"
            "  python scripts/init_db.py --import-fx-file data/fxRates.json\n"
        ),
    )
    parser.add_argument(
        "--no-demo",
        action="store_true",
        default=False,
        help="Do not seed the demo position set on a fresh database",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        default=False,
        help="Delete stored historical prices and FX rates",
    )
    parser.add_argument(
        "--import-file",
        type=Path,
        default=None,
        help="Replace the active set's positions with this JSON file",
    )
    parser.add_argument(
        "--import-fx-file",
        type=Path,
        default=None,
        help="Load every pair in this FX rates JSON file into the database",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Entry point for the database CLI.

    Returns:
        Exit code: 0 on success, 1 on failure.
    """
    args = parse_args(argv)
    try:
        seeded = initialize_database_on_startup(seed_demo_data=not args.no_demo)
        print("Database ready" + (" (demo data seeded)" if seeded else ""))

        if args.clear_cache:
            clear_cached_data()
            print("Cleared historical prices and FX rates")

        if args.import_file is not None:
            result = import_positions_from_file(args.import_file)
            print(f"Imported {result['count']} positions from {args.import_file}")

        if args.import_fx_file is not None:
            count = import_fx_rates_file(args.import_fx_file)
            print(f"Imported {count} FX rates from {args.import_fx_file}")
    except (PortfolioError, FileNotFoundError) as exc:
        print(f"\nInitialization failed: {exc}", file=sys.stderr)
        return 1
    finally:
        close_db_connection()
    return 0


if __name__ == "__main__":
    sys.exit(main())
