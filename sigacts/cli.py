"""
SIGACTS Command Line Interface (CLI)
====================================

Run the API server, or inspect a dataset without starting it:

    python -m sigacts.cli serve --csv data/IQ_SIGACTs_-_cleaned.csv --port 3000
    python -m sigacts.cli stats
    python -m sigacts.cli incidents 2007-12-05 --type "Enemy Action" --province Baghdad

Defaults for paths, host and port come from the environment (see
`sigacts/config.py`); flags override them.

The CLI never writes to the dataset. It loads it once and answers from memory.
A dataset that cannot be loaded ends the process with exit status 1.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import SigactsConfig
from .engine import IncidentFilters, SigactsEngine
from .errors import DatasetLoadError, SigactsConfigError
from .models import Incident


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="sigacts", description="SIGACTS incident explorer")
    sub = ap.add_subparsers(dest="command", required=True)

    def data_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--csv", help="Path to the SIGACTS CSV export")
        p.add_argument("--boundary", help="Path to the boundary GeoJSON (optional)")

    serve = sub.add_parser("serve", help="Load the dataset and start the HTTP API")
    data_args(serve)
    serve.add_argument("--host", help="Interface to bind")
    serve.add_argument("--port", type=int, help="Port to listen on")

    stats = sub.add_parser("stats", help="Print a summary of the dataset")
    data_args(stats)

    inc = sub.add_parser("incidents", help="List incidents for one date")
    data_args(inc)
    inc.add_argument("date", help="Canonical date, e.g. 2007-12-05")
    inc.add_argument("--type", default=None)
    inc.add_argument("--category", default=None)
    inc.add_argument("--province", default=None)
    inc.add_argument("--limit", type=int, default=20, help="Rows to print (default 20)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the SIGACTS CLI.

    1) Resolve configuration (environment + flags)
    2) Load dataset and build indices
    3) Run the requested command
    """
    args = build_parser().parse_args(argv)
    try:
        config = SigactsConfig.from_env()
    except SigactsConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    csv_path = args.csv or str(config.csv_path)
    boundary_path = args.boundary or str(config.boundary_path)

    print("Loading dataset...")
    engine = SigactsEngine()
    try:
        engine.load(csv_path, boundary_path)
    except DatasetLoadError as e:
        print(f"Error loading data: {e}", file=sys.stderr)
        return 1
    s = engine.summary()
    print(f"Loaded {s.count} incidents.")

    if args.command == "serve":
        from .server import create_app
        host = args.host or config.host
        port = args.port or config.port
        print(f"Server is running on http://{host}:{port}")
        create_app(engine).run(host=host, port=port)
        return 0

    if args.command == "stats":
        print(f"Dataset: {s.dataset_path}")
        print(f"Date range: {s.first_date} to {s.last_date}")
        print(f"Types: {s.types} | Categories: {s.categories} | Provinces: {s.provinces}")
        print(f"Boundary: {'loaded' if s.has_boundary else 'not available'}")
        return 0

    if args.command == "incidents":
        filters = IncidentFilters(type=args.type, category=args.category, province=args.province)
        rows = engine.lookup_incidents(args.date, filters)
        print(f"{len(rows)} incidents on {args.date}. Showing {min(len(rows), args.limit)}:")
        _print_rows(rows[:args.limit])
        return 0

    return 2


def _print_rows(rows: List[Incident]) -> None:
    for e in rows:
        print(f"{e.date} {e.time or '--:--:--'} | {e.type}/{e.category} | {e.province}, {e.city} | ({e.lat}, {e.lng})")


if __name__ == "__main__":
    sys.exit(main())
