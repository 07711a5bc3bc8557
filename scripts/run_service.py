#!/usr/bin/env python3
"""Run the assertion service HTTP server.

Usage:
    python scripts/run_service.py --db assertions.db --port 5000
    python scripts/run_service.py --solver mypackage.raire:solve

Settings not given on the command line come from RAIRE_* environment
variables (a .env file is loaded first), then from built-in defaults.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from src.config import ServiceConfig


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def load_solver(target: str):
    """Import a solver callable given as "module.path:function"."""
    module_name, _, attr = target.partition(":")
    if not attr:
        raise ValueError(f"Solver must be given as module:function, got {target!r}")
    module = importlib.import_module(module_name)
    return getattr(module, attr)


def main():
    config = ServiceConfig.from_env()

    parser = argparse.ArgumentParser(description="Run the assertion service")
    parser.add_argument(
        "--db",
        type=str,
        default=config.db_path,
        help=f"Path to the SQLite database file (default: {config.db_path})",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=config.host,
        help=f"Host to bind to (default: {config.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.port,
        help=f"Port to run the server on (default: {config.port})",
    )
    parser.add_argument(
        "--solver",
        type=str,
        default=None,
        help="Solver callable as module:function; without it generation requests fail",
    )
    parser.add_argument(
        "--no-wal",
        action="store_true",
        help="Disable SQLite WAL mode",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with auto-reload",
    )

    args = parser.parse_args()
    setup_logging("DEBUG" if args.debug else config.log_level)

    solver = load_solver(args.solver) if args.solver else None

    from src.web.app import init_app

    app = init_app(args.db, solver=solver, enable_wal=config.enable_wal and not args.no_wal)

    print(f"Starting assertion service for database: {args.db}")
    print(f"Server running at http://{args.host}:{args.port}")
    print("Press Ctrl+C to stop")

    app.run(
        host=args.host,
        port=args.port,
        debug=args.debug,
    )


if __name__ == "__main__":
    main()
