#!/usr/bin/env python3
"""Store a solver result for a contest.

Reads a generation request and the solver's result (both JSON files),
translates the result and replaces whatever was stored for the contest.

Usage:
    python scripts/generate_assertions.py --db assertions.db \\
        --request request.json --result solver_result.json

The request file uses the wire names, e.g.:
    {"contestName": "Mayor", "totalAuditableBallots": 1000,
     "candidates": ["Alice", "Bob", "Chuan"]}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from src.assertions import (
    GenerateAssertionsRequest,
    GenerateAssertionsService,
    RaireServiceException,
    parse_solver_result,
)
from src.config import ServiceConfig
from src.db.repo import Repository


def main():
    config = ServiceConfig.from_env()

    parser = argparse.ArgumentParser(description="Store a solver result for a contest")
    parser.add_argument("--db", type=str, default=config.db_path, help="Database path")
    parser.add_argument("--request", type=Path, required=True, help="Request JSON file")
    parser.add_argument("--result", type=Path, required=True, help="Solver result JSON file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    request = GenerateAssertionsRequest.model_validate_json(args.request.read_text())
    payload = json.loads(args.result.read_text())

    repo = Repository(args.db)
    repo.connect(enable_wal=config.enable_wal)
    try:
        service = GenerateAssertionsService(repo)
        response = service.record_result(request, parse_solver_result(payload))
        count = repo.count_assertions(request.contest_name)
    except RaireServiceException as e:
        print(f"Error [{e.error_code.value}]: {e.message}", file=sys.stderr)
        sys.exit(1)
    finally:
        repo.close()

    print(f"Contest: {response.contest_name}")
    print(f"Winner: {response.winner}")
    print(f"Assertions stored: {count}")


if __name__ == "__main__":
    main()
