#!/usr/bin/env python3
"""Export the stored assertions for a contest as JSON or CSV.

Usage:
    python scripts/export_assertions.py --db assertions.db --contest Mayor \\
        --candidates Alice Bob Chuan --risk-limit 0.05 --format csv -o mayor.csv
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from src.assertions import GetAssertionsRequest, RaireServiceException
from src.config import ServiceConfig
from src.db.repo import Repository
from src.export import GetAssertionsService


def main():
    config = ServiceConfig.from_env()

    parser = argparse.ArgumentParser(description="Export stored assertions for a contest")
    parser.add_argument("--db", type=str, default=config.db_path, help="Database path")
    parser.add_argument("--contest", type=str, required=True, help="Contest name")
    parser.add_argument(
        "--candidates", nargs="+", required=True, help="Candidate names for the contest"
    )
    parser.add_argument(
        "--risk-limit", type=Decimal, default=Decimal("0.05"), help="Risk limit (default: 0.05)"
    )
    parser.add_argument(
        "--format", choices=["json", "csv"], default="json", help="Output format (default: json)"
    )
    parser.add_argument(
        "--output", "-o", type=Path, default=None, help="Output file (default: stdout)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    request = GetAssertionsRequest(
        contest_name=args.contest,
        candidates=args.candidates,
        risk_limit=args.risk_limit,
    )

    repo = Repository(args.db)
    repo.connect(enable_wal=config.enable_wal)
    try:
        service = GetAssertionsService(repo)
        if args.format == "csv":
            content = service.get_csv(request)
        else:
            content = json.dumps(service.get_json(request), indent=2) + "\n"
    except RaireServiceException as e:
        print(f"Error [{e.error_code.value}]: {e.message}", file=sys.stderr)
        sys.exit(1)
    finally:
        repo.close()

    if args.output:
        args.output.write_text(content)
        print(f"Exported {args.contest} to {args.output}")
    else:
        sys.stdout.write(content)


if __name__ == "__main__":
    main()
