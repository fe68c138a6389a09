#!/usr/bin/env python3
# =============================================================================
# scripts/detect_missing_info.py - Run the Missing-Info Audit
# =============================================================================
# Runs the detect-missing-info tool against DATABASE_URL and prints the JSON
# result, or writes the records to a CSV file.
#
# Usage:
#   python scripts/detect_missing_info.py
#   python scripts/detect_missing_info.py --priority Critical --limit 20
#   python scripts/detect_missing_info.py --no-recovery --csv missing.csv
# =============================================================================

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from agents.tools import ToolContext, run_tool
from app.config import settings
from core.models.report import MissingInfoReport, Priority
from lib.query_executor import SQLAlchemyQueryExecutor, create_database_engine
from lib.report_export import records_to_csv


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Find candidates with missing contact information")
    parser.add_argument("--limit", type=int, default=settings.DETECT_DEFAULT_LIMIT,
                        help="Max records in the detail report")
    parser.add_argument("--priority", choices=[p.value for p in Priority],
                        help="Only report records of this priority")
    parser.add_argument("--no-recovery", action="store_true",
                        help="Skip the related-table recovery lookup")
    parser.add_argument("--csv", type=Path, help="Write records to this CSV file")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    engine = create_database_engine(settings.DATABASE_URL, settings.DATABASE_CONNECT_TIMEOUT)
    context = ToolContext(executor=SQLAlchemyQueryExecutor(engine, schema=settings.database_schema))

    arguments = {
        "includeRecoveryAnalysis": not args.no_recovery,
        "limitResults": args.limit,
    }
    if args.priority:
        arguments["priorityFilter"] = args.priority

    try:
        result = run_tool("detect-missing-info", arguments, context)
    finally:
        engine.dispose()

    if not result.get("success"):
        print(f"ERROR [{result['error']}]: {result['message']}", file=sys.stderr)
        if result.get("suggestion"):
            print(f"  Suggestion: {result['suggestion']}", file=sys.stderr)
        return 1

    if args.csv:
        report = MissingInfoReport.model_validate(result)
        args.csv.write_text(records_to_csv(report.missing_info_report), encoding="utf-8")
        print(report.message)
        print(f"Wrote {len(report.missing_info_report)} records to {args.csv}")
    else:
        print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
