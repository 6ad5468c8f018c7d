"""
Ingest a local sales workbook from CLI and print the resulting analytics.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from app.parsers.spreadsheet_reader import SpreadsheetReadError, read_spreadsheet_rows
from app.repositories.sales_record_store import SalesRecordStore
from app.services.batch_writer import NoValidRowsError
from app.services.sales_ingestion_service import build_sales_ingestion_service


def main() -> int:
    parser = argparse.ArgumentParser(description="Ingest a sales workbook and report analytics.")
    parser.add_argument("path", type=Path, help="Path to an .xlsx, .xls, .ods or .csv file.")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="WARNING",
        help="Root log level (default: WARNING).",
    )
    args = parser.parse_args()
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = build_sales_ingestion_service(SalesRecordStore())
    try:
        rows = read_spreadsheet_rows(args.path.read_bytes(), filename=args.path.name)
        result = service.ingest(rows)
    except (OSError, SpreadsheetReadError, NoValidRowsError) as exc:
        print(json.dumps({"error": str(exc), "count": 0}, indent=2))
        return 1

    summary = service.get_analytics()
    payload = {
        "inserted_count": result.inserted_count,
        "rows_received": result.rows_received,
        "rows_skipped": result.rows_skipped,
        "rows_rejected": result.rows_rejected,
        "geocode_failures": result.geocode_failures,
        "analytics": {
            "total_markets": summary.total_markets,
            "total_sales_2024": summary.total_sales_2024,
            "avg_growth_rate": round(summary.avg_growth_rate, 1),
            "market_penetration": round(summary.market_penetration, 1),
            "active_markets": summary.active_markets,
            "growth_markets": summary.growth_markets,
            "emerging_markets": summary.emerging_markets,
        },
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
