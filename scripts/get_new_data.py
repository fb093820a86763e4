#!/usr/bin/env python3
"""Script to fetch and store new events from the external sources."""

import argparse
import logging
import sys
from pathlib import Path

# Add the project root to Python path
sys.path.append(str(Path(__file__).parent.parent))

from cultureradar.config.data_sources import SOURCES
from cultureradar.db import db
from cultureradar.services.ingestion import run_ingestion
from cultureradar.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    """Run one ingestion pass; returns 1 if any source failed."""
    parser = argparse.ArgumentParser(description="Fetch new events from external sources")
    parser.add_argument('sources', nargs='*', choices=list(SOURCES.keys()),
                        help="Source IDs to fetch (default: every enabled source)")
    parser.add_argument('--debug', action='store_true', help="Enable debug logging")
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.debug else None)
    db.ensure_tables_exist()

    report = run_ingestion(args.sources or None)
    for source_id, result in report.sources.items():
        if result.error:
            logger.error(f"{source_id}: failed ({result.error})")
        else:
            logger.info(f"{source_id}: {result.fetched} fetched, {result.new} new, {result.skipped} skipped")

    logger.info(f"Completed all sources. Total: {report.total_new} new, {report.total_skipped} skipped")
    return 1 if report.failed_sources else 0


if __name__ == "__main__":
    sys.exit(main())
