"""One ingestion pass over the external event sources."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..new_event_handler import process_new_events
from ..source_manager import SourceManager

logger = logging.getLogger(__name__)


@dataclass
class SourceResult:
    fetched: int = 0
    new: int = 0
    skipped: int = 0
    error: Optional[str] = None


@dataclass
class IngestionReport:
    """Per-source outcome of an ingestion pass."""
    sources: Dict[str, SourceResult] = field(default_factory=dict)

    @property
    def total_new(self) -> int:
        return sum(result.new for result in self.sources.values())

    @property
    def total_skipped(self) -> int:
        return sum(result.skipped for result in self.sources.values())

    @property
    def failed_sources(self) -> List[str]:
        return [source_id for source_id, result in self.sources.items() if result.error]


def run_ingestion(source_ids: Optional[List[str]] = None) -> IngestionReport:
    """
    Fetch every enabled (or requested) source and store the new listings.

    A source that fails is logged and recorded in the report; the other
    sources still run.

    Raises:
        ValueError: If a requested source ID is not registered
    """
    sources = SourceManager.get_sources(source_ids)
    report = IngestionReport()

    if not sources:
        logger.info("No enabled sources to ingest")
        return report

    logger.info(f"Starting ingestion for {len(sources)} source(s): {', '.join(sources)}")
    for source_id, registration in sources.items():
        result = SourceResult()
        report.sources[source_id] = result
        try:
            events = SourceManager.fetch_events(source_id, registration)
            result.fetched = len(events)
            result.new, result.skipped = process_new_events(events, source_id)
        except Exception as e:
            logger.exception(f"Ingestion failed for source {source_id}")
            result.error = str(e)

    logger.info(
        f"Ingestion finished: {report.total_new} new, {report.total_skipped} skipped, "
        f"{len(report.failed_sources)} failed source(s)"
    )
    return report
