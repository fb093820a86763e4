"""Handler for storing new event data from scrapers."""

import logging
from typing import List, Tuple

from .db import db, DuplicateRecordError
from .errors import ValidationFailed
from .scrapers.base import ScrapedEvent
from .stores import event_store, location_store
from .config.data_sources import get_source_display_name

logger = logging.getLogger(__name__)


def _insert_if_new(event: ScrapedEvent) -> bool:
    """
    Check-then-insert one listing in its own transaction.

    Returns:
        bool: True if the event was inserted, False if it was already stored
    """
    try:
        with db.session() as session:
            if event_store.exists_by_external_id_and_source(session, event.external_id, event.external_source):
                return False
            location = location_store.find_or_create(session, event.location)
            event_store.create(session, event.to_model(location))
            return True
    except DuplicateRecordError:
        # A concurrent pass inserted the same listing first
        return False


def process_new_events(events: List[ScrapedEvent], source_id: str) -> Tuple[int, int]:
    """
    Store listings that are not in the database yet, as unapproved events.

    The first stored copy of an (external_id, external_source) pair wins;
    existing events are never updated.

    Args:
        events: Listings fetched from one source
        source_id: Source ID of the events (e.g., 'eventbrite')

    A listing that fails validation is logged and skipped; the rest of the
    batch is still stored.

    Returns:
        Tuple of (new events added, events skipped as duplicates or invalid)

    Raises:
        DatabaseError: If a database operation fails
    """
    if not events:
        logger.info("No events to process")
        return 0, 0

    new_count = 0
    skipped_count = 0
    for event in events:
        try:
            event.validate()
            inserted = _insert_if_new(event)
        except (ValueError, ValidationFailed) as e:
            logger.warning(f"Skipping invalid listing {event.external_id} from {source_id}: {e}")
            skipped_count += 1
            continue

        if inserted:
            new_count += 1
            logger.debug(f"Added new event: {event.name}")
        else:
            skipped_count += 1

    logger.info(
        f"Processed {len(events)} events from {get_source_display_name(source_id)}: "
        f"{new_count} new, {skipped_count} already stored"
    )
    return new_count, skipped_count
