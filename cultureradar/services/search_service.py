"""Public event search.

Wraps the event store with the public contract: paging defaults and caps,
default ordering, the "upcoming" projection and optional distance from a
caller-supplied coordinate. Only approved events are public.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from ..config.search import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_DIRECTION,
    DEFAULT_SORT_FIELD,
    MAX_PAGE_SIZE,
    UPCOMING_PAGE_SIZE,
    UPCOMING_WINDOW_DAYS,
)
from ..db import db
from ..errors import ValidationFailed
from ..models import Event, EventCategory
from ..stores import Page, event_store
from ..utils.geo import haversine_km
from ..utils.timezone import now_local

logger = logging.getLogger(__name__)


@dataclass
class SearchCriteria:
    """Filters and paging for a public search; every filter is optional."""
    city: Optional[str] = None
    is_free: Optional[bool] = None
    category: Optional[EventCategory] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    page: Optional[int] = 0
    size: Optional[int] = DEFAULT_PAGE_SIZE
    sort_by: Optional[str] = DEFAULT_SORT_FIELD
    direction: Optional[str] = DEFAULT_SORT_DIRECTION


def normalize_paging(page: Optional[int], size: Optional[int]) -> Tuple[int, int]:
    """Negative or missing page -> 0; missing or non-positive size -> default; size capped."""
    page = page if page is not None and page >= 0 else 0
    if size is None or size <= 0:
        size = DEFAULT_PAGE_SIZE
    return page, min(size, MAX_PAGE_SIZE)


def normalize_direction(direction: Optional[str]) -> str:
    return 'desc' if (direction or '').strip().lower() == 'desc' else 'asc'


def check_coordinate(latitude: Optional[float], longitude: Optional[float]) -> Optional[Tuple[float, float]]:
    """Validate an optional caller coordinate; both parts or neither."""
    if latitude is None and longitude is None:
        return None
    if latitude is None or longitude is None:
        raise ValidationFailed("Latitude and longitude must be provided together")
    if not -90 <= latitude <= 90 or not -180 <= longitude <= 180:
        raise ValidationFailed("Coordinates out of range")
    return latitude, longitude


def distance_km(event: Event, origin: Optional[Tuple[float, float]]) -> Optional[float]:
    """Distance from origin to the event's venue, or None when either side lacks coordinates."""
    if origin is None or event.location is None or not event.location.has_coordinates:
        return None
    return round(haversine_km(origin[0], origin[1], event.location.latitude, event.location.longitude), 3)


def serialize(events: List[Event], origin: Optional[Tuple[float, float]] = None,
              now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    now = now or now_local()
    return [event.to_dict(distance_km=distance_km(event, origin), now=now) for event in events]


def search_events(
    criteria: SearchCriteria,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Run a public search and return one page of serialized events.

    Raises:
        ValidationFailed: On an unknown sort field or a half-specified coordinate
    """
    origin = check_coordinate(latitude, longitude)
    page, size = normalize_paging(criteria.page, criteria.size)
    sort_by = criteria.sort_by or DEFAULT_SORT_FIELD

    with db.session() as session:
        result: Page = event_store.find_events(
            session,
            city=criteria.city,
            is_free=criteria.is_free,
            category=criteria.category,
            start_date=criteria.start_date,
            end_date=criteria.end_date,
            approved=True,
            page=page,
            size=size,
            sort_field=sort_by,
            sort_dir=normalize_direction(criteria.direction),
        )

    now = now_local()
    return result.to_dict(lambda event: event.to_dict(distance_km=distance_km(event, origin), now=now))


def upcoming_events(
    now: Optional[datetime] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> List[Dict[str, Any]]:
    """Approved events starting in [now, now + 7 days), earliest first, at most 20."""
    origin = check_coordinate(latitude, longitude)
    now = now or now_local()

    with db.session() as session:
        result = event_store.find_events(
            session,
            start_date=now,
            end_date=now + timedelta(days=UPCOMING_WINDOW_DAYS),
            end_inclusive=False,
            approved=True,
            page=0,
            size=UPCOMING_PAGE_SIZE,
            sort_field='startTime',
            sort_dir='asc',
        )

    return serialize(result.content, origin, now)
