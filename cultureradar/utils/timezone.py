"""Timezone helpers.

Event times are stored as naive local date-times (ISO-8601 without offset).
Timestamps from external sources are converted to the application zone first.
"""

from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from ..config.environment import APP_TIMEZONE


def app_zone() -> ZoneInfo:
    return ZoneInfo(APP_TIMEZONE)


def now_local() -> datetime:
    """Current wall-clock time in the application zone, without tzinfo."""
    return datetime.now(app_zone()).replace(tzinfo=None)


def to_local_naive(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Convert a datetime to a naive datetime in the application zone.

    Naive input is assumed to already be local and is returned unchanged.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(app_zone()).replace(tzinfo=None)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string (a trailing 'Z' is accepted) into a local naive datetime."""
    if not value:
        return None
    return to_local_naive(datetime.fromisoformat(value.replace('Z', '+00:00')))
