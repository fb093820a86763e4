"""Defaults for the public event search."""

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_SORT_FIELD = 'startTime'
DEFAULT_SORT_DIRECTION = 'asc'

UPCOMING_WINDOW_DAYS = 7
UPCOMING_PAGE_SIZE = 20

PENDING_APPROVAL_LIMIT = 50

# Events without an end time are assumed to last this long
DEFAULT_EVENT_DURATION_HOURS = 2
