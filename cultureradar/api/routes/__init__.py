"""Routes package initialization."""

from . import (
    auth,
    events,
    event_fetch_trigger,
    health,
    locations,
    users,
)

__all__ = [
    'auth',
    'events',
    'event_fetch_trigger',
    'health',
    'locations',
    'users',
]
