"""Models package initialization."""

from .base import Base
from .location import Location
from .event import Event, EventCategory
from .user import User, Role

__all__ = ['Base', 'Location', 'Event', 'EventCategory', 'User', 'Role']
