"""Persistence-facing stores.

Every store function works inside a session supplied by the caller, so a
service can combine several writes into one transaction.
"""

from .event_store import Page, SORT_FIELDS
from . import event_store, location_store, user_store

__all__ = ['Page', 'SORT_FIELDS', 'event_store', 'location_store', 'user_store']
