"""Database access: engine configuration, transactional sessions and errors."""

from .db_core import (
    Database,
    DatabaseConfig,
    db,
    DatabaseError,
    ConnectionError,
    SessionError,
    DuplicateRecordError,
)

__all__ = [
    'Database',
    'DatabaseConfig',
    'db',
    'DatabaseError',
    'ConnectionError',
    'SessionError',
    'DuplicateRecordError',
]
