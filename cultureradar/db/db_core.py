"""Core database functionality and configuration.

This module provides database management with environment-aware
configuration, connection pooling, and session handling.
"""

from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Generator
import os

from sqlalchemy import create_engine, Engine, inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from ..models import Base
from ..config.environment import IS_PRODUCTION_ENVIRONMENT

logger = logging.getLogger(__name__)


class DatabaseConfig:
    """Database configuration settings."""

    def __init__(
        self,
        url: Optional[str] = None,
        sqlite_path: Optional[Path] = None,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
        pool_timeout: int = 30,
        pool_recycle: int = 3600,
        pool_pre_ping: bool = True
    ):
        """
        Initialize database configuration.

        In production environment, DATABASE_URL must be set in environment variables
        or provided explicitly via the url parameter.

        Args:
            url: Explicit SQLAlchemy URL; overrides the environment defaults
            sqlite_path: Path to SQLite database file (for development)
            echo: Whether to echo SQL statements
            pool_size: Size of the connection pool (permanent connections)
            max_overflow: Maximum number of extra connections to allow temporarily
            pool_timeout: Seconds to wait for an available connection
            pool_recycle: Seconds before connections are recycled (prevent stale)
            pool_pre_ping: Whether to ping connections before using them

        Raises:
            ValueError: If in production environment and no database URL is provided
        """
        if url:
            self.url = url
        elif IS_PRODUCTION_ENVIRONMENT:
            self.url = os.environ.get('DATABASE_URL')
            if not self.url:
                raise ValueError(
                    "Database URL must be provided either via url parameter "
                    "or DATABASE_URL environment variable when in production environment"
                )
        else:
            self.url = os.environ.get('DATABASE_URL')
            if not self.url:
                path = sqlite_path or Path(__file__).parent.parent.parent / 'data' / 'events.db'
                self.url = f"sqlite:///{path}"

        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.pool_recycle = pool_recycle
        self.pool_pre_ping = pool_pre_ping

    @property
    def connection_url(self) -> str:
        return self.url

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith('sqlite')

    @property
    def is_in_memory(self) -> bool:
        return self.is_sqlite and (self.url in ('sqlite://', 'sqlite:///:memory:') or ':memory:' in self.url)

    @property
    def sqlite_file(self) -> Optional[Path]:
        if not self.is_sqlite or self.is_in_memory:
            return None
        return Path(self.url.split('sqlite:///', 1)[1])

    def get_engine_args(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine arguments based on configuration."""
        args = {"echo": self.echo}

        if self.is_sqlite:
            args["connect_args"] = {"check_same_thread": False}
            # An in-memory database lives as long as its single connection
            if self.is_in_memory:
                args["poolclass"] = StaticPool
        else:
            args.update({
                "pool_size": self.pool_size,
                "max_overflow": self.max_overflow,
                "pool_timeout": self.pool_timeout,
                "pool_recycle": self.pool_recycle,
                "pool_pre_ping": self.pool_pre_ping
            })

        return args


class DatabaseError(Exception):
    """Base exception for database-related errors."""
    pass


class ConnectionError(DatabaseError):
    """Raised when there are issues connecting to the database."""
    pass


class SessionError(DatabaseError):
    """Raised when there are issues with database sessions."""
    pass


class DuplicateRecordError(DatabaseError):
    """Raised when a write violates a unique constraint."""
    pass


class Database:
    """Core database management class implementing the singleton pattern."""

    _instance = None

    def __new__(cls, config: Optional[DatabaseConfig] = None):
        """Ensure only one instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config: Optional[DatabaseConfig] = None):
        """Initialize the database manager if not already initialized."""
        if self._initialized:
            return

        self.config = config or DatabaseConfig()
        self.engine: Optional[Engine] = None
        # Objects stay usable after the session closes; relationships they
        # need must be loaded before that.
        self._session_factory = sessionmaker(expire_on_commit=False)
        self._tables_checked = False
        self._initialized = True

        self._setup_engine()

    def _setup_engine(self) -> None:
        """Set up the SQLAlchemy engine."""
        try:
            self.engine = create_engine(
                self.config.connection_url,
                **self.config.get_engine_args()
            )
            self._session_factory.configure(bind=self.engine)
        except Exception as e:
            raise ConnectionError(f"Failed to create database engine: {e}") from e

    def configure(self, config: DatabaseConfig) -> None:
        """Rebind the manager to a different database (used by scripts and tests)."""
        if self.engine is not None:
            self.engine.dispose()
        self.config = config
        self._tables_checked = False
        self._setup_engine()

    def init_db(self) -> None:
        """Initialize the database schema."""
        if not self.engine:
            raise ConnectionError("Database engine not initialized")

        sqlite_file = self.config.sqlite_file
        if sqlite_file is not None:
            sqlite_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            Base.metadata.create_all(self.engine)
            self._tables_checked = True
            logger.info("Database schema initialized successfully")
        except Exception as e:
            raise DatabaseError(f"Failed to initialize database schema: {e}") from e

    def drop_all(self) -> None:
        """Drop every table (used by tests)."""
        if self.engine is not None:
            Base.metadata.drop_all(self.engine)
        self._tables_checked = False

    def ensure_tables_exist(self) -> None:
        """Ensure all required database tables exist."""
        if self._tables_checked:
            return
        if not self.engine:
            raise ConnectionError("Database engine not initialized")

        try:
            sqlite_file = self.config.sqlite_file
            if sqlite_file is not None:
                sqlite_file.parent.mkdir(parents=True, exist_ok=True)

            inspector = inspect(self.engine)
            existing_tables = set(inspector.get_table_names())
            required_tables = set(Base.metadata.tables.keys())

            if not required_tables.issubset(existing_tables):
                logger.info("Some tables missing, initializing database schema")
                Base.metadata.create_all(self.engine)
                logger.info("Database schema initialized successfully")

            self._tables_checked = True

        except Exception as e:
            raise DatabaseError(f"Failed to verify/create database schema: {e}") from e

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success and rolls back on any exception. SQLAlchemy
        failures are re-raised as DatabaseError subclasses; any other
        exception (including domain errors) propagates unchanged.

        Example:
            with db.session() as session:
                event = session.get(Event, 1)
                event.approved = True
                # No need to call commit - it's handled automatically

        Raises:
            DuplicateRecordError: If a unique constraint is violated
            SessionError: If there are other issues with the session
        """
        self.ensure_tables_exist()

        session = self._session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise DuplicateRecordError(f"Integrity error: {e.orig}") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise SessionError(f"Database session error: {e}") from e
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


# Create the global database instance with default configuration
db = Database()
