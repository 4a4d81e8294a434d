"""
==============================================================================
Database Connection Management Module
==============================================================================

Database connection management for the catalog using SQLAlchemy.

This module implements:
- DatabaseManager: Shared engine and session factory
- Request-scoped session dependency for FastAPI
- Connection pooling configuration for server databases

SQLAlchemy Architecture:
-----------------------
    ┌─────────────────┐
    │ DatabaseManager │ (one per process)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │     Engine      │ (Connection pool)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │  SessionLocal   │ (Session factory)
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Session      │ (Request-scoped)
    └─────────────────┘

SQLite Note:
-----------
'check_same_thread' is disabled because FastAPI serves sync dependencies
from a thread pool.

==============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from catalog_api.config import Settings, get_settings


# Module logger
logger = logging.getLogger(__name__)

# SQLAlchemy declarative base for all models
Base = declarative_base()

# SQLite's built-in lower() only folds ASCII letters
SQLITE_LOWER_FUNCTION = "py_lower"


def register_sqlite_functions(dbapi_connection) -> None:
    """Register Python-backed SQL functions on a raw sqlite3 connection."""
    dbapi_connection.create_function(
        SQLITE_LOWER_FUNCTION,
        1,
        lambda value: value.lower() if isinstance(value, str) else value,
        deterministic=True,
    )


class DatabaseManager:
    """
    Centralized database connection manager.

    The engine is created lazily on first access so that settings can be
    swapped before any connection is opened.

    Example:
        >>> db_manager = DatabaseManager()
        >>> session = db_manager.get_session()
        >>> session.query(Product).count()
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """
        Initialize the database manager.

        Args:
            settings: Optional settings (uses global settings if None)
        """
        self._settings = settings or get_settings()
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

        logger.debug("DatabaseManager initialized")

    # =========================================================================
    # ENGINE MANAGEMENT
    # =========================================================================

    @property
    def engine(self) -> Engine:
        """SQLAlchemy engine, created on first access."""
        if self._engine is None:
            self._engine = self._create_engine()
        return self._engine

    def _create_engine(self) -> Engine:
        """
        Create the SQLAlchemy engine with appropriate configuration.

        - SQLite: disables check_same_thread and enables foreign keys
        - PostgreSQL/MySQL: uses connection pooling
        """
        database_url = self._settings.database_url

        if database_url.startswith("sqlite"):
            engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                echo=self._settings.debug,
            )

            @event.listens_for(engine, "connect")
            def on_sqlite_connect(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()
                register_sqlite_functions(dbapi_connection)

            logger.info(f"Created SQLite engine: {database_url}")

        else:
            engine = create_engine(
                database_url,
                pool_size=5,
                max_overflow=10,
                pool_timeout=30,
                pool_recycle=1800,
                pool_pre_ping=True,
                echo=self._settings.debug,
            )

            logger.info(f"Created database engine with pooling: {database_url}")

        return engine

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    @property
    def session_factory(self) -> sessionmaker:
        """Session factory bound to the engine."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(
                bind=self.engine,
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
            )
        return self._session_factory

    def get_session(self) -> Session:
        """
        Get a new database session.

        The caller is responsible for closing the session.
        """
        return self.session_factory()

    # =========================================================================
    # TABLE MANAGEMENT
    # =========================================================================

    def create_tables(self) -> None:
        """Create all tables that do not exist yet."""
        # Registers the ORM classes on Base.metadata
        from catalog_api.db import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database tables created/verified")

    # =========================================================================
    # CONNECTION MANAGEMENT
    # =========================================================================

    def verify_connection(self) -> bool:
        """
        Verify database connection is working.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.debug("Database connection verified")
            return True
        except Exception as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def dispose(self) -> None:
        """Dispose of the connection pool on shutdown."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Database connection pool disposed")

    def __repr__(self) -> str:
        """String representation for debugging."""
        return f"DatabaseManager(url={self._settings.database_url!r})"


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

@lru_cache(maxsize=1)
def get_database_manager() -> DatabaseManager:
    """
    Get the process-wide DatabaseManager instance.

    Returns:
        Shared DatabaseManager instance
    """
    return DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    The session is closed after the request.

    Usage:
        @router.get("/products/{product_id}")
        async def get_product(db: Session = Depends(get_db)):
            ...
    """
    session = get_database_manager().get_session()
    try:
        yield session
    finally:
        session.close()
