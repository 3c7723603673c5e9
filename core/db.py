"""
Database engine and session management.

The application factory builds one DatabaseManager per app and hands its
sessions to request handlers through dependency injection; there is no
module-level instance.

Pooling depends on the backend:
- in-memory SQLite shares one connection (StaticPool) so every session
  sees the same database
- file SQLite uses SQLAlchemy's default pool with WAL journaling
- everything else gets a QueuePool sized from settings

Usage:
    from core.db import DatabaseManager

    database = DatabaseManager(settings)
    database.initialize()
    with database.session() as session:
        user = session.query(User).first()
"""

import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Engine, create_engine, event, make_url, text
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from .config import Settings, get_settings
from .logging import get_logger

logger = get_logger("database")


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""

    pass


def _is_memory_sqlite(url: str) -> bool:
    database = make_url(url).database
    return not database or database == ":memory:"


def _unicode_lower(value):
    return value.lower() if isinstance(value, str) else value


class DatabaseManager:
    """
    Owns the engine and session factory for one application instance.

    Sessions from session() commit on success and roll back on error;
    get_session() leaves the transaction to the caller.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.engine: Engine | None = None
        self.SessionLocal: sessionmaker[Session] | None = None
        self._initialized = False

    def _engine_options(self, url: str) -> dict[str, Any]:
        if not url.startswith("sqlite"):
            return {
                "poolclass": QueuePool,
                "pool_size": self.settings.db_pool_size,
                "max_overflow": self.settings.db_max_overflow,
                "pool_pre_ping": self.settings.db_pool_pre_ping,
            }

        options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if _is_memory_sqlite(url):
            options["poolclass"] = StaticPool
        return options

    def initialize(self, database_url: str | None = None) -> None:
        """
        Create the engine and session factory. Call once at app startup.

        Args:
            database_url: Optional override. Uses settings.database_url if not provided.
        """
        if self._initialized:
            return

        url = database_url or self.settings.database_url
        self.engine = create_engine(url, echo=self.settings.db_echo, **self._engine_options(url))

        if url.startswith("sqlite"):
            use_wal = not _is_memory_sqlite(url)

            @event.listens_for(self.engine, "connect")
            def set_sqlite_pragma(dbapi_connection, connection_record):
                # Built-in lower() only folds ASCII; ILIKE and skill grouping rely on it
                dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                if use_wal:
                    cursor.execute("PRAGMA journal_mode=WAL")
                cursor.close()

        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )
        self._initialized = True

        logger.info(
            "database_engine_created",
            url=make_url(url).render_as_string(hide_password=True),
            pool=type(self.engine.pool).__name__,
        )

    def create_all_tables(self) -> None:
        """Create any missing tables. Existing tables are left untouched."""
        self._ensure_initialized()
        # Register every mapped class on Base.metadata
        import core.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Session scope with auto-commit/rollback.

        Usage:
            with database.session() as session:
                session.add(user)
        """
        self._ensure_initialized()
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_session(self) -> Session:
        """Session for manual management. Caller commits and closes."""
        self._ensure_initialized()
        return self.SessionLocal()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def health_check(self) -> dict:
        """
        Run ``SELECT 1`` against the database.

        Returns:
            dict with 'healthy' (bool), 'latency_ms' (float), and 'error' (str or None)
        """
        if not self._initialized:
            return {"healthy": False, "latency_ms": 0, "error": "Database not initialized"}

        start = time.perf_counter()
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            logger.warning("database_health_check_error", error=str(e))
            return {
                "healthy": False,
                "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                "error": str(e),
            }
        return {
            "healthy": True,
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            "error": None,
        }

    def get_pool_status(self) -> dict:
        """Connection pool statistics for the detailed health endpoint."""
        if not self._initialized:
            return {}

        pool = self.engine.pool
        if isinstance(pool, StaticPool):
            return {"type": "StaticPool", "note": "Single shared connection (in-memory SQLite)"}
        if isinstance(pool, QueuePool):
            return {
                "type": "QueuePool",
                "size": pool.size(),
                "checked_in": pool.checkedin(),
                "checked_out": pool.checkedout(),
                "overflow": pool.overflow(),
            }
        return {"type": type(pool).__name__}

    def reset(self) -> None:
        """Dispose the engine and return to the uninitialized state."""
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None
        self._initialized = False

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")


__all__ = ["Base", "DatabaseManager"]
