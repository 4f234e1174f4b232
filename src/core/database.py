"""Database engine layer for the Portfolio Tracker.

Provides a lazily created sync engine over the SQLite file named by
DATABASE_PATH, a session factory configured with autoflush=False and
expire_on_commit=False for explicit transaction control, and helpers to
close and re-open the connection (tests point DATABASE_PATH at a temp file
and cycle close_db_connection() / setup_database() between cases).
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from .config import Settings
from .exceptions import PersistenceError
from .utils.logging_config import get_logger

logger = get_logger("database")

# Module-level globals -- singleton pattern
_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker[Session]] = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_engine() -> Engine:
    """Return the engine, creating it on first use.

    Settings are re-read on creation so a DATABASE_PATH change takes effect
    after close_db_connection().
    """
    global _engine, _session_factory
    if _engine is None:
        current = Settings()
        Path(current.database_path).expanduser().parent.mkdir(
            parents=True, exist_ok=True
        )
        _engine = create_engine(
            current.database_url,
            echo=current.debug,
            connect_args={"check_same_thread": False},
        )
        event.listen(_engine, "connect", _enable_sqlite_foreign_keys)
        _session_factory = sessionmaker(
            _engine,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("database_connected", database_path=current.database_path)
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    get_engine()
    assert _session_factory is not None
    return _session_factory


@contextmanager
def session_scope() -> Iterator[Session]:
    """Yield a session wrapped in a single transaction.

    Commits on success and rolls back on any exception. SQLAlchemy errors
    are re-raised as PersistenceError; domain errors pass through unchanged.

    Usage::

        with session_scope() as session:
            session.add(obj)
    """
    session = get_session_factory()()
    try:
        with session.begin():
            yield session
    except SQLAlchemyError as exc:
        logger.error("database_operation_failed", error=str(exc))
        raise PersistenceError(str(exc)) from exc
    finally:
        session.close()


def close_db_connection() -> None:
    """Dispose the engine; the next call to get_engine() reconnects."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None
        logger.info("database_connection_closed")


def check_db_connection() -> bool:
    """Return True when a trivial query succeeds."""
    try:
        with get_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as exc:
        logger.error("database_connection_test_failed", error=str(exc))
        return False
