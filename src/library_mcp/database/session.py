"""
Engine and session handling for the library database.

Tool handlers open one short-lived session per call. Repositories run their
statements through ``safe_query`` and ``safe_commit`` so that any SQLAlchemy
failure surfaces as ``RepositoryException`` with the original error chained.
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..config import get_config
from .exceptions import RepositoryException
from .schema import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _casefold(value: str | None) -> str | None:
    return None if value is None else value.casefold()


def _prepare_sqlite_connection(dbapi_connection, _record) -> None:
    # books_taken rows rely on ON DELETE CASCADE
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()
    # SQLite lower() only folds ASCII; text search folds with Python instead
    dbapi_connection.create_function("casefold", 1, _casefold, deterministic=True)


def build_engine(url: str) -> Engine:
    """Create an engine suited to ``url``; SQLite gets one shared connection."""
    if not url.startswith("sqlite"):
        return create_engine(url, pool_size=10, max_overflow=20, pool_pre_ping=True)

    engine = create_engine(
        url,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine, "connect", _prepare_sqlite_connection)
    return engine


def default_database_url() -> str:
    """SQLite URL for the configured database file, creating its directory."""
    path: Path = get_config().database_path
    if not path.is_absolute():
        path = Path.cwd() / path
    path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{path}"


class DatabaseManager:
    """
    Holds the engine and session factory for a single database.

    Nothing is opened until the engine is first needed.
    """

    def __init__(self, database_url: str | None = None):
        self.database_url = database_url or default_database_url()
        self._engine: Engine | None = None
        self._sessions: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = build_engine(self.database_url)
            logger.info("Connected engine to %s", self._engine.url)
        return self._engine

    def create_session(self) -> Session:
        """Open a session bound to this manager's engine. Close it when done."""
        if self._sessions is None:
            self._sessions = sessionmaker(
                bind=self.engine, autoflush=False, expire_on_commit=False
            )
        return self._sessions()

    def create_schema(self) -> None:
        """Create any missing tables."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Schema ready (%d tables)", len(Base.metadata.tables))

    def verify_connection(self) -> bool:
        """Run ``SELECT 1``; False means the database is unreachable."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Cannot reach database %s", self.database_url)
            return False
        return True

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Disposed engine for %s", self.database_url)
        self._engine = None
        self._sessions = None


_manager: DatabaseManager | None = None


def get_db_manager(database_url: str | None = None) -> DatabaseManager:
    """
    Return the process-wide manager, creating it and its schema on first use.

    ``database_url`` only matters on that first call.
    """
    global _manager  # noqa: PLW0603
    if _manager is None:
        _manager = DatabaseManager(database_url)
        _manager.create_schema()
    return _manager


def reset_db_manager() -> None:
    """Dispose of the process-wide manager; the next call builds a new one."""
    global _manager  # noqa: PLW0603
    if _manager is not None:
        _manager.close()
    _manager = None


def get_session() -> Session:
    """New session from the process-wide manager, for ``with get_session() as s:``."""
    return get_db_manager().create_session()


def safe_commit(session: Session, operation: str) -> None:
    """Commit, or roll back and raise ``RepositoryException`` naming ``operation``."""
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Commit failed during %s", operation)
        raise RepositoryException(f"Database operation '{operation}' failed: {e!s}") from e


def safe_query(session: Session, query_func: Callable[[Session], T], error_msg: str) -> T:
    """
    Run ``query_func(session)``.

    Raises:
        RepositoryException: prefixed with ``error_msg`` when the store fails
    """
    try:
        return query_func(session)
    except SQLAlchemyError as e:
        logger.exception("%s", error_msg)
        raise RepositoryException(f"{error_msg}: Database query failed") from e
