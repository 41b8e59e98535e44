"""Test configuration and fixtures for the Library MCP Server.

1. Isolated configuration - every test gets its own database path and
   no ``LIBRARY_*`` variables leak in from the environment
2. In-memory SQLite sessions with foreign keys enforced
3. Repository fixtures and a small sample library
4. ``mock_get_session`` so tool handlers run against the test session
"""

import os
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import Session

from library_mcp.config import ServerConfig, reset_config
from library_mcp.database.author_repository import AuthorCreateSchema, AuthorRepository
from library_mcp.database.book_repository import BookCreateSchema, BookRepository
from library_mcp.database.schema import Base, BooksTaken
from library_mcp.database.session import build_engine, reset_db_manager
from library_mcp.database.user_repository import UserCreateSchema, UserRepository

# === Environment and Configuration Fixtures ===


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch) -> Generator[None, None, None]:
    """Point the configuration at a temporary database and turn tracing off."""
    for key in list(os.environ):
        if key.startswith("LIBRARY_"):
            monkeypatch.delenv(key)

    monkeypatch.setenv("LIBRARY_DATABASE_PATH", str(tmp_path / "library.db"))
    monkeypatch.setenv("LIBRARY_OBSERVABILITY_ENABLED", "false")
    reset_config()

    yield

    reset_db_manager()
    reset_config()


@pytest.fixture
def test_config(tmp_path: Path) -> ServerConfig:
    """A test-specific server configuration."""
    return ServerConfig(
        server_name="test-library",
        server_version="0.0.1-test",
        database_path=tmp_path / "test_library.db",
        debug=True,
        log_level="DEBUG",
    )


# === Test Database Fixtures ===


@pytest.fixture
def test_session() -> Generator[Session, None, None]:
    """Provide a session on a fresh in-memory database."""
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    session = Session(bind=engine, autoflush=False)

    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def author_repo(test_session: Session) -> AuthorRepository:
    return AuthorRepository(test_session)


@pytest.fixture
def book_repo(test_session: Session) -> BookRepository:
    return BookRepository(test_session)


@pytest.fixture
def user_repo(test_session: Session) -> UserRepository:
    return UserRepository(test_session)


# === Test Data Fixtures ===


@pytest.fixture
def library(test_session, author_repo, book_repo, user_repo) -> SimpleNamespace:
    """A small library with two authors, four books and two users.

    Jane holds "The Great Gatsby" (taken 2024-01-01) and "To Kill a
    Mockingbird" (taken 2024-01-11). John holds "To Kill a Mockingbird"
    (taken 2024-01-21). Nobody holds the other two books.
    """
    fitzgerald = author_repo.create(
        AuthorCreateSchema(first_name="Francis", middle_name="Scott", last_name="Fitzgerald")
    )
    lee = author_repo.create(AuthorCreateSchema(first_name="Harper", last_name="Lee"))

    gatsby = book_repo.create(
        BookCreateSchema(
            title="The Great Gatsby",
            description="A novel of the Jazz Age on Long Island",
            author_id=fitzgerald.id,
        )
    )
    tender = book_repo.create(
        BookCreateSchema(
            title="Tender Is the Night",
            description="Riviera glamour and a marriage in decline",
            author_id=fitzgerald.id,
        )
    )
    mockingbird = book_repo.create(
        BookCreateSchema(
            title="To Kill a Mockingbird",
            description="A story of justice in the Deep South",
            author_id=lee.id,
        )
    )
    watchman = book_repo.create(BookCreateSchema(title="Go Set a Watchman", author_id=lee.id))

    jane = user_repo.create(
        UserCreateSchema(first_name="Jane", last_name="Doe", email="jane.doe@example.com")
    )
    john = user_repo.create(
        UserCreateSchema(first_name="John", last_name="Smith", email="jsmith@sample.org")
    )

    test_session.add_all(
        [
            BooksTaken(book_id=gatsby.id, user_id=jane.id, date_taken=datetime(2024, 1, 1, 9, 30)),
            BooksTaken(
                book_id=mockingbird.id, user_id=jane.id, date_taken=datetime(2024, 1, 11, 23, 59)
            ),
            BooksTaken(
                book_id=mockingbird.id, user_id=john.id, date_taken=datetime(2024, 1, 21, 0, 1)
            ),
        ]
    )
    test_session.commit()

    return SimpleNamespace(
        fitzgerald=fitzgerald,
        lee=lee,
        gatsby=gatsby,
        tender=tender,
        mockingbird=mockingbird,
        watchman=watchman,
        jane=jane,
        john=john,
    )


# === Tool Fixtures ===


@pytest.fixture
def mock_get_session(test_session, monkeypatch):
    """Make every tool module use the test session.

    Handlers open ``with get_session() as session:``; the replacement yields
    the test session without closing it so tests can inspect the results.
    """

    @contextmanager
    def _mock_get_session():
        yield test_session

    for module in ("books", "authors", "users"):
        monkeypatch.setattr(f"library_mcp.tools.{module}.get_session", _mock_get_session)

    return test_session
