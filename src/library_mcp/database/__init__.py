"""
Database package for the Library MCP Server.

This package provides:
- SQLAlchemy schema definitions (schema.py)
- Session management and connection handling (session.py)
- Repositories that expose the store to the tool layer through Pydantic models
"""

from .author_repository import (
    AuthorCreateSchema,
    AuthorRepository,
    AuthorSearchParams,
    AuthorUpdateSchema,
)
from .book_repository import BookCreateSchema, BookRepository, BookUpdateSchema, SqlBookSource
from .exceptions import DuplicateError, LendingError, NotFoundError, RepositoryException
from .repository import BaseRepository, PaginatedResponse, PaginationParams
from .schema import Author, Base, Book, BooksTaken, User
from .session import (
    DatabaseManager,
    build_engine,
    get_db_manager,
    get_session,
    reset_db_manager,
    safe_commit,
    safe_query,
)
from .user_repository import UserCreateSchema, UserRepository, UserSearchParams, UserUpdateSchema

__all__ = [
    "Author",
    "AuthorCreateSchema",
    "AuthorRepository",
    "AuthorSearchParams",
    "AuthorUpdateSchema",
    "Base",
    "BaseRepository",
    "Book",
    "BookCreateSchema",
    "BookRepository",
    "BookUpdateSchema",
    "BooksTaken",
    "DatabaseManager",
    "DuplicateError",
    "LendingError",
    "NotFoundError",
    "PaginatedResponse",
    "PaginationParams",
    "RepositoryException",
    "SqlBookSource",
    "User",
    "UserCreateSchema",
    "UserRepository",
    "UserSearchParams",
    "UserUpdateSchema",
    "build_engine",
    "get_db_manager",
    "get_session",
    "reset_db_manager",
    "safe_commit",
    "safe_query",
]
