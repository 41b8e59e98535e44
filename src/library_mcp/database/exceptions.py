"""Exceptions raised by the data access layer."""


class RepositoryException(Exception):
    """Base exception for repository operations.

    Store failures are re-raised as this type, chained to the original
    SQLAlchemy error.
    """


class NotFoundError(RepositoryException):
    """Raised when an entity is not found."""


class DuplicateError(RepositoryException):
    """Raised when attempting to create a duplicate entity."""


class LendingError(RepositoryException):
    """Raised when a lend or return violates the lending rules."""
