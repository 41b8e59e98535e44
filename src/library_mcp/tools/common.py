"""Helpers shared by the library tools.

Every tool returns either a success payload::

    {"content": [{"type": "text", "text": "..."}], "data": {...}}

or an error payload with ``"isError": True`` and the same ``content`` shape.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, field_validator

from ..config import get_config
from ..database.exceptions import (
    DuplicateError,
    LendingError,
    NotFoundError,
    RepositoryException,
)
from ..database.repository import MAX_PAGE_SIZE, PaginatedResponse, PaginationParams

logger = logging.getLogger(__name__)


def format_error_response(error_type: str, details: str) -> dict[str, Any]:
    """Format error responses consistently across all tools."""
    return {"isError": True, "content": [{"type": "text", "text": f"{error_type}: {details}"}]}


def format_success_response(message: str, data: dict[str, Any]) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": message}], "data": data}


def repository_error_response(operation: str, error: RepositoryException) -> dict[str, Any]:
    """Map a repository failure onto a tool error payload."""
    if isinstance(error, NotFoundError):
        logger.info("%s failed - entity not found: %s", operation, error)
        return format_error_response("Not found", str(error))
    if isinstance(error, LendingError):
        logger.info("%s failed - lending rule: %s", operation, error)
        return format_error_response("Operation failed", str(error))
    if isinstance(error, DuplicateError):
        logger.info("%s failed - duplicate: %s", operation, error)
        return format_error_response("Already exists", str(error))

    logger.error("%s failed - database error: %s", operation, error)
    return format_error_response("Database error", f"{operation} failed: {error!s}")


def log_operation(operation: str, **kwargs) -> None:
    """Log operation details for audit trail."""
    logger.info(
        "Operation: %s | Details: %s", operation, " | ".join(f"{k}={v}" for k, v in kwargs.items())
    )


def pagination_data(result: PaginatedResponse) -> dict[str, Any]:
    return {
        "page": result.page,
        "page_size": result.page_size,
        "total": result.total,
        "total_pages": result.total_pages,
        "has_next": result.has_next,
        "has_previous": result.has_previous,
    }


def page_message(noun: str, result: PaginatedResponse) -> str:
    """Summary line for a page of results, or a "no results" line."""
    if not result.items:
        return f"No {noun} found."

    message = f"Found {result.total} {noun}"
    if result.total > len(result.items):
        message += f" (showing page {result.page} of {result.total_pages})"
    return message


class PageInput(BaseModel):
    """Pagination fields shared by list, search and report tools."""

    page: int = Field(default=1, description="Page number (1-based)", ge=1, examples=[1, 2])

    page_size: int = Field(
        default_factory=lambda: get_config().default_page_size,
        description="Number of results per page",
        ge=1,
        le=MAX_PAGE_SIZE,
        examples=[10, 20],
    )

    @field_validator("page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Respect the configured maximum, which may be lower than the hard limit."""
        max_page_size = get_config().max_page_size
        if v > max_page_size:
            raise ValueError(f"page_size must not exceed {max_page_size}")
        return v

    def to_pagination_params(self) -> PaginationParams:
        """Convert tool input to pagination parameters."""
        return PaginationParams(page=self.page, page_size=self.page_size)
