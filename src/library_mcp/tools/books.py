"""Book Tools - Catalog, Lending and Search

Clients use these tools to maintain the book catalog, lend books to users
and take them back, search the catalog and apply the title inversion.

Tools:
- list_books / get_book / create_book / update_book / delete_book
- lend_book: Record that a user has taken a book
- return_book: Record that a user has brought a book back
- search_books: Filter by author, text and borrower with AND/OR semantics
- invert_book_title: Reverse every word of a book's title
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..database.book_repository import BookCreateSchema, BookRepository, BookUpdateSchema
from ..database.exceptions import RepositoryException
from ..database.session import get_session
from ..models.book import Book
from ..observability import trace_tool
from ..search.criteria import BookSearchCriteria
from .common import (
    PageInput,
    format_error_response,
    format_success_response,
    log_operation,
    page_message,
    pagination_data,
    repository_error_response,
)

logger = logging.getLogger(__name__)


def _book_data(book: Book) -> dict[str, Any]:
    return book.model_dump()


def _invalid(tool_name: str, error: ValidationError) -> dict[str, Any]:
    logger.warning("Invalid %s parameters: %s", tool_name, error)
    return format_error_response("Invalid parameters", str(error))


# =============================================================================
# INPUT SCHEMAS
# =============================================================================


class BookIdInput(BaseModel):
    """Input schema for tools addressing a single book."""

    book_id: int = Field(..., description="Identifier of the book", ge=1, examples=[1, 42])


class CreateBookInput(BaseModel):
    """Input schema for creating a book."""

    title: str = Field(
        ...,
        description="Title of the book",
        min_length=1,
        max_length=500,
        examples=["The Great Gatsby"],
    )
    description: str | None = Field(
        default=None,
        description="Optional summary of the book",
        examples=["A classic American novel set in the Jazz Age"],
    )
    author_id: int = Field(..., description="Identifier of an existing author", ge=1)


class UpdateBookInput(BookIdInput):
    """Input schema for updating a book. Omitted fields keep their value."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    author_id: int | None = Field(default=None, ge=1)


class LendingInput(BookIdInput):
    """Input schema for lend and return operations."""

    user_id: int = Field(..., description="Identifier of the user", ge=1, examples=[1, 7])


class SearchBooksInput(PageInput, BookSearchCriteria):
    """
    Input schema for the search_books tool.

    ``condition`` is "AND" (every given criterion must match) or "OR" (any
    given criterion may match). With OR and no criteria nothing matches.
    """

    author_id: int | None = Field(default=None, description="Only books by this author", ge=1)
    user_id: int | None = Field(
        default=None, description="Only books currently taken by this user", ge=1
    )

    def to_criteria(self) -> BookSearchCriteria:
        return BookSearchCriteria(
            author_id=self.author_id,
            text=self.text,
            user_id=self.user_id,
            condition=self.condition,
        )


# =============================================================================
# HANDLERS
# =============================================================================


async def list_books_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Return one page of the catalog, ordered by id."""
    try:
        try:
            params = PageInput.model_validate(arguments)
        except ValidationError as e:
            return _invalid("list_books", e)

        with get_session() as session:
            try:
                result = BookRepository(session).get_all(params.to_pagination_params())
            except RepositoryException as e:
                return repository_error_response("list_books", e)

        return format_success_response(
            page_message("book(s)", result),
            {
                "books": [_book_data(book) for book in result.items],
                "pagination": pagination_data(result),
            },
        )

    except Exception as e:
        logger.exception("Unexpected error in list_books tool")
        return format_error_response("Unexpected error", str(e))


async def get_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Return a single book with its current borrowers."""
    try:
        try:
            params = BookIdInput.model_validate(arguments)
        except ValidationError as e:
            return _invalid("get_book", e)

        with get_session() as session:
            try:
                book = BookRepository(session).get_by_id(params.book_id)
            except RepositoryException as e:
                return repository_error_response("get_book", e)

        if book is None:
            return format_error_response("Not found", f"Book {params.book_id} not found")

        return format_success_response(
            f"Book {book.id}: '{book.title}'", {"book": _book_data(book)}
        )

    except Exception as e:
        logger.exception("Unexpected error in get_book tool")
        return format_error_response("Unexpected error", str(e))


async def create_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Add a book to the catalog for an existing author."""
    try:
        try:
            params = CreateBookInput.model_validate(arguments)
        except ValidationError as e:
            return _invalid("create_book", e)

        with get_session() as session:
            try:
                book = BookRepository(session).create(
                    BookCreateSchema(
                        title=params.title,
                        description=params.description,
                        author_id=params.author_id,
                    )
                )
            except RepositoryException as e:
                return repository_error_response("create_book", e)

        log_operation("create_book_success", book_id=book.id, author_id=book.author_id)
        return format_success_response(
            f"Created book {book.id}: '{book.title}'", {"book": _book_data(book)}
        )

    except Exception as e:
        logger.exception("Unexpected error in create_book tool")
        return format_error_response("Unexpected error", str(e))


async def update_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Change the title, description or author of a book."""
    try:
        try:
            params = UpdateBookInput.model_validate(arguments)
        except ValidationError as e:
            return _invalid("update_book", e)

        update = BookUpdateSchema(
            title=params.title,
            description=params.description,
            author_id=params.author_id,
        )

        with get_session() as session:
            try:
                book = BookRepository(session).update(params.book_id, update)
            except RepositoryException as e:
                return repository_error_response("update_book", e)

        if book is None:
            return format_error_response("Not found", f"Book {params.book_id} not found")

        log_operation("update_book_success", book_id=book.id)
        return format_success_response(
            f"Updated book {book.id}: '{book.title}'", {"book": _book_data(book)}
        )

    except Exception as e:
        logger.exception("Unexpected error in update_book tool")
        return format_error_response("Unexpected error", str(e))


async def delete_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Remove a book and its lending records."""
    try:
        try:
            params = BookIdInput.model_validate(arguments)
        except ValidationError as e:
            return _invalid("delete_book", e)

        with get_session() as session:
            try:
                deleted = BookRepository(session).delete(params.book_id)
            except RepositoryException as e:
                return repository_error_response("delete_book", e)

        if not deleted:
            return format_error_response("Not found", f"Book {params.book_id} not found")

        log_operation("delete_book_success", book_id=params.book_id)
        return format_success_response(
            f"Deleted book {params.book_id}", {"book_id": params.book_id, "deleted": True}
        )

    except Exception as e:
        logger.exception("Unexpected error in delete_book tool")
        return format_error_response("Unexpected error", str(e))


async def lend_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Lend a book to a user.

    Fails when the book or user does not exist, or when the user already
    holds the book.

    Client calls: tool.call("lend_book", {"book_id": 1, "user_id": 2})
    """
    try:
        try:
            params = LendingInput.model_validate(arguments)
        except ValidationError as e:
            return _invalid("lend_book", e)

        log_operation("lend_book_start", book_id=params.book_id, user_id=params.user_id)

        with get_session() as session:
            try:
                book = BookRepository(session).lend(params.book_id, params.user_id)
            except RepositoryException as e:
                return repository_error_response("lend_book", e)

        log_operation("lend_book_success", book_id=book.id, user_id=params.user_id)
        return format_success_response(
            f"Lent book '{book.title}' to user {params.user_id}", {"book": _book_data(book)}
        )

    except Exception as e:
        logger.exception("Unexpected error in lend_book tool")
        return format_error_response("Unexpected error", str(e))


async def return_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Take a book back from a user.

    Fails when the book or user does not exist, or when the user does not
    hold the book.

    Client calls: tool.call("return_book", {"book_id": 1, "user_id": 2})
    """
    try:
        try:
            params = LendingInput.model_validate(arguments)
        except ValidationError as e:
            return _invalid("return_book", e)

        log_operation("return_book_start", book_id=params.book_id, user_id=params.user_id)

        with get_session() as session:
            try:
                book = BookRepository(session).return_book(params.book_id, params.user_id)
            except RepositoryException as e:
                return repository_error_response("return_book", e)

        log_operation("return_book_success", book_id=book.id, user_id=params.user_id)
        return format_success_response(
            f"User {params.user_id} returned book '{book.title}'", {"book": _book_data(book)}
        )

    except Exception as e:
        logger.exception("Unexpected error in return_book tool")
        return format_error_response("Unexpected error", str(e))


async def search_books_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Search books by author, text and borrower.

    Client calls: tool.call("search_books", {"text": "gatsby", "condition": "OR"})
    """
    try:
        try:
            params = SearchBooksInput.model_validate(arguments)
        except ValidationError as e:
            return _invalid("search_books", e)

        with get_session() as session:
            try:
                result = BookRepository(session).search(
                    params.to_criteria(), params.to_pagination_params()
                )
            except RepositoryException as e:
                return repository_error_response("search_books", e)

        if not result.items:
            message = "No books found matching your search criteria."
        else:
            message = page_message("book(s)", result)

        return format_success_response(
            message,
            {
                "books": [_book_data(book) for book in result.items],
                "pagination": pagination_data(result),
            },
        )

    except Exception as e:
        logger.exception("Unexpected error in search_books tool")
        return format_error_response("Unexpected error", str(e))


async def invert_book_title_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Reverse each word of a book's title and save it.

    Applying the tool twice restores the original title.
    """
    try:
        try:
            params = BookIdInput.model_validate(arguments)
        except ValidationError as e:
            return _invalid("invert_book_title", e)

        with get_session() as session:
            try:
                book = BookRepository(session).invert_title(params.book_id)
            except RepositoryException as e:
                return repository_error_response("invert_book_title", e)

        if book is None:
            return format_error_response("Not found", f"Book {params.book_id} not found")

        log_operation("invert_book_title_success", book_id=book.id, title=book.title)
        return format_success_response(
            f"Book {book.id} is now titled '{book.title}'", {"book": _book_data(book)}
        )

    except Exception as e:
        logger.exception("Unexpected error in invert_book_title tool")
        return format_error_response("Unexpected error", str(e))


# =============================================================================
# TOOL METADATA
# =============================================================================

list_books = {
    "name": "list_books",
    "description": "List books in the catalog, ordered by id, one page at a time.",
    "inputSchema": PageInput.model_json_schema(),
    "handler": trace_tool("list_books")(list_books_handler),
}

get_book = {
    "name": "get_book",
    "description": "Get a book by id, including the ids of users currently borrowing it.",
    "inputSchema": BookIdInput.model_json_schema(),
    "handler": trace_tool("get_book")(get_book_handler),
}

create_book = {
    "name": "create_book",
    "description": "Add a book to the catalog. The author must already exist.",
    "inputSchema": CreateBookInput.model_json_schema(),
    "handler": trace_tool("create_book")(create_book_handler),
}

update_book = {
    "name": "update_book",
    "description": (
        "Update a book's title, description or author. Omitted fields are left unchanged; "
        "a new author must already exist."
    ),
    "inputSchema": UpdateBookInput.model_json_schema(),
    "handler": trace_tool("update_book")(update_book_handler),
}

delete_book = {
    "name": "delete_book",
    "description": "Delete a book together with its lending records.",
    "inputSchema": BookIdInput.model_json_schema(),
    "handler": trace_tool("delete_book")(delete_book_handler),
}

lend_book = {
    "name": "lend_book",
    "description": (
        "Lend a book to a user. Fails if the book or user does not exist or the user "
        "already holds the book."
    ),
    "inputSchema": LendingInput.model_json_schema(),
    "handler": trace_tool("lend_book")(lend_book_handler),
}

return_book = {
    "name": "return_book",
    "description": "Return a book a user has taken. Fails if the user does not hold the book.",
    "inputSchema": LendingInput.model_json_schema(),
    "handler": trace_tool("return_book")(return_book_handler),
}

search_books = {
    "name": "search_books",
    "description": (
        "Search books by author id, text (every word must appear in the title or "
        "description) and borrower id. Combine criteria with condition AND (all must "
        "match, no criteria returns every book) or OR (any may match, no criteria "
        "returns nothing). Results are paginated."
    ),
    "inputSchema": SearchBooksInput.model_json_schema(),
    "handler": trace_tool("search_books")(search_books_handler),
}

invert_book_title = {
    "name": "invert_book_title",
    "description": (
        "Reverse every word of a book's title in place, keeping spaces and punctuation "
        "where they are. Running it twice restores the title."
    ),
    "inputSchema": BookIdInput.model_json_schema(),
    "handler": trace_tool("invert_book_title")(invert_book_title_handler),
}
