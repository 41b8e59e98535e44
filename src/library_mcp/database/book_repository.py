"""
Book repository implementation for the Library MCP Server.

Besides CRUD this repository owns the lending workflow (lend/return), the
criteria search and the title word inversion:

- ``search`` runs the composer from ``library_mcp.search`` over a
  ``SqlBookSource``, which turns each predicate into a WHERE clause.
- ``invert_title`` applies ``library_mcp.text.invert_words`` to the stored
  title and saves the result.
"""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..database.schema import Author as AuthorDB
from ..database.schema import Book as BookDB
from ..database.schema import BooksTaken as BooksTakenDB
from ..database.schema import User as UserDB
from ..database.session import safe_commit, safe_query
from ..models.book import Book as BookModel
from ..search.composer import compose_search
from ..search.criteria import BookSearchCriteria
from ..search.predicates import BookPredicate
from ..text import invert_words
from .exceptions import LendingError, NotFoundError
from .repository import BaseRepository, PaginatedResponse, PaginationParams

logger = logging.getLogger(__name__)


class BookCreateSchema(BaseModel):
    """Schema for creating a new book."""

    title: str
    description: str | None = None
    author_id: int


class BookUpdateSchema(BaseModel):
    """Schema for updating a book - all fields optional."""

    title: str | None = None
    description: str | None = None
    author_id: int | None = None


class SqlBookSource:
    """
    Book source backed by the database.

    Each ``select`` is a single query with one WHERE clause per predicate,
    ordered by book id, with lending records loaded alongside the books.
    """

    def __init__(self, session: Session):
        self.session = session

    def select(self, predicates: Sequence[BookPredicate]) -> list[BookDB]:
        query = select(BookDB).options(selectinload(BookDB.books_taken))
        for predicate in predicates:
            query = query.where(predicate.to_clause(BookDB))
        query = query.order_by(BookDB.id)

        return list(
            safe_query(
                self.session,
                lambda s: s.execute(query).scalars().all(),
                "Failed to search books",
            )
        )


class BookRepository(BaseRepository[BookDB, BookCreateSchema, BookUpdateSchema, BookModel]):
    """Repository for book data access."""

    @property
    def model_class(self):
        return BookDB

    @property
    def response_schema(self):
        return BookModel

    def create(self, data: BookCreateSchema) -> BookModel:
        """
        Create a book for an existing author.

        Raises:
            NotFoundError: If the author does not exist
        """
        self._require_author(data.author_id)
        return super().create(data)

    def update(self, book_id: int, data: BookUpdateSchema) -> BookModel | None:
        """
        Update book information.

        Returns:
            Updated book model or None if the book does not exist

        Raises:
            NotFoundError: If a new author_id does not exist
        """
        if self._get_db_object(book_id, "load") is None:
            return None

        if data.author_id is not None:
            self._require_author(data.author_id)

        return super().update(book_id, data)

    # === Lending ===

    def lend(self, book_id: int, user_id: int) -> BookModel:
        """
        Record that ``user_id`` has taken ``book_id``.

        Raises:
            NotFoundError: If the book or the user does not exist
            LendingError: If the user already holds this book
        """
        book = self._require_book(book_id)
        self._require_user(user_id)

        if user_id in book.borrower_ids:
            raise LendingError(f"Book {book_id} is already taken by user {user_id}")

        book.books_taken.append(
            BooksTakenDB(user_id=user_id, date_taken=datetime.now(UTC).replace(tzinfo=None))
        )
        safe_commit(self.session, "lend book")
        self.session.refresh(book)

        logger.info("Lent book %s to user %s", book_id, user_id)
        return self._to_response_model(book)

    def return_book(self, book_id: int, user_id: int) -> BookModel:
        """
        Record that ``user_id`` has brought ``book_id`` back.

        Raises:
            NotFoundError: If the book or the user does not exist
            LendingError: If the user does not hold this book
        """
        book = self._require_book(book_id)
        self._require_user(user_id)

        taken = next((t for t in book.books_taken if t.user_id == user_id), None)
        if taken is None:
            raise LendingError(f"User {user_id} did not take book {book_id}")

        book.books_taken.remove(taken)
        safe_commit(self.session, "return book")
        self.session.refresh(book)

        logger.info("User %s returned book %s", user_id, book_id)
        return self._to_response_model(book)

    # === Search ===

    def search(
        self,
        criteria: BookSearchCriteria,
        pagination: PaginationParams | None = None,
    ) -> PaginatedResponse[BookModel]:
        """
        Search books by author, text and borrower.

        Args:
            criteria: Search criteria and AND/OR condition
            pagination: Pagination parameters

        Returns:
            Paginated response with matching books; ``total`` counts all matches
        """
        if not pagination:
            pagination = PaginationParams()

        pagination.validate_params()

        result = compose_search(
            SqlBookSource(self.session), criteria, pagination.page, pagination.page_size
        )
        items = [self._to_response_model(book) for book in result.items]
        return PaginatedResponse[BookModel].build(items, result.total, pagination)

    # === Title transform ===

    def invert_title(self, book_id: int) -> BookModel | None:
        """
        Reverse every word of the book's title in place and save it.

        Returns:
            The updated book, or None if it does not exist
        """
        book = self._get_db_object(book_id, "load")
        if book is None:
            return None

        book.title = invert_words(book.title)
        safe_commit(self.session, "invert book title")
        self.session.refresh(book)
        return self._to_response_model(book)

    # === Helpers ===

    def _require_book(self, book_id: int) -> BookDB:
        book = self._get_db_object(book_id, "load")
        if book is None:
            raise NotFoundError(f"Book {book_id} not found")
        return book

    def _require_user(self, user_id: int) -> UserDB:
        user = safe_query(
            self.session, lambda s: s.get(UserDB, user_id), "Failed to load user"
        )
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def _require_author(self, author_id: int) -> None:
        author = safe_query(
            self.session, lambda s: s.get(AuthorDB, author_id), "Failed to load author"
        )
        if author is None:
            raise NotFoundError(f"Author {author_id} not found")
