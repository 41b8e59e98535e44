"""
SQLAlchemy database schema for the Library MCP Server.

Four tables back the service:

- ``authors``: people who wrote books in the catalog
- ``books``: catalog entries, each owned by exactly one author
- ``users``: registered library members
- ``books_taken``: the lending association between books and users

Deleting an author removes their books; deleting a book or a user removes
the lending records that reference it.
"""

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Author(Base):
    """Authors table."""

    __tablename__ = "authors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=False)

    books = relationship(
        "Book",
        back_populates="author",
        cascade="all, delete-orphan",
        order_by="Book.id",
    )

    __table_args__ = (Index("idx_author_last_name", "last_name"),)

    @property
    def book_ids(self) -> list[int]:
        """Identifiers of the author's books, in catalog order."""
        return [book.id for book in self.books]


class Book(Base):
    """
    Books table.

    ``books_taken`` holds one row per user currently borrowing the book;
    ``borrower_ids`` exposes those users as a set for membership checks.
    """

    __tablename__ = "books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    author_id = Column(Integer, ForeignKey("authors.id", ondelete="CASCADE"), nullable=False)

    author = relationship("Author", back_populates="books")
    books_taken = relationship(
        "BooksTaken",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_book_title", "title"),
        Index("idx_book_author", "author_id"),
    )

    @property
    def taken_by_users(self) -> list[int]:
        """Borrower ids in lending order."""
        return [taken.user_id for taken in self.books_taken]

    @property
    def borrower_ids(self) -> set[int]:
        return {taken.user_id for taken in self.books_taken}


class User(Base):
    """Users table."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)

    books_taken = relationship(
        "BooksTaken",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("idx_user_email", "email"),)

    @property
    def book_ids(self) -> list[int]:
        """Identifiers of the books the user currently holds."""
        return [taken.book_id for taken in self.books_taken]


class BooksTaken(Base):
    """
    Lending records.

    The composite key allows a user to hold a given book at most once.
    ``date_taken`` is stored as a naive UTC timestamp.
    """

    __tablename__ = "books_taken"

    book_id = Column(Integer, ForeignKey("books.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    date_taken = Column(DateTime, nullable=False, default=func.now())

    book = relationship("Book", back_populates="books_taken")
    user = relationship("User", back_populates="books_taken")

    __table_args__ = (Index("idx_books_taken_user", "user_id"),)
