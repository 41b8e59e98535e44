"""
Predicates over book records.

Each predicate can be evaluated two ways: ``matches`` tests an in-memory
record, ``to_clause`` builds the equivalent SQLAlchemy expression against a
mapped book class. Both forms must select the same books. Text is compared
after Unicode case folding; on SQLite the ``casefold`` function is
registered per connection by ``build_engine``.

A record is anything exposing ``author_id``, ``title``, ``description``
and ``borrower_ids``; the mapped ``Book`` table class and the ``Book``
response model both qualify.
"""

from abc import ABC, abstractmethod
from typing import Any, Protocol

from sqlalchemy import ColumnElement, and_, func, or_, true

from .criteria import BookSearchCriteria

LIKE_ESCAPE = "\\"


class BookRecord(Protocol):
    id: int
    title: str
    description: str | None
    author_id: int

    @property
    def borrower_ids(self) -> set[int]: ...


class BookPredicate(ABC):
    """A single search condition."""

    @abstractmethod
    def matches(self, record: BookRecord) -> bool:
        """Evaluate the condition against one record."""

    @abstractmethod
    def to_clause(self, model: Any) -> ColumnElement[bool]:
        """Translate the condition into a WHERE clause over ``model``."""


class AuthorPredicate(BookPredicate):
    def __init__(self, author_id: int):
        self.author_id = author_id

    def matches(self, record: BookRecord) -> bool:
        return record.author_id == self.author_id

    def to_clause(self, model: Any) -> ColumnElement[bool]:
        return model.author_id == self.author_id

    def __repr__(self) -> str:
        return f"AuthorPredicate(author_id={self.author_id})"


class TextPredicate(BookPredicate):
    """
    Every token must occur, case-insensitively, in the title or the description.

    Tokens are AND-ed together; each token may be found in either field. The
    original text is split on whitespace, so a blank text yields no tokens and
    matches every record.
    """

    def __init__(self, text: str):
        self.tokens = text.split()

    def matches(self, record: BookRecord) -> bool:
        title = (record.title or "").casefold()
        description = (record.description or "").casefold()
        return all(
            token.casefold() in title or token.casefold() in description for token in self.tokens
        )

    def to_clause(self, model: Any) -> ColumnElement[bool]:
        if not self.tokens:
            return true()

        return and_(
            *(
                or_(
                    contains_clause(model.title, token),
                    contains_clause(model.description, token),
                )
                for token in self.tokens
            )
        )

    def __repr__(self) -> str:
        return f"TextPredicate(tokens={self.tokens!r})"


class BorrowerPredicate(BookPredicate):
    def __init__(self, user_id: int):
        self.user_id = user_id

    def matches(self, record: BookRecord) -> bool:
        return self.user_id in record.borrower_ids

    def to_clause(self, model: Any) -> ColumnElement[bool]:
        return model.books_taken.any(user_id=self.user_id)

    def __repr__(self) -> str:
        return f"BorrowerPredicate(user_id={self.user_id})"


def predicates_for(criteria: BookSearchCriteria) -> list[BookPredicate]:
    """Build the predicates for every criterion that is present, in a fixed order."""
    predicates: list[BookPredicate] = []

    if criteria.author_id is not None:
        predicates.append(AuthorPredicate(criteria.author_id))

    if criteria.has_text:
        predicates.append(TextPredicate(criteria.text))

    if criteria.user_id is not None:
        predicates.append(BorrowerPredicate(criteria.user_id))

    return predicates


def contains_pattern(token: str) -> str:
    """LIKE pattern matching ``token`` literally anywhere in a value."""
    escaped = (
        token.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", f"{LIKE_ESCAPE}%")
        .replace("_", f"{LIKE_ESCAPE}_")
    )
    return f"%{escaped}%"


def contains_clause(column: Any, value: str) -> ColumnElement[bool]:
    """Case-folded, literal substring match of ``value`` within ``column``."""
    return func.casefold(column).like(contains_pattern(value.casefold()), escape=LIKE_ESCAPE)
