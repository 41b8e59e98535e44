"""
Book search for the Library MCP Server.

Builds predicates from optional author, text and borrower criteria and
combines them with AND or OR semantics over any ``BookSource``.
"""

from .composer import SearchPage, compose_search, match_books
from .criteria import BookSearchCriteria, SearchCondition
from .predicates import (
    AuthorPredicate,
    BookPredicate,
    BookRecord,
    BorrowerPredicate,
    TextPredicate,
    contains_clause,
    contains_pattern,
    predicates_for,
)
from .sources import BookSource, InMemoryBookSource

__all__ = [
    "AuthorPredicate",
    "BookPredicate",
    "BookRecord",
    "BookSearchCriteria",
    "BookSource",
    "BorrowerPredicate",
    "InMemoryBookSource",
    "SearchCondition",
    "SearchPage",
    "TextPredicate",
    "compose_search",
    "contains_clause",
    "contains_pattern",
    "match_books",
    "predicates_for",
]
