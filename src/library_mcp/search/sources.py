"""
Record sources the composer can search.

A source answers one question: which records satisfy all of these
predicates? The SQL-backed source lives with the book repository; the
in-memory source here filters records that are already loaded.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from .predicates import BookPredicate, BookRecord


class BookSource(Protocol):
    def select(self, predicates: Sequence[BookPredicate]) -> list[BookRecord]:
        """Return every record satisfying all ``predicates``, in the source's natural order.

        An empty sequence selects every record.
        """
        ...


class InMemoryBookSource:
    """Full-scan source over a finite, already-materialised collection."""

    def __init__(self, records: Iterable[BookRecord]):
        self.records = list(records)

    def select(self, predicates: Sequence[BookPredicate]) -> list[BookRecord]:
        return [
            record
            for record in self.records
            if all(predicate.matches(record) for predicate in predicates)
        ]
