"""
Book search composition.

``compose_search`` turns a ``BookSearchCriteria`` into a page of matching
books plus the total number of matches.

With ``SearchCondition.AND`` the present predicates are applied together,
so the result is their intersection and empty criteria match everything.

With ``SearchCondition.OR`` each present predicate is run on its own
against the whole source and the result sets are unioned, each book kept
once. Empty criteria give nothing to union and therefore no results. The
per-predicate queries are never merged into a single OR clause.

Store errors raised by the source propagate unchanged.
"""

import logging
from collections.abc import Sequence
from typing import NamedTuple

from .criteria import BookSearchCriteria, SearchCondition
from .predicates import BookPredicate, BookRecord, predicates_for
from .sources import BookSource

logger = logging.getLogger(__name__)


class SearchPage(NamedTuple):
    items: list[BookRecord]
    total: int


def match_books(source: BookSource, criteria: BookSearchCriteria) -> list[BookRecord]:
    """
    Return every book matching ``criteria``, before pagination.

    AND results keep the source's order. OR results are ordered by
    ascending book id, the store's natural order.
    """
    predicates = predicates_for(criteria)
    logger.debug("Composing %s search over predicates %s", criteria.condition.value, predicates)

    if criteria.condition == SearchCondition.OR:
        return _union(source, predicates)

    return source.select(predicates)


def compose_search(
    source: BookSource,
    criteria: BookSearchCriteria,
    page: int,
    page_size: int,
) -> SearchPage:
    """
    Search ``source`` and cut out one page of results.

    Args:
        source: Where the books come from
        criteria: Optional author, text and borrower filters plus the condition
        page: 1-based page number (validated by the caller)
        page_size: Maximum items per page (validated by the caller)

    Returns:
        The requested page and the total number of matches
    """
    matches = match_books(source, criteria)
    offset = (page - 1) * page_size
    return SearchPage(items=matches[offset : offset + page_size], total=len(matches))


def _union(source: BookSource, predicates: Sequence[BookPredicate]) -> list[BookRecord]:
    matched: dict[int, BookRecord] = {}
    for predicate in predicates:
        for record in source.select([predicate]):
            matched.setdefault(record.id, record)
    return sorted(matched.values(), key=lambda record: record.id)
