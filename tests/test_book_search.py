"""Tests for BookRepository.search, the database-backed book search."""

import pytest
from sqlalchemy.exc import OperationalError

from library_mcp.database.book_repository import BookCreateSchema
from library_mcp.database.exceptions import RepositoryException
from library_mcp.database.repository import PaginationParams
from library_mcp.search import BookSearchCriteria, InMemoryBookSource, SearchCondition, match_books


def ids(result):
    return [book.id for book in result.items]


class TestAndSearch:
    def test_no_criteria_returns_every_book(self, book_repo, library):
        result = book_repo.search(BookSearchCriteria())

        assert ids(result) == [
            library.gatsby.id,
            library.tender.id,
            library.mockingbird.id,
            library.watchman.id,
        ]
        assert result.total == 4

    def test_multi_token_text(self, book_repo, library):
        result = book_repo.search(BookSearchCriteria(text="great GATSBY"))
        assert ids(result) == [library.gatsby.id]

    def test_tokens_may_come_from_description(self, book_repo, library):
        result = book_repo.search(BookSearchCriteria(text="mockingbird south"))
        assert ids(result) == [library.mockingbird.id]

    def test_book_without_description_matches_on_title(self, book_repo, library):
        result = book_repo.search(BookSearchCriteria(text="watchman"))
        assert ids(result) == [library.watchman.id]

    def test_author_and_borrower_intersect(self, book_repo, library):
        criteria = BookSearchCriteria(author_id=library.lee.id, user_id=library.john.id)
        assert ids(book_repo.search(criteria)) == [library.mockingbird.id]

    def test_common_substring_matches_all_titles(self, book_repo, library):
        book_repo.create(BookCreateSchema(title="Title1", author_id=library.lee.id))
        book_repo.create(BookCreateSchema(title="Title2", author_id=library.lee.id))

        result = book_repo.search(BookSearchCriteria(text="Title"))

        assert [book.title for book in result.items] == ["Title1", "Title2"]
        assert result.total == 2

    def test_blank_text_matches_everything(self, book_repo, library):
        assert book_repo.search(BookSearchCriteria(text=" \t ")).total == 4

    def test_like_wildcards_match_literally(self, book_repo, library):
        percent = book_repo.create(BookCreateSchema(title="100% Pure", author_id=library.lee.id))
        book_repo.create(BookCreateSchema(title="1000 Pure", author_id=library.lee.id))
        underscore = book_repo.create(
            BookCreateSchema(title="snake_case", author_id=library.lee.id)
        )
        book_repo.create(BookCreateSchema(title="snakeXcase", author_id=library.lee.id))

        assert ids(book_repo.search(BookSearchCriteria(text="100%"))) == [percent.id]
        assert ids(book_repo.search(BookSearchCriteria(text="e_c"))) == [underscore.id]

    def test_non_ascii_text_is_case_insensitive(self, book_repo, library):
        emile = book_repo.create(BookCreateSchema(title="ÉMILE", author_id=library.lee.id))
        strasse = book_repo.create(
            BookCreateSchema(
                title="Berlin", description="Life on the GROSSE STRASSE", author_id=library.lee.id
            )
        )

        assert ids(book_repo.search(BookSearchCriteria(text="émile"))) == [emile.id]
        assert ids(book_repo.search(BookSearchCriteria(text="Straße"))) == [strasse.id]

    def test_matches_in_memory_source(self, book_repo, library):
        book_repo.create(BookCreateSchema(title="ÜBER ALLES", author_id=library.lee.id))
        book_repo.create(BookCreateSchema(title="Œuvres complètes", author_id=library.lee.id))
        every_book = book_repo.get_all(PaginationParams(page=1, page_size=100)).items
        in_memory = InMemoryBookSource(every_book)

        for text in ["über", "ŒUVRES COMPLÈTES", "great", "mockingbird south", "zzz"]:
            criteria = BookSearchCriteria(text=text)
            assert ids(book_repo.search(criteria)) == [
                book.id for book in match_books(in_memory, criteria)
            ], text

    def test_results_carry_borrowers(self, book_repo, library):
        result = book_repo.search(BookSearchCriteria(user_id=library.jane.id))

        assert ids(result) == [library.gatsby.id, library.mockingbird.id]
        assert set(result.items[1].taken_by_users) == {library.jane.id, library.john.id}


class TestOrSearch:
    def test_no_criteria_returns_nothing(self, book_repo, library):
        result = book_repo.search(BookSearchCriteria(condition=SearchCondition.OR))
        assert result.items == []
        assert result.total == 0

    def test_union_without_duplicates(self, book_repo, library):
        criteria = BookSearchCriteria(
            author_id=library.lee.id, user_id=library.jane.id, condition="OR"
        )
        result = book_repo.search(criteria)

        assert ids(result) == [library.gatsby.id, library.mockingbird.id, library.watchman.id]
        assert result.total == 3

    def test_text_or_borrower(self, book_repo, library):
        criteria = BookSearchCriteria(text="riviera", user_id=library.john.id, condition="OR")
        assert ids(book_repo.search(criteria)) == [library.tender.id, library.mockingbird.id]


class TestSearchPagination:
    def test_window_and_total(self, book_repo, library):
        result = book_repo.search(BookSearchCriteria(), PaginationParams(page=2, page_size=3))

        assert ids(result) == [library.watchman.id]
        assert result.total == 4
        assert result.total_pages == 2
        assert not result.has_next
        assert result.has_previous

    def test_or_results_are_windowed(self, book_repo, library):
        criteria = BookSearchCriteria(
            author_id=library.lee.id, user_id=library.jane.id, condition="OR"
        )
        result = book_repo.search(criteria, PaginationParams(page=1, page_size=2))

        assert ids(result) == [library.gatsby.id, library.mockingbird.id]
        assert result.total == 3
        assert result.has_next

    @pytest.mark.parametrize(("page", "page_size"), [(0, 10), (1, 0), (1, 101)])
    def test_invalid_pagination_is_rejected(self, book_repo, page, page_size):
        with pytest.raises(ValueError):
            book_repo.search(BookSearchCriteria(), PaginationParams(page=page, page_size=page_size))


def test_store_failure_is_wrapped(book_repo, test_session, monkeypatch):
    def failing_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(test_session, "execute", failing_execute)

    with pytest.raises(RepositoryException) as exc_info:
        book_repo.search(BookSearchCriteria(text="anything"))

    assert isinstance(exc_info.value.__cause__, OperationalError)
