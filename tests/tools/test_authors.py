"""Tests for the author tools."""

from library_mcp.database.schema import Book as BookDB
from library_mcp.tools.authors import (
    create_author_handler,
    delete_author_handler,
    get_author_handler,
    list_authors_handler,
    search_authors_handler,
    update_author_handler,
)


def text_of(result):
    return result["content"][0]["text"]


class TestAuthorTools:
    async def test_create_author(self, mock_get_session):
        result = await create_author_handler(
            {"first_name": "Mary", "middle_name": "Ann", "last_name": "Evans"}
        )

        assert not result.get("isError")
        assert result["data"]["author"]["full_name"] == "Mary Ann Evans"
        assert text_of(result).startswith("Created author")

    async def test_create_author_requires_last_name(self, mock_get_session):
        result = await create_author_handler({"first_name": "Plato"})

        assert result["isError"] is True
        assert text_of(result).startswith("Invalid parameters")

    async def test_get_author(self, library, mock_get_session):
        result = await get_author_handler({"author_id": library.fitzgerald.id})

        author = result["data"]["author"]
        assert author["full_name"] == "Francis Scott Fitzgerald"
        assert author["book_ids"] == [library.gatsby.id, library.tender.id]

    async def test_get_missing_author(self, mock_get_session):
        result = await get_author_handler({"author_id": 5})
        assert text_of(result) == "Not found: Author 5 not found"

    async def test_list_authors(self, library, mock_get_session):
        result = await list_authors_handler({})

        assert [a["last_name"] for a in result["data"]["authors"]] == ["Fitzgerald", "Lee"]
        assert text_of(result) == "Found 2 author(s)"

    async def test_update_author(self, library, mock_get_session):
        result = await update_author_handler({"author_id": library.lee.id, "first_name": "Nelle"})

        assert result["data"]["author"]["first_name"] == "Nelle"
        assert result["data"]["author"]["last_name"] == "Lee"

    async def test_delete_author_removes_books(self, library, mock_get_session):
        result = await delete_author_handler({"author_id": library.lee.id})

        assert result["data"]["deleted"] is True
        assert mock_get_session.get(BookDB, library.mockingbird.id) is None
        assert mock_get_session.get(BookDB, library.watchman.id) is None

    async def test_delete_missing_author(self, mock_get_session):
        result = await delete_author_handler({"author_id": 404})
        assert result["isError"] is True

    async def test_search_authors(self, library, mock_get_session):
        result = await search_authors_handler({"last_name": "gerald"})
        assert [a["id"] for a in result["data"]["authors"]] == [library.fitzgerald.id]

    async def test_search_authors_no_match(self, library, mock_get_session):
        result = await search_authors_handler({"first_name": "Ernest"})

        assert not result.get("isError")
        assert result["data"]["authors"] == []
        assert text_of(result) == "No author(s) found."
