"""Author Tools - Catalog Authors

Tools:
- list_authors / get_author / create_author / update_author / delete_author
- search_authors: Case-insensitive name search

Deleting an author also deletes the author's books.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..database.author_repository import (
    AuthorCreateSchema,
    AuthorRepository,
    AuthorSearchParams,
    AuthorUpdateSchema,
)
from ..database.exceptions import RepositoryException
from ..database.session import get_session
from ..models.author import Author
from ..observability import trace_tool
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


def _author_data(author: Author) -> dict[str, Any]:
    data = author.model_dump()
    data["full_name"] = author.full_name
    return data


class AuthorIdInput(BaseModel):
    """Input schema for tools addressing a single author."""

    author_id: int = Field(..., description="Identifier of the author", ge=1, examples=[1])


class CreateAuthorInput(BaseModel):
    """Input schema for creating an author."""

    first_name: str = Field(..., min_length=1, max_length=100, examples=["Harper"])
    middle_name: str | None = Field(default=None, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100, examples=["Lee"])


class UpdateAuthorInput(AuthorIdInput):
    """Input schema for updating an author. Omitted fields keep their value."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    middle_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)


class SearchAuthorsInput(PageInput):
    """Name fragments to search for. Blank fields are ignored."""

    first_name: str | None = Field(default=None, max_length=100, examples=["harp"])
    middle_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100, examples=["lee"])

    def to_search_params(self) -> AuthorSearchParams:
        return AuthorSearchParams(
            first_name=self.first_name,
            middle_name=self.middle_name,
            last_name=self.last_name,
        )


async def list_authors_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = PageInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid list_authors parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                result = AuthorRepository(session).get_all(params.to_pagination_params())
            except RepositoryException as e:
                return repository_error_response("list_authors", e)

        return format_success_response(
            page_message("author(s)", result),
            {
                "authors": [_author_data(author) for author in result.items],
                "pagination": pagination_data(result),
            },
        )

    except Exception as e:
        logger.exception("Unexpected error in list_authors tool")
        return format_error_response("Unexpected error", str(e))


async def get_author_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = AuthorIdInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid get_author parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                author = AuthorRepository(session).get_by_id(params.author_id)
            except RepositoryException as e:
                return repository_error_response("get_author", e)

        if author is None:
            return format_error_response("Not found", f"Author {params.author_id} not found")

        return format_success_response(
            f"Author {author.id}: {author.full_name}", {"author": _author_data(author)}
        )

    except Exception as e:
        logger.exception("Unexpected error in get_author tool")
        return format_error_response("Unexpected error", str(e))


async def create_author_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = CreateAuthorInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid create_author parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                author = AuthorRepository(session).create(
                    AuthorCreateSchema(**params.model_dump())
                )
            except RepositoryException as e:
                return repository_error_response("create_author", e)

        log_operation("create_author_success", author_id=author.id)
        return format_success_response(
            f"Created author {author.id}: {author.full_name}", {"author": _author_data(author)}
        )

    except Exception as e:
        logger.exception("Unexpected error in create_author tool")
        return format_error_response("Unexpected error", str(e))


async def update_author_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = UpdateAuthorInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid update_author parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        update = AuthorUpdateSchema(**params.model_dump(exclude={"author_id"}))

        with get_session() as session:
            try:
                author = AuthorRepository(session).update(params.author_id, update)
            except RepositoryException as e:
                return repository_error_response("update_author", e)

        if author is None:
            return format_error_response("Not found", f"Author {params.author_id} not found")

        log_operation("update_author_success", author_id=author.id)
        return format_success_response(
            f"Updated author {author.id}: {author.full_name}", {"author": _author_data(author)}
        )

    except Exception as e:
        logger.exception("Unexpected error in update_author tool")
        return format_error_response("Unexpected error", str(e))


async def delete_author_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Delete an author along with every book they wrote."""
    try:
        try:
            params = AuthorIdInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid delete_author parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                deleted = AuthorRepository(session).delete(params.author_id)
            except RepositoryException as e:
                return repository_error_response("delete_author", e)

        if not deleted:
            return format_error_response("Not found", f"Author {params.author_id} not found")

        log_operation("delete_author_success", author_id=params.author_id)
        return format_success_response(
            f"Deleted author {params.author_id} and their books",
            {"author_id": params.author_id, "deleted": True},
        )

    except Exception as e:
        logger.exception("Unexpected error in delete_author tool")
        return format_error_response("Unexpected error", str(e))


async def search_authors_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = SearchAuthorsInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid search_authors parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                result = AuthorRepository(session).search(
                    params.to_search_params(), params.to_pagination_params()
                )
            except RepositoryException as e:
                return repository_error_response("search_authors", e)

        return format_success_response(
            page_message("author(s)", result),
            {
                "authors": [_author_data(author) for author in result.items],
                "pagination": pagination_data(result),
            },
        )

    except Exception as e:
        logger.exception("Unexpected error in search_authors tool")
        return format_error_response("Unexpected error", str(e))


list_authors = {
    "name": "list_authors",
    "description": "List authors, ordered by id, one page at a time.",
    "inputSchema": PageInput.model_json_schema(),
    "handler": trace_tool("list_authors")(list_authors_handler),
}

get_author = {
    "name": "get_author",
    "description": "Get an author by id, including the ids of their books.",
    "inputSchema": AuthorIdInput.model_json_schema(),
    "handler": trace_tool("get_author")(get_author_handler),
}

create_author = {
    "name": "create_author",
    "description": "Add an author. The middle name is optional.",
    "inputSchema": CreateAuthorInput.model_json_schema(),
    "handler": trace_tool("create_author")(create_author_handler),
}

update_author = {
    "name": "update_author",
    "description": "Update an author's names. Omitted fields are left unchanged.",
    "inputSchema": UpdateAuthorInput.model_json_schema(),
    "handler": trace_tool("update_author")(update_author_handler),
}

delete_author = {
    "name": "delete_author",
    "description": "Delete an author. Their books are deleted as well.",
    "inputSchema": AuthorIdInput.model_json_schema(),
    "handler": trace_tool("delete_author")(delete_author_handler),
}

search_authors = {
    "name": "search_authors",
    "description": (
        "Search authors by first, middle and last name. Each given value must be "
        "contained (case-insensitive) in the matching name."
    ),
    "inputSchema": SearchAuthorsInput.model_json_schema(),
    "handler": trace_tool("search_authors")(search_authors_handler),
}
