"""User Tools - Library Members and Borrowing Report

Tools:
- list_users / get_user / create_user / update_user / delete_user
- search_users: Case-insensitive search on names and email
- user_report: Books held and days borrowed per user
"""

import logging
from datetime import date
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from ..database.exceptions import RepositoryException
from ..database.session import get_session
from ..database.user_repository import (
    UserCreateSchema,
    UserRepository,
    UserSearchParams,
    UserUpdateSchema,
)
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

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserIdInput(BaseModel):
    """Input schema for tools addressing a single user."""

    user_id: int = Field(..., description="Identifier of the user", ge=1, examples=[1])


class CreateUserInput(BaseModel):
    """Input schema for registering a user."""

    first_name: str = Field(..., min_length=1, max_length=100, examples=["Jane"])
    last_name: str = Field(..., min_length=1, max_length=100, examples=["Doe"])
    email: str = Field(
        ...,
        max_length=255,
        pattern=EMAIL_PATTERN,
        examples=["jane.doe@example.com"],
    )


class UpdateUserInput(UserIdInput):
    """Input schema for updating a user. Omitted fields keep their value."""

    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)


class SearchUsersInput(PageInput):
    """Fragments to search for. Blank fields are ignored."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=255, examples=["example.com"])

    def to_search_params(self) -> UserSearchParams:
        return UserSearchParams(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
        )


class UserReportInput(PageInput):
    """Input schema for the borrowing report."""

    as_of: date | None = Field(
        default=None,
        description="Date to count borrowing days up to (defaults to today, UTC)",
        examples=["2024-03-01"],
    )


async def list_users_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = PageInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid list_users parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                result = UserRepository(session).get_all(params.to_pagination_params())
            except RepositoryException as e:
                return repository_error_response("list_users", e)

        return format_success_response(
            page_message("user(s)", result),
            {
                "users": [user.model_dump() for user in result.items],
                "pagination": pagination_data(result),
            },
        )

    except Exception as e:
        logger.exception("Unexpected error in list_users tool")
        return format_error_response("Unexpected error", str(e))


async def get_user_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = UserIdInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid get_user parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                user = UserRepository(session).get_by_id(params.user_id)
            except RepositoryException as e:
                return repository_error_response("get_user", e)

        if user is None:
            return format_error_response("Not found", f"User {params.user_id} not found")

        return format_success_response(
            f"User {user.id}: {user.first_name} {user.last_name}", {"user": user.model_dump()}
        )

    except Exception as e:
        logger.exception("Unexpected error in get_user tool")
        return format_error_response("Unexpected error", str(e))


async def create_user_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = CreateUserInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid create_user parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                user = UserRepository(session).create(UserCreateSchema(**params.model_dump()))
            except RepositoryException as e:
                return repository_error_response("create_user", e)

        log_operation("create_user_success", user_id=user.id)
        return format_success_response(
            f"Created user {user.id}: {user.first_name} {user.last_name}",
            {"user": user.model_dump()},
        )

    except Exception as e:
        logger.exception("Unexpected error in create_user tool")
        return format_error_response("Unexpected error", str(e))


async def update_user_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = UpdateUserInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid update_user parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        update = UserUpdateSchema(**params.model_dump(exclude={"user_id"}))

        with get_session() as session:
            try:
                user = UserRepository(session).update(params.user_id, update)
            except RepositoryException as e:
                return repository_error_response("update_user", e)

        if user is None:
            return format_error_response("Not found", f"User {params.user_id} not found")

        log_operation("update_user_success", user_id=user.id)
        return format_success_response(f"Updated user {user.id}", {"user": user.model_dump()})

    except Exception as e:
        logger.exception("Unexpected error in update_user tool")
        return format_error_response("Unexpected error", str(e))


async def delete_user_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Delete a user. Books they held become available again."""
    try:
        try:
            params = UserIdInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid delete_user parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                deleted = UserRepository(session).delete(params.user_id)
            except RepositoryException as e:
                return repository_error_response("delete_user", e)

        if not deleted:
            return format_error_response("Not found", f"User {params.user_id} not found")

        log_operation("delete_user_success", user_id=params.user_id)
        return format_success_response(
            f"Deleted user {params.user_id}", {"user_id": params.user_id, "deleted": True}
        )

    except Exception as e:
        logger.exception("Unexpected error in delete_user tool")
        return format_error_response("Unexpected error", str(e))


async def search_users_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    try:
        try:
            params = SearchUsersInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid search_users parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                result = UserRepository(session).search(
                    params.to_search_params(), params.to_pagination_params()
                )
            except RepositoryException as e:
                return repository_error_response("search_users", e)

        return format_success_response(
            page_message("user(s)", result),
            {
                "users": [user.model_dump() for user in result.items],
                "pagination": pagination_data(result),
            },
        )

    except Exception as e:
        logger.exception("Unexpected error in search_users tool")
        return format_error_response("Unexpected error", str(e))


async def user_report_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Summarise current borrowing per user.

    Each row counts the books the user holds and the days they have held
    them in total.
    """
    try:
        try:
            params = UserReportInput.model_validate(arguments)
        except ValidationError as e:
            logger.warning("Invalid user_report parameters: %s", e)
            return format_error_response("Invalid parameters", str(e))

        with get_session() as session:
            try:
                result = UserRepository(session).generate_report(
                    params.to_pagination_params(), today=params.as_of
                )
            except RepositoryException as e:
                return repository_error_response("user_report", e)

        return format_success_response(
            page_message("user report row(s)", result),
            {
                "report": [row.model_dump() for row in result.items],
                "pagination": pagination_data(result),
            },
        )

    except Exception as e:
        logger.exception("Unexpected error in user_report tool")
        return format_error_response("Unexpected error", str(e))


list_users = {
    "name": "list_users",
    "description": "List library users, ordered by id, one page at a time.",
    "inputSchema": PageInput.model_json_schema(),
    "handler": trace_tool("list_users")(list_users_handler),
}

get_user = {
    "name": "get_user",
    "description": "Get a user by id, including the ids of the books they hold.",
    "inputSchema": UserIdInput.model_json_schema(),
    "handler": trace_tool("get_user")(get_user_handler),
}

create_user = {
    "name": "create_user",
    "description": "Register a library user.",
    "inputSchema": CreateUserInput.model_json_schema(),
    "handler": trace_tool("create_user")(create_user_handler),
}

update_user = {
    "name": "update_user",
    "description": "Update a user's names or email. Omitted fields are left unchanged.",
    "inputSchema": UpdateUserInput.model_json_schema(),
    "handler": trace_tool("update_user")(update_user_handler),
}

delete_user = {
    "name": "delete_user",
    "description": "Delete a user and their lending records.",
    "inputSchema": UserIdInput.model_json_schema(),
    "handler": trace_tool("delete_user")(delete_user_handler),
}

search_users = {
    "name": "search_users",
    "description": (
        "Search users by first name, last name and email. Each given value must be "
        "contained (case-insensitive) in the matching field."
    ),
    "inputSchema": SearchUsersInput.model_json_schema(),
    "handler": trace_tool("search_users")(search_users_handler),
}

user_report = {
    "name": "user_report",
    "description": (
        "Borrowing report: for each user, the number of books currently taken and the "
        "total number of days those books have been out."
    ),
    "inputSchema": UserReportInput.model_json_schema(),
    "handler": trace_tool("user_report")(user_report_handler),
}
