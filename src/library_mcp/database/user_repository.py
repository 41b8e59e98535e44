"""
User repository implementation for the Library MCP Server.

Adds member search and the borrowing report to the shared CRUD operations.
"""

import logging
from datetime import UTC, date, datetime

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload

from ..database.schema import User as UserDB
from ..database.session import safe_query
from ..models.user import User as UserModel
from ..models.user import UserReport
from ..search.predicates import contains_clause
from .repository import BaseRepository, PaginatedResponse, PaginationParams

logger = logging.getLogger(__name__)


class UserCreateSchema(BaseModel):
    """Schema for creating a new user."""

    first_name: str
    last_name: str
    email: str


class UserUpdateSchema(BaseModel):
    """Schema for updating a user - all fields optional."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


class UserSearchParams(BaseModel):
    """Case-insensitive "contains" filters; blank fields are ignored."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


class UserRepository(BaseRepository[UserDB, UserCreateSchema, UserUpdateSchema, UserModel]):
    """Repository for user data access."""

    @property
    def model_class(self):
        return UserDB

    @property
    def response_schema(self):
        return UserModel

    def search(
        self,
        search_params: UserSearchParams,
        pagination: PaginationParams | None = None,
    ) -> PaginatedResponse[UserModel]:
        """
        Search for users by name and email.

        Returns:
            Paginated response with matching users, ordered by id
        """
        query = select(UserDB)

        fields = [
            (UserDB.first_name, search_params.first_name),
            (UserDB.last_name, search_params.last_name),
            (UserDB.email, search_params.email),
        ]
        for column, value in fields:
            if value and value.strip():
                query = query.where(contains_clause(column, value))

        return self._paginate_query(query.order_by(UserDB.id), pagination)

    def generate_report(
        self,
        pagination: PaginationParams | None = None,
        today: date | None = None,
    ) -> PaginatedResponse[UserReport]:
        """
        Build one page of the borrowing report.

        For every user (ordered by id) the report holds the number of books
        currently taken and the sum, over those books, of whole days elapsed
        between the date taken and ``today``.

        Args:
            pagination: Pagination parameters
            today: Reference date, defaults to the current UTC date

        Returns:
            Paginated response of UserReport rows
        """
        if not pagination:
            pagination = PaginationParams()

        pagination.validate_params()

        if today is None:
            today = datetime.now(UTC).date()

        total = (
            safe_query(
                self.session,
                lambda s: s.execute(select(func.count()).select_from(UserDB)).scalar(),
                "Failed to count users",
            )
            or 0
        )

        query = (
            select(UserDB)
            .options(selectinload(UserDB.books_taken))
            .order_by(UserDB.id)
            .offset(pagination.offset)
            .limit(pagination.page_size)
        )
        users = safe_query(
            self.session,
            lambda s: s.execute(query).scalars().all(),
            "Failed to build user report",
        )

        rows = [
            UserReport(
                user_id=user.id,
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
                total_books=len(user.books_taken),
                total_days=sum(
                    (today - taken.date_taken.date()).days for taken in user.books_taken
                ),
            )
            for user in users
        ]

        logger.debug("Built report page %s with %s rows", pagination.page, len(rows))
        return PaginatedResponse[UserReport].build(rows, total, pagination)
