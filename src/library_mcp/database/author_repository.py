"""
Author repository implementation for the Library MCP Server.

Adds name search on top of the shared CRUD operations. Deleting an author
also deletes their books (and the lending records of those books).
"""

from pydantic import BaseModel
from sqlalchemy import select

from ..database.schema import Author as AuthorDB
from ..models.author import Author as AuthorModel
from ..search.predicates import contains_clause
from .repository import BaseRepository, PaginatedResponse, PaginationParams


class AuthorCreateSchema(BaseModel):
    """Schema for creating a new author."""

    first_name: str
    middle_name: str | None = None
    last_name: str


class AuthorUpdateSchema(BaseModel):
    """Schema for updating an author - all fields optional."""

    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None


class AuthorSearchParams(BaseModel):
    """
    Search parameters for finding authors.

    Each non-blank field must be contained, case-insensitively, in the
    matching name part. Blank or missing fields are ignored.
    """

    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None


class AuthorRepository(
    BaseRepository[AuthorDB, AuthorCreateSchema, AuthorUpdateSchema, AuthorModel]
):
    """Repository for author data access."""

    @property
    def model_class(self):
        return AuthorDB

    @property
    def response_schema(self):
        return AuthorModel

    def search(
        self,
        search_params: AuthorSearchParams,
        pagination: PaginationParams | None = None,
    ) -> PaginatedResponse[AuthorModel]:
        """
        Search for authors by name parts.

        Args:
            search_params: Name fragments to look for
            pagination: Pagination parameters

        Returns:
            Paginated response with matching authors, ordered by id
        """
        query = select(AuthorDB)

        fields = [
            (AuthorDB.first_name, search_params.first_name),
            (AuthorDB.middle_name, search_params.middle_name),
            (AuthorDB.last_name, search_params.last_name),
        ]
        for column, value in fields:
            if value and value.strip():
                query = query.where(contains_clause(column, value))

        return self._paginate_query(query.order_by(AuthorDB.id), pagination)
