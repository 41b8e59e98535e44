"""
Shared repository machinery for the library store.

Tool handlers never see ORM objects: repositories accept Pydantic input
schemas and hand back Pydantic response models. Reads run through
``safe_query`` and writes through ``safe_commit``, so a failing store always
shows up as ``RepositoryException`` with the driver error as its cause.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field
from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..database.schema import Base
from ..database.session import safe_commit, safe_query
from .exceptions import DuplicateError, NotFoundError, RepositoryException

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)
ResponseSchemaType = TypeVar("ResponseSchemaType", bound=BaseModel)

MAX_PAGE_SIZE = 100

__all__ = [
    "BaseRepository",
    "DuplicateError",
    "NotFoundError",
    "PaginatedResponse",
    "PaginationParams",
    "RepositoryException",
]


class PaginationParams(BaseModel):
    """1-based page number and page size."""

    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def validate_params(self) -> None:
        if self.page < 1:
            raise ValueError("Page must be >= 1")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"Page size must be between 1 and {MAX_PAGE_SIZE}")


class PaginatedResponse(BaseModel, Generic[ResponseSchemaType]):
    """
    One page of results.

    ``total`` counts every match, not just the items on this page.
    """

    items: list[ResponseSchemaType] = Field(default_factory=list)
    total: int
    page: int
    page_size: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(
        cls, items: list[Any], total: int, pagination: PaginationParams
    ) -> "PaginatedResponse[Any]":
        """Derive the page counters from ``total`` and ``pagination``."""
        size = pagination.page_size
        return cls(
            items=items,
            total=total,
            page=pagination.page,
            page_size=size,
            total_pages=-(-total // size),
            has_next=pagination.page * size < total,
            has_previous=pagination.page > 1,
        )


class BaseRepository(
    ABC, Generic[ModelType, CreateSchemaType, UpdateSchemaType, ResponseSchemaType]
):
    """
    CRUD shared by the author, book and user repositories.

    Subclasses name their ORM class and response model; everything keyed by
    the integer ``id`` column is handled here.
    """

    def __init__(self, session: Session):
        self.session = session

    @property
    @abstractmethod
    def model_class(self) -> type[ModelType]: ...

    @property
    @abstractmethod
    def response_schema(self) -> type[ResponseSchemaType]: ...

    @property
    def entity_name(self) -> str:
        return self.model_class.__name__

    def _to_response_model(self, row: ModelType) -> ResponseSchemaType:
        return self.response_schema.model_validate(row, from_attributes=True)

    def _get_db_object(self, id: int, purpose: str = "get") -> ModelType | None:
        return safe_query(
            self.session,
            lambda s: s.get(self.model_class, id),
            f"Failed to {purpose} {self.entity_name}",
        )

    def get_by_id(self, id: int) -> ResponseSchemaType | None:
        """The entity with ``id``, or None when there is none."""
        row = self._get_db_object(id)
        return None if row is None else self._to_response_model(row)

    def get_all(
        self, pagination: PaginationParams | None = None
    ) -> PaginatedResponse[ResponseSchemaType]:
        """
        A page of every entity in ascending id order.

        Raises:
            ValueError: for a page below 1 or a page size outside 1..100
            RepositoryException: when the store fails
        """
        return self._paginate_query(
            select(self.model_class).order_by(self.model_class.id), pagination
        )

    def create(self, data: CreateSchemaType) -> ResponseSchemaType:
        """
        Insert a new row built from ``data`` and return it with its new id.

        Raises:
            DuplicateError: on a uniqueness violation
            RepositoryException: on any other store failure
        """
        row = self.model_class(**data.model_dump())
        self.session.add(row)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateError(f"{self.entity_name} already exists: {e!s}") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise RepositoryException(f"Database error: {e!s}") from e

        self.session.refresh(row)
        return self._to_response_model(row)

    def update(self, id: int, data: UpdateSchemaType) -> ResponseSchemaType | None:
        """
        Copy the non-None fields of ``data`` onto the entity.

        Returns None when no entity has ``id``.
        """
        row = self._get_db_object(id, "load")
        if row is None:
            return None

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in changes.items():
            setattr(row, field, value)

        safe_commit(self.session, f"update {self.entity_name}")
        self.session.refresh(row)
        return self._to_response_model(row)

    def delete(self, id: int) -> bool:
        """Remove the entity; False when it did not exist."""
        row = self._get_db_object(id, "load")
        if row is None:
            return False

        self.session.delete(row)
        safe_commit(self.session, f"delete {self.entity_name}")
        return True

    def exists(self, id: int) -> bool:
        return self._get_db_object(id, "check") is not None

    def _paginate_query(
        self, query: Select, pagination: PaginationParams | None
    ) -> PaginatedResponse[ResponseSchemaType]:
        """Count every row ``query`` selects, then load only the requested page."""
        pagination = pagination or PaginationParams()
        pagination.validate_params()

        counted = select(func.count()).select_from(query.order_by(None).subquery())
        total = safe_query(
            self.session,
            lambda s: s.execute(counted).scalar_one(),
            f"Failed to count {self.entity_name} records",
        )

        window = query.offset(pagination.offset).limit(pagination.page_size)
        rows = safe_query(
            self.session,
            lambda s: s.execute(window).unique().scalars().all(),
            f"Failed to list {self.entity_name} records",
        )

        items = [self._to_response_model(row) for row in rows]
        return PaginatedResponse[self.response_schema].build(items, total, pagination)
