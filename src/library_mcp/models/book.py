"""
Book model for the Library MCP Server.

This is the shape every book takes on its way out of the data layer:
repositories build it from the SQLAlchemy row and tools serialise it into
their ``data`` payloads.
"""

from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    """
    Represents a book in the library catalog.

    ``taken_by_users`` lists the users currently borrowing the book, which
    is what the borrower search filter tests membership against.
    """

    id: int = Field(..., description="Unique identifier for the book", ge=1)

    title: str = Field(
        ...,
        description="The title of the book",
        min_length=1,
        max_length=500,
        examples=["The Great Gatsby", "To Kill a Mockingbird"],
    )

    description: str | None = Field(
        None,
        description="Brief description or summary of the book",
        examples=["A classic American novel set in the Jazz Age..."],
    )

    author_id: int = Field(
        ...,
        description="Identifier of the book's author",
        ge=1,
        examples=[1, 42],
    )

    taken_by_users: list[int] = Field(
        default_factory=list,
        description="Identifiers of users currently borrowing this book",
        examples=[[], [3, 7]],
    )

    @property
    def borrower_ids(self) -> set[int]:
        return set(self.taken_by_users)

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "The Great Gatsby",
                "description": "A classic American novel set in the Jazz Age...",
                "author_id": 1,
                "taken_by_users": [3],
            }
        },
    )
