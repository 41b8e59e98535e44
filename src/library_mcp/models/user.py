"""
User models for the Library MCP Server.

``User`` is a library member as returned by the user tools; ``UserReport``
is one row of the borrowing report.
"""

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """A registered library member."""

    id: int = Field(..., description="Unique identifier for the user", ge=1)

    first_name: str = Field(..., min_length=1, max_length=100, examples=["Jane"])

    last_name: str = Field(..., min_length=1, max_length=100, examples=["Doe"])

    email: str = Field(
        ...,
        description="Contact email address",
        max_length=255,
        examples=["jane.doe@example.com"],
    )

    book_ids: list[int] = Field(
        default_factory=list,
        description="Identifiers of books the user currently holds",
        examples=[[], [1, 2]],
    )

    model_config = ConfigDict(from_attributes=True)


class UserReport(BaseModel):
    """
    Borrowing summary for one user.

    ``total_days`` adds up, over every book the user currently holds, the
    number of whole days since the book was taken.
    """

    user_id: int
    first_name: str
    last_name: str
    email: str
    total_books: int = Field(0, ge=0)
    total_days: int = 0
