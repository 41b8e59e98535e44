"""Author model for the Library MCP Server."""

from pydantic import BaseModel, ConfigDict, Field


class Author(BaseModel):
    """An author in the library catalog."""

    id: int = Field(..., description="Unique identifier for the author", ge=1)

    first_name: str = Field(
        ...,
        description="Author's first name",
        min_length=1,
        max_length=100,
        examples=["Francis", "Harper"],
    )

    middle_name: str | None = Field(
        None,
        description="Author's middle name, if any",
        max_length=100,
        examples=["Scott"],
    )

    last_name: str = Field(
        ...,
        description="Author's last name",
        min_length=1,
        max_length=100,
        examples=["Fitzgerald", "Lee"],
    )

    book_ids: list[int] = Field(
        default_factory=list,
        description="Identifiers of books written by this author",
        examples=[[1, 4], []],
    )

    @property
    def full_name(self) -> str:
        """First, middle and last name joined with single spaces."""
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(part for part in parts if part)

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "first_name": "Francis",
                "middle_name": "Scott",
                "last_name": "Fitzgerald",
                "book_ids": [1],
            }
        },
    )
