"""Book search criteria."""

import enum

from pydantic import BaseModel, Field, field_validator


class SearchCondition(str, enum.Enum):
    """How the individual criteria are combined."""

    AND = "and"  # every present criterion must match
    OR = "or"  # any present criterion may match


class BookSearchCriteria(BaseModel):
    """
    Optional filters for a book search.

    A field left as ``None`` is not applied. ``text`` is matched against the
    book title and description; an empty string counts as absent.
    """

    author_id: int | None = Field(default=None, description="Only books by this author")
    text: str | None = Field(
        default=None,
        description="Words that must all appear in the title or description",
        examples=["great gatsby"],
    )
    user_id: int | None = Field(default=None, description="Only books borrowed by this user")
    condition: SearchCondition = Field(
        default=SearchCondition.AND,
        description="Combine criteria with AND (all) or OR (any)",
    )

    @field_validator("condition", mode="before")
    @classmethod
    def normalize_condition(cls, v):
        """Accept "AND"/"or" in any case, and 0/1 for AND/OR."""
        if isinstance(v, bool):
            return v
        if isinstance(v, int):
            return {0: SearchCondition.AND, 1: SearchCondition.OR}.get(v, v)
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @property
    def has_text(self) -> bool:
        return bool(self.text)
