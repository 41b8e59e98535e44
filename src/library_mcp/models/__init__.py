"""
Library MCP Server Models.

Pydantic models returned by repositories and serialised into tool
responses:

- Author: catalog authors with the ids of their books
- Book: catalog entries with the ids of their current borrowers
- User: library members with the ids of the books they hold
- UserReport: per-user borrowing summary
"""

from .author import Author
from .book import Book
from .user import User, UserReport

__all__ = [
    "Author",
    "Book",
    "User",
    "UserReport",
]
