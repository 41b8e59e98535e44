"""
MCP Tools for the Library Server.

Each tool is a dictionary with ``name``, ``description``, ``inputSchema``
and an async ``handler`` taking the raw ``arguments`` dict. The server
registers everything in ``all_tools``.
"""

from .authors import (
    create_author,
    delete_author,
    get_author,
    list_authors,
    search_authors,
    update_author,
)
from .books import (
    create_book,
    delete_book,
    get_book,
    invert_book_title,
    lend_book,
    list_books,
    return_book,
    search_books,
    update_book,
)
from .users import (
    create_user,
    delete_user,
    get_user,
    list_users,
    search_users,
    update_user,
    user_report,
)

all_tools = [
    list_books,
    get_book,
    create_book,
    update_book,
    delete_book,
    lend_book,
    return_book,
    search_books,
    invert_book_title,
    list_authors,
    get_author,
    create_author,
    update_author,
    delete_author,
    search_authors,
    list_users,
    get_user,
    create_user,
    update_user,
    delete_user,
    search_users,
    user_report,
]

__all__ = [
    "all_tools",
    "create_author",
    "create_book",
    "create_user",
    "delete_author",
    "delete_book",
    "delete_user",
    "get_author",
    "get_book",
    "get_user",
    "invert_book_title",
    "lend_book",
    "list_authors",
    "list_books",
    "list_users",
    "return_book",
    "search_authors",
    "search_books",
    "search_users",
    "update_author",
    "update_book",
    "update_user",
    "user_report",
]
