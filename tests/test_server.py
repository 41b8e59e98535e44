"""Tests for server wiring."""

from fastmcp import FastMCP

from library_mcp.server import create_server
from library_mcp.tools import all_tools


def test_every_tool_is_described():
    names = [tool["name"] for tool in all_tools]

    assert len(names) == len(set(names)) == 22
    for tool in all_tools:
        assert tool["description"]
        assert tool["inputSchema"]["type"] == "object"
        assert callable(tool["handler"])


def test_tool_names():
    assert {tool["name"] for tool in all_tools} == {
        "list_books",
        "get_book",
        "create_book",
        "update_book",
        "delete_book",
        "lend_book",
        "return_book",
        "search_books",
        "invert_book_title",
        "list_authors",
        "get_author",
        "create_author",
        "update_author",
        "delete_author",
        "search_authors",
        "list_users",
        "get_user",
        "create_user",
        "update_user",
        "delete_user",
        "search_users",
        "user_report",
    }


def test_create_server(test_config):
    mcp = create_server(test_config)

    assert isinstance(mcp, FastMCP)
    assert mcp.name == "test-library"
