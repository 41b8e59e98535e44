"""
Library MCP Server Package.

An MCP (Model Context Protocol) server for a small library: authors, books,
members, lending and a few search and reporting tools.

Key Components:
- models: Pydantic models returned by the data layer
- database: SQLAlchemy schema, sessions and repositories
- search: book search predicates and AND/OR composition
- text: title word inversion
- tools: MCP tools registered by the server
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
