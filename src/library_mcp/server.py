"""Library MCP Server entry point.

Builds a FastMCP server exposing the library tools and serves it over stdio
or, when ``LIBRARY_TRANSPORT=streamable_http``, over Streamable HTTP.
"""

import logging
import signal
import sys
from typing import Any

from fastmcp import FastMCP

from .config import ServerConfig, get_config
from .database.session import get_db_manager, reset_db_manager
from .observability import initialize_observability
from .tools import all_tools

# stdout carries JSON-RPC on the stdio transport
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stderr)],
)

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Library MCP Server - manages authors, books and users. Lend and return books, "
    "search the catalog by author, text and borrower with AND/OR semantics, reverse "
    "the words of a book title, and report how long each user has held their books."
)


def create_server(config: ServerConfig | None = None) -> FastMCP:
    """A FastMCP instance with every library tool registered."""
    config = config or get_config()
    mcp = FastMCP(
        name=config.server_name,
        version=config.server_version,
        instructions=INSTRUCTIONS,
    )

    for tool in all_tools:
        mcp.tool(name=tool["name"], description=tool["description"])(tool["handler"])
        logger.debug("Registered tool %s", tool["name"])

    logger.info("%s exposes %d tools", config.server_name, len(all_tools))
    return mcp


def _apply_log_level(config: ServerConfig) -> None:
    root = logging.getLogger()
    if config.debug:
        root.setLevel(logging.DEBUG)
        return
    root.setLevel(config.log_level)
    # fastmcp logs every request at INFO
    logging.getLogger("fastmcp").setLevel(logging.WARNING)


def _shutdown(signum: int, _frame: Any) -> None:
    logger.info("Signal %s received, closing database", signum)
    reset_db_manager()
    sys.exit(0)


def run_server(config: ServerConfig) -> None:
    """Prepare logging, tracing and the database, then serve until stopped."""
    _apply_log_level(config)
    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)

    if config.observability_enabled:
        initialize_observability()

    if not get_db_manager(config.get_database_url()).verify_connection():
        logger.error("Database at %s is not reachable", config.database_path)
        sys.exit(1)

    mcp = create_server(config)
    logger.info(
        "Serving %s v%s over %s (database %s)",
        config.server_name,
        config.server_version,
        config.transport,
        config.database_path,
    )
    try:
        if config.transport == "streamable_http":
            mcp.run(transport="streamable-http", host=config.http_host, port=config.http_port)
        else:
            mcp.run(transport="stdio")
    finally:
        reset_db_manager()


def main() -> None:
    """Console script ``library-mcp``."""
    try:
        run_server(get_config())
    except KeyboardInterrupt:
        logger.info("Stopped")
    except Exception:
        logger.exception("Library MCP server terminated")
        sys.exit(1)


if __name__ == "__main__":
    main()
