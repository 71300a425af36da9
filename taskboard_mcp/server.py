"""FastMCP server initialization for Taskboard MCP."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from taskboard_mcp.config import load_settings
from taskboard_mcp.core.taskboard import Taskboard
from taskboard_mcp.logging_setup import setup_logging
from taskboard_mcp.utils.db import TaskboardDB

logger = logging.getLogger(__name__)


@asynccontextmanager
async def taskboard_lifespan(server: FastMCP) -> AsyncIterator[Taskboard]:
    """Open the store for the lifetime of the server; tools reach it through the request context."""
    settings = load_settings()
    board = Taskboard(TaskboardDB(settings.db_path, enable_fts=settings.enable_fts))
    try:
        yield board
    finally:
        board.close()
        logger.info("Taskboard store closed")


# Initialize the MCP server
mcp = FastMCP("taskboard_mcp", lifespan=taskboard_lifespan)


def run() -> None:
    """Run the MCP server."""
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_file)
    logger.info("Starting taskboard_mcp (db=%s)", settings.db_path)
    mcp.run()

