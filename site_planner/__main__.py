# site_planner/__main__.py
"""
Entry point for the site-planner MCP server.

Server imports configure_logging() first to prevent stdout pollution.
FastMCP has no lifecycle hooks, so the store is opened here before serving.
"""

import asyncio
import logging

# Import server (which configures logging before anything else)
from site_planner.server import initialize_lifecycle, mcp, shutdown_lifecycle

logger = logging.getLogger(__name__)


async def main() -> None:
    """Open the store, then run the MCP server over stdio until it exits."""
    await initialize_lifecycle()
    try:
        logger.info("Starting MCP server on stdio transport")
        await mcp.run_stdio_async()
    finally:
        await shutdown_lifecycle()


if __name__ == "__main__":
    asyncio.run(main())
