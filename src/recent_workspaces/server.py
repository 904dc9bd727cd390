"""MCP stdio server entrypoint for Recent Workspaces.

The server runs over standard input/output using the Model Context Protocol.
It registers tool functions that clients can invoke to list recently used
workspaces and to open one of them in its editor.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any

from mcp.server.fastmcp import FastMCP

from .constants import MCP_TRANSPORT
from .state import CONFIG
from .telemetry.logger import configure_file_logging
from .tools import workspace_tools


def build_tools_dispatch() -> dict[str, Callable[..., dict[str, Any]]]:
    """Return a mapping from tool names to callables.

    Each callable accepts keyword arguments and returns a JSON-serializable
    dictionary.
    """
    return {
        "list_recent_workspaces": workspace_tools.list_recent_workspaces,
        "open_workspace": workspace_tools.open_workspace,
        "list_providers": workspace_tools.list_providers,
    }


def build_server() -> FastMCP:
    """Create the MCP server with every tool registered."""
    mcp = FastMCP("recent-workspaces-mcp")
    dispatch = build_tools_dispatch()
    for name, func in dispatch.items():
        mcp.add_tool(func, name=name)
    logging.getLogger(__name__).info("Registered %d tools", len(dispatch))
    return mcp


def main() -> None:
    """Entrypoint for the Recent Workspaces MCP server."""
    # Configure logging to stderr (stdout is used for MCP protocol)
    logging.basicConfig(
        level=getattr(logging, CONFIG.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    if CONFIG.log_file:
        configure_file_logging(CONFIG.log_file)
    logger = logging.getLogger(__name__)
    logger.info("Starting Recent Workspaces MCP server")

    mcp = build_server()

    # Run the MCP server (blocking)
    mcp.run(transport=MCP_TRANSPORT)


if __name__ == "__main__":
    main()
