"""Tool module exports for Recent Workspaces MCP.

Each submodule exposes functions that can be invoked by the server to
perform a specific operation.

Usage:

    from recent_workspaces.tools import workspace_tools
    workspace_tools.list_recent_workspaces(limit=10)

The server imports these modules and dispatches requests accordingly.
"""

from . import workspace_tools  # noqa: F401

__all__ = ["workspace_tools"]
