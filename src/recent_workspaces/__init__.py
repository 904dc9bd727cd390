"""Top‑level package for Recent Workspaces MCP.

This package discovers recently used development workspaces (folders and
solution files) from the private state of several editors and IDEs and
exposes them through a tools‑only MCP server.  See `README.md` for more
information.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
