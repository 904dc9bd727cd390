"""Logging helpers for Recent Workspaces MCP."""

from __future__ import annotations

import logging
import os

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_file_logging(path: str, logger: logging.Logger | None = None) -> bool:
    """Attach a file handler writing to ``path``.

    Calling this twice with the same path does not add a second handler.
    Returns ``False`` when the log file cannot be opened; logging setup
    problems never stop discovery.
    """
    target = logger or logging.getLogger("recent_workspaces")
    wanted = os.path.normcase(os.path.abspath(path))
    for handler in target.handlers:
        if isinstance(handler, logging.FileHandler) and os.path.normcase(handler.baseFilename) == wanted:
            return True
    try:
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError:
        return False
    handler.setFormatter(logging.Formatter(_FORMAT))
    target.addHandler(handler)
    return True
