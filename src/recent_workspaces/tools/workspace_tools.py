"""Workspace tool implementations.

This module exposes operations for listing recently used workspaces across
all enabled providers and for opening one of them with the application that
reported it.  Query text never reaches discovery; clients filter and score
the returned entries themselves.
"""

from __future__ import annotations

import logging
import ntpath
import posixpath
import re

from ..models import WorkspaceReference
from ..paths.normalizer import to_file_uri
from ..state import AGGREGATOR, CONFIG, PROVIDERS

logger = logging.getLogger(__name__)

_WINDOWS_ABSOLUTE = re.compile(r"^(?:[A-Za-z]:\\|\\\\)")


def _uri_for(path: str) -> str:
    pathmod = ntpath if _WINDOWS_ABSOLUTE.match(path) else posixpath
    return to_file_uri(path, pathmod)


def _serialize(ref: WorkspaceReference) -> dict[str, object]:
    item = ref.to_dict()
    item["uri"] = _uri_for(ref.path)
    return item


def list_recent_workspaces(limit: int = 0) -> dict[str, object]:
    """List recent workspaces, provider by provider, most recent first.

    ``limit`` caps the number of entries; ``0`` or less uses the configured
    default (``RECENT_WORKSPACES_MAX_RESULTS``), which itself may be ``0`` for
    no cap.
    """
    refs = AGGREGATOR.discover()
    cap = limit if limit > 0 else CONFIG.max_results
    if cap > 0:
        refs = refs[:cap]
    return {"workspaces": [_serialize(ref) for ref in refs], "count": len(refs)}


def open_workspace(path: str) -> dict[str, object]:
    """Open a previously listed workspace with the application that reported it.

    Only paths returned by discovery can be opened.  Returns
    ``{"opened": False, "error": ...}`` for anything else.
    """
    wanted = (path or "").strip().casefold()
    if not wanted:
        return {"opened": False, "error": "path is required"}
    for ref in AGGREGATOR.discover():
        if ref.path.casefold() == wanted:
            opened = ref.open()
            logger.info("Open %s with %s: %s", ref.path, ref.provider, opened)
            return {"opened": opened, "path": ref.path, "provider": ref.provider}
    return {"opened": False, "error": f"Unknown workspace: {path}"}


def list_providers() -> dict[str, object]:
    """List the enabled providers in priority order."""
    return {
        "providers": [
            {"key": provider.key, "name": provider.name, "icon": provider.icon}
            for provider in PROVIDERS
        ]
    }
