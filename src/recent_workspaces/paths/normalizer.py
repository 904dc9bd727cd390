"""Path normalization for workspace references.

Editors record workspace locations inconsistently: ``file:`` URIs with
lower-case or percent-encoded drive letters (``file:///c%3A/src``), URI-decoded
forms with a leading slash (``/C:/src``), plain Windows paths with either
separator, and remote URIs that point at another machine.  The functions here
reduce all of them to one canonical absolute local path string, so that paths
coming from different tools can be compared case-insensitively and deduplicated.

Nothing in this module raises for bad input.  Callers receive ``None`` and
skip the candidate.
"""

from __future__ import annotations

import logging
import re
from types import ModuleType
from urllib.parse import quote, unquote, urlsplit

from .filesystem import LOCAL_FS, FileSystem

logger = logging.getLogger(__name__)

# "scheme://..." where scheme is not a single drive letter
_URI_SCHEME = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]+)://")
_SLASH_DRIVE = re.compile(r"^[/\\][A-Za-z]:")


def _is_windows(pathmod: ModuleType) -> bool:
    return pathmod.sep == "\\"


def canonicalize(path: str, pathmod: ModuleType) -> str:
    """Return ``path`` in canonical form for the flavour of ``pathmod``.

    For a Windows flavour the leading separator of ``/C:/...`` is dropped, the
    drive letter is upper-cased and forward slashes become backslashes.  The
    result is passed through ``normpath`` to fold ``.`` and ``..`` segments;
    if that fails the pre-canonical string is kept.
    """
    path = path.strip()
    if _is_windows(pathmod):
        if _SLASH_DRIVE.match(path):
            path = path[1:]
        if len(path) >= 2 and path[1] == ":" and path[0].isalpha():
            path = path[0].upper() + path[1:]
        path = path.replace("/", "\\")
    try:
        path = pathmod.normpath(path)
    except (TypeError, ValueError):
        pass
    return path


def file_uri_to_path(uri: str, pathmod: ModuleType) -> str | None:
    """Convert a ``file:`` URI to a canonical local path.

    The existence of the target is not checked.  Returns ``None`` for
    non-file URIs and for anything that cannot be parsed or percent-decoded.
    ``file://server/share/x`` maps to the UNC path ``\\\\server\\share\\x``.
    """
    try:
        parts = urlsplit(uri.strip())
        if parts.scheme.lower() != "file":
            return None
        path = unquote(parts.path, errors="strict")
        host = unquote(parts.netloc, errors="strict")
    except (ValueError, UnicodeDecodeError):
        return None

    if host and host.lower() != "localhost":
        path = "//" + host + path
    if not path or "\x00" in path:
        return None
    return canonicalize(path, pathmod)


def normalize(raw: str | None, fs: FileSystem = LOCAL_FS, log: logging.Logger | None = None) -> str | None:
    """Return the canonical local path for ``raw``, or ``None`` to skip it.

    * ``file:`` URIs are parsed, percent-decoded once and canonicalized.
    * Any other ``scheme://`` URI (``vscode-remote://``, ``vscode-vfs://``...)
      refers to a remote or virtual workspace and is rejected.
    * Bare strings are accepted only if they exist as a file or directory.
      They are canonicalized as well so that ``normalize`` is idempotent.
    """
    log = log or logger
    if not raw or not raw.strip():
        return None
    candidate = raw.strip()

    if candidate[:5].lower() == "file:":
        path = file_uri_to_path(candidate, fs.pathmod)
        if path is None:
            log.debug("Could not convert URI: %s", candidate)
        else:
            log.debug("Converted '%s' -> '%s'", candidate, path)
        return path

    if _URI_SCHEME.match(candidate):
        log.debug("Skipping non-local workspace: %s", candidate)
        return None

    if not fs.exists(candidate):
        return None
    return canonicalize(candidate, fs.pathmod)


def to_file_uri(path: str, pathmod: ModuleType) -> str:
    """Return a ``file:`` URI for a canonical path (the inverse of ``normalize``)."""
    if _is_windows(pathmod):
        slashed = path.replace("\\", "/")
        if slashed.startswith("//"):
            host, _, rest = slashed[2:].partition("/")
            return f"file://{host}/{quote(rest, safe='/:')}"
        return "file:///" + quote(slashed, safe="/:")
    return "file://" + quote(path, safe="/")
