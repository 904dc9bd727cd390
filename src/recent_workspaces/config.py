"""Configuration loading for Recent Workspaces MCP.

This module loads environment variables from a `.env` file using
`python-dotenv` and populates a `Config` object.

All variables are optional:
- LOG_LEVEL (default: 'INFO')
- RECENT_WORKSPACES_LOG_FILE (default: unset; 'temp' selects the temp dir)
- RECENT_WORKSPACES_PROVIDERS (default: every registered provider)
- RECENT_WORKSPACES_MAX_RESULTS (default: 10)
- APPDATA / LOCALAPPDATA (default: platform conventions, see below)
"""

from __future__ import annotations

import os
import sys
import tempfile
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .constants import DEFAULT_MAX_RESULTS, LOG_FILE_NAME

# Provider keys in priority order.  Kept here (not imported from the provider
# registry) so configuration can be validated without importing providers.
PROVIDER_KEYS = ("cursor", "vscode", "vscodium", "visualstudio")


def default_roaming_dir() -> str | None:
    """Return the per-user roaming application data directory, if any.

    Windows uses ``APPDATA``.  Elsewhere the VS Code family keeps its state
    under ``~/Library/Application Support`` (macOS) or ``$XDG_CONFIG_HOME``
    falling back to ``~/.config`` (Linux and other POSIX systems).
    """
    appdata = os.getenv("APPDATA")
    if appdata:
        return appdata
    home = os.path.expanduser("~")
    if sys.platform == "win32":
        return None
    if sys.platform == "darwin":
        return os.path.join(home, "Library", "Application Support")
    return os.getenv("XDG_CONFIG_HOME") or os.path.join(home, ".config")


def default_local_dir() -> str | None:
    """Return the per-user local application data directory (Windows only)."""
    return os.getenv("LOCALAPPDATA") or None


def _parse_providers(raw: str | None) -> list[str]:
    if not raw:
        return list(PROVIDER_KEYS)
    keys = [key.strip().lower() for key in raw.split(",") if key.strip()]
    unknown = [key for key in keys if key not in PROVIDER_KEYS]
    if unknown:
        raise RuntimeError(
            f"Unknown providers in RECENT_WORKSPACES_PROVIDERS: {', '.join(unknown)}. "
            f"Known providers: {', '.join(PROVIDER_KEYS)}"
        )
    # Registry order decides priority, not the order given in the variable
    return [key for key in PROVIDER_KEYS if key in keys]


def _parse_max_results(raw: str | None) -> int:
    if raw is None or raw.strip() == "":
        return DEFAULT_MAX_RESULTS
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"RECENT_WORKSPACES_MAX_RESULTS must be an integer, got '{raw}'") from exc
    if value < 0:
        raise RuntimeError("RECENT_WORKSPACES_MAX_RESULTS must not be negative")
    return value


def _parse_log_file(raw: str | None) -> str | None:
    if not raw:
        return None
    if raw.strip().lower() == "temp":
        return os.path.join(tempfile.gettempdir(), LOG_FILE_NAME)
    return raw.strip()


@dataclass
class Config:
    """Configuration values loaded from the environment."""

    log_level: str = "INFO"
    log_file: str | None = None
    enabled_providers: list[str] = field(default_factory=lambda: list(PROVIDER_KEYS))
    max_results: int = DEFAULT_MAX_RESULTS
    roaming_dir: str | None = None
    local_dir: str | None = None

    @classmethod
    def load_from_env(cls) -> Config:
        """Load configuration from environment variables.

        The `.env` file is loaded if present.  Raises `RuntimeError` if a
        variable is present but invalid.
        """
        load_dotenv()

        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file=_parse_log_file(os.getenv("RECENT_WORKSPACES_LOG_FILE")),
            enabled_providers=_parse_providers(os.getenv("RECENT_WORKSPACES_PROVIDERS")),
            max_results=_parse_max_results(os.getenv("RECENT_WORKSPACES_MAX_RESULTS")),
            roaming_dir=default_roaming_dir(),
            local_dir=default_local_dir(),
        )
