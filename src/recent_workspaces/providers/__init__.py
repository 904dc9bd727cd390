"""Workspace providers, one per editor or IDE."""

from .base import WorkspaceProvider
from .json_recents import (
    CursorProvider,
    JsonRecentsProvider,
    VSCodeProvider,
    VSCodiumProvider,
    extract_paths_from_storage,
)
from .launcher import ProcessLauncher
from .registry import PROVIDER_CLASSES, build_providers
from .visual_studio import VisualStudioProvider

__all__ = [
    "WorkspaceProvider",
    "JsonRecentsProvider",
    "CursorProvider",
    "VSCodeProvider",
    "VSCodiumProvider",
    "VisualStudioProvider",
    "ProcessLauncher",
    "PROVIDER_CLASSES",
    "build_providers",
    "extract_paths_from_storage",
]
