"""Explicit provider registry.

Providers are listed here in priority order: when two providers report the
same path, the one registered first keeps it.  Adding a provider means adding
one entry to ``PROVIDER_CLASSES`` and one key to ``config.PROVIDER_KEYS``.
"""

from __future__ import annotations

import logging

from ..config import Config
from ..paths.filesystem import LOCAL_FS, FileSystem
from ..registry.hive import HiveLoader, load_app_hive
from .base import WorkspaceProvider
from .json_recents import CursorProvider, JsonRecentsProvider, VSCodeProvider, VSCodiumProvider
from .launcher import ProcessLauncher
from .visual_studio import VisualStudioProvider

PROVIDER_CLASSES: tuple[type[WorkspaceProvider], ...] = (
    CursorProvider,
    VSCodeProvider,
    VSCodiumProvider,
    VisualStudioProvider,
)


def build_providers(
    config: Config,
    fs: FileSystem = LOCAL_FS,
    launcher: ProcessLauncher | None = None,
    hive_loader: HiveLoader = load_app_hive,
    log: logging.Logger | None = None,
) -> list[WorkspaceProvider]:
    """Instantiate the providers enabled in ``config``, in registry order."""
    enabled = {key.lower() for key in config.enabled_providers}
    providers: list[WorkspaceProvider] = []
    for cls in PROVIDER_CLASSES:
        if cls.key not in enabled:
            continue
        if issubclass(cls, JsonRecentsProvider):
            providers.append(cls(config.roaming_dir, config.local_dir, fs=fs, launcher=launcher, log=log))
        elif cls is VisualStudioProvider:
            providers.append(
                VisualStudioProvider(config.local_dir, fs=fs, launcher=launcher, hive_loader=hive_loader, log=log)
            )
    return providers
