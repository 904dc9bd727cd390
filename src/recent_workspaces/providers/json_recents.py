"""Providers for VS Code style editors that keep recents in ``storage.json``.

Cursor, VS Code and VSCodium share one layout:
``<roaming>/<App>/User/globalStorage/storage.json``.  Recent folders appear as
``backupWorkspaces.folders[*].folderUri`` and as the keys of
``profileAssociations.workspaces``.  Both are read; everything else in the
file is ignored.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterator

from ..constants import STORAGE_JSON_PARTS
from ..paths.filesystem import LOCAL_FS, FileSystem
from ..paths.normalizer import normalize
from .base import WorkspaceProvider
from .launcher import ProcessLauncher

logger = logging.getLogger(__name__)


def iter_storage_uris(root: object) -> Iterator[str]:
    """Yield workspace URIs from a parsed ``storage.json`` document.

    Shapes that do not match expectations are skipped item by item.
    """
    if not isinstance(root, dict):
        return

    backup = root.get("backupWorkspaces")
    folders = backup.get("folders") if isinstance(backup, dict) else None
    if isinstance(folders, list):
        for folder in folders:
            uri = folder.get("folderUri") if isinstance(folder, dict) else None
            if isinstance(uri, str) and uri.strip():
                yield uri

    associations = root.get("profileAssociations")
    workspaces = associations.get("workspaces") if isinstance(associations, dict) else None
    if isinstance(workspaces, dict):
        for uri in workspaces:
            if isinstance(uri, str) and uri.strip():
                yield uri


def extract_paths_from_storage(
    storage_path: str,
    fs: FileSystem = LOCAL_FS,
    log: logging.Logger | None = None,
) -> list[str]:
    """Parse ``storage_path`` and return canonical workspace paths.

    Results are deduplicated case-insensitively in encounter order.  A missing
    or malformed file yields an empty list.
    """
    log = log or logger
    try:
        root = json.loads(fs.read_text(storage_path))
    except (OSError, ValueError) as exc:
        log.info("Failed reading/parsing %s: %s", storage_path, exc)
        return []

    seen: set[str] = set()
    paths: list[str] = []
    for uri in iter_storage_uris(root):
        path = normalize(uri, fs, log)
        if path is None:
            log.debug("Could not convert: %s", uri)
            continue
        key = path.casefold()
        if key not in seen:
            seen.add(key)
            paths.append(path)
    return paths


class JsonRecentsProvider(WorkspaceProvider):
    """Provider reading a VS Code style ``storage.json``.

    Subclasses set the class attributes and list their install locations.
    """

    app_dir: str = ""

    def __init__(
        self,
        roaming_dir: str | None,
        local_dir: str | None = None,
        fs: FileSystem = LOCAL_FS,
        launcher: ProcessLauncher | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        super().__init__(fs=fs, launcher=launcher, log=log)
        self.roaming_dir = roaming_dir
        self.local_dir = local_dir

    def storage_path(self) -> str | None:
        if not self.roaming_dir:
            return None
        return self.fs.pathmod.join(self.roaming_dir, self.app_dir, *STORAGE_JSON_PARTS)

    def resolve_source(self) -> str | None:
        path = self.storage_path()
        if path is None:
            self._logger.debug("[%s] Application data directory not found", self.name)
            return None
        if not self.fs.is_file(path):
            self._logger.debug("[%s] storage.json not found: %s", self.name, path)
            return None
        return path

    def rebuild(self, source: str, cancel_event: threading.Event | None = None) -> list[str]:
        return extract_paths_from_storage(source, self.fs, self._logger)

    def _local(self, *parts: str) -> list[str]:
        if not self.local_dir:
            return []
        return [self.fs.pathmod.join(self.local_dir, *parts)]


class CursorProvider(JsonRecentsProvider):
    key = "cursor"
    name = "Cursor"
    icon = "Icons/cursor.ico"
    executable = "cursor"
    app_dir = "Cursor"

    def install_locations(self) -> list[str]:
        return self._local("Programs", "Cursor", "Cursor.exe") + self._local("Cursor", "Cursor.exe")


class VSCodeProvider(JsonRecentsProvider):
    key = "vscode"
    name = "VS Code"
    icon = "Icons/vscode.ico"
    executable = "code"
    app_dir = "Code"

    def install_locations(self) -> list[str]:
        return self._local("Programs", "Microsoft VS Code", "Code.exe")


class VSCodiumProvider(JsonRecentsProvider):
    key = "vscodium"
    name = "VSCodium"
    icon = "Icons/vscodium.ico"
    executable = "codium"
    app_dir = "VSCodium"

    def install_locations(self) -> list[str]:
        return self._local("Programs", "VSCodium", "VSCodium.exe")
