"""Visual Studio provider.

Recent solutions live in per-instance private hives under
``<local>/Microsoft/VisualStudio/17.0_<id>/``.  Each instance directory holds
``privateregistry.bin`` and ``ApplicationPrivateSettings.xml``; both are
scanned by ``RegistryHiveScanner``.  Instances are visited newest first.
"""

from __future__ import annotations

import logging
import os
import threading

from ..constants import VS_HIVE_FILE, VS_INSTANCE_PREFIX, VS_SETTINGS_FILE
from ..errors import DiscoveryCancelled
from ..paths.filesystem import LOCAL_FS, FileSystem
from ..registry.hive import HiveLoader, load_app_hive
from ..registry.scanner import HiveScanResult, RegistryHiveScanner
from .base import WorkspaceProvider
from .launcher import ProcessLauncher

logger = logging.getLogger(__name__)

VS_EDITIONS = ("Community", "Professional", "Enterprise")


class VisualStudioProvider(WorkspaceProvider):
    key = "visualstudio"
    name = "Visual Studio"
    icon = "Icons/visualstudio.ico"
    executable = "devenv"

    def __init__(
        self,
        local_dir: str | None,
        program_files_x86: str | None = None,
        fs: FileSystem = LOCAL_FS,
        launcher: ProcessLauncher | None = None,
        hive_loader: HiveLoader = load_app_hive,
        log: logging.Logger | None = None,
    ) -> None:
        super().__init__(fs=fs, launcher=launcher, log=log)
        self.local_dir = local_dir
        if program_files_x86 is None:
            program_files_x86 = os.environ.get("ProgramFiles(x86)")
        self.program_files_x86 = program_files_x86
        self.scanner = RegistryHiveScanner(fs=fs, hive_loader=hive_loader, log=self._logger)

    def base_dir(self) -> str | None:
        if not self.local_dir:
            return None
        return self.fs.pathmod.join(self.local_dir, "Microsoft", "VisualStudio")

    def resolve_source(self) -> str | None:
        base = self.base_dir()
        if base is None or not self.fs.is_dir(base):
            self._logger.debug("[%s] Base directory not found", self.name)
            return None
        return base

    def instance_dirs(self, base: str) -> list[str]:
        """Instance directories under ``base``, most recently modified first."""
        try:
            names = self.fs.list_dirs(base)
        except OSError as exc:
            self._logger.debug("[%s] Cannot list %s: %s", self.name, base, exc)
            return []
        prefix = VS_INSTANCE_PREFIX.casefold()
        dirs = [self.fs.pathmod.join(base, name) for name in names if name.casefold().startswith(prefix)]
        return sorted(dirs, key=self._mtime_or_earliest, reverse=True)

    def _mtime_or_earliest(self, path: str) -> float:
        try:
            return self.fs.mtime(path)
        except OSError:
            return float("-inf")

    def source_mtime(self, source: str) -> object | None:
        """Per-file timestamps of the base directory and every instance's state files.

        The base directory's own mtime changes only when instances come or go,
        so the hive and settings files are folded in to notice new recents.
        Any single file changing its mtime, in either direction, changes the
        stamp.
        """
        join = self.fs.pathmod.join
        watched = [source]
        for instance in self.instance_dirs(source):
            watched.extend(join(instance, file_name) for file_name in (VS_HIVE_FILE, VS_SETTINGS_FILE))
        stamps: list[tuple[str, float]] = []
        for path in watched:
            try:
                stamps.append((path.casefold(), self.fs.mtime(path)))
            except OSError:
                continue
        # None lets the cache probe the base directory (and fall back to UNKNOWN)
        return tuple(sorted(stamps)) if stamps else None

    def rebuild(self, source: str, cancel_event: threading.Event | None = None) -> list[str]:
        collected = HiveScanResult()
        for instance in self.instance_dirs(source):
            if cancel_event is not None and cancel_event.is_set():
                raise DiscoveryCancelled()
            hive = self.fs.pathmod.join(instance, VS_HIVE_FILE)
            if self.fs.is_file(hive):
                self.scanner.scan_hive(hive, collected, cancel_event)
            settings = self.fs.pathmod.join(instance, VS_SETTINGS_FILE)
            if self.fs.is_file(settings):
                self.scanner.scan_text_file(settings, collected)
        return self.scanner.finalize(collected)

    def install_locations(self) -> list[str]:
        if not self.program_files_x86:
            return []
        join = self.fs.pathmod.join
        return [
            join(self.program_files_x86, "Microsoft Visual Studio", "2022", edition, "Common7", "IDE", "devenv.exe")
            for edition in VS_EDITIONS
        ]

    def launch_cwd(self, path: str) -> str | None:
        # Solutions are files; start in the solution's directory
        return self.fs.pathmod.dirname(path) or None
