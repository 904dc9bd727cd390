"""Workspace provider base class.

A provider knows where one tool keeps its recents, how to turn that state
into candidate paths, and how to launch the tool on a chosen path.  The
shared query flow lives here:

    resolve source -> consult cache (rebuild on miss) -> filter -> order

Subclasses implement ``resolve_source`` and ``rebuild``.  I/O problems never
escape ``discover``; they reduce the provider's contribution to nothing.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod

from ..caching.timestamp_cache import TimestampCache
from ..errors import DiscoveryCancelled
from ..models import EARLIEST, WorkspaceReference
from ..paths.filesystem import LOCAL_FS, FileSystem
from .launcher import ProcessLauncher

logger = logging.getLogger(__name__)


def _cancelled(cancel_event: threading.Event | None) -> bool:
    return cancel_event is not None and cancel_event.is_set()


class WorkspaceProvider(ABC):
    """Source of recent workspaces for one tool."""

    key: str = ""
    name: str = ""
    icon: str = ""
    executable: str = ""

    def __init__(
        self,
        fs: FileSystem = LOCAL_FS,
        launcher: ProcessLauncher | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.fs = fs
        self._logger = log or logger
        self.launcher = launcher or ProcessLauncher(log=self._logger)
        self.cache: TimestampCache[list[str]] = TimestampCache(probe=fs.mtime, log=self._logger)

    # -- hooks ----------------------------------------------------------

    @abstractmethod
    def resolve_source(self) -> str | None:
        """Return the tool's storage location, or ``None`` if it is absent."""

    @abstractmethod
    def rebuild(self, source: str, cancel_event: threading.Event | None = None) -> list[str]:
        """Extract canonical, deduplicated candidate paths from ``source``."""

    def source_mtime(self, source: str) -> object | None:
        """Timestamp used to validate the cache; ``None`` lets the cache probe ``source``."""
        return None

    def install_locations(self) -> list[str]:
        """Well-known executable paths tried after ``executable`` on ``PATH``."""
        return []

    def launch_cwd(self, path: str) -> str | None:
        """Working directory for the launched process (default: the path itself)."""
        return None

    # -- query flow -----------------------------------------------------

    def discover(self, cancel_event: threading.Event | None = None) -> list[WorkspaceReference]:
        """Return this provider's recent workspaces, most recently modified first."""
        if _cancelled(cancel_event):
            return []

        source = self.resolve_source()
        if source is None:
            self._logger.debug("[%s] Source not found", self.name)
            return []

        try:
            paths = self.cache.get_or_refresh(
                source,
                lambda resolved: self._rebuild_checked(resolved, cancel_event),
                current_mtime=self.source_mtime(source),
            )
        except DiscoveryCancelled:
            self._logger.debug("[%s] Discovery cancelled", self.name)
            return []
        except OSError as exc:
            self._logger.warning("[%s] Discovery failed: %s", self.name, exc)
            return []

        if _cancelled(cancel_event):
            return []

        refs = self.serve(paths)
        self._logger.info("[%s] Using cached workspaces: %d", self.name, len(refs))
        return refs

    def _rebuild_checked(self, source: str, cancel_event: threading.Event | None) -> list[str]:
        paths = self.rebuild(source, cancel_event)
        # A rebuild interrupted at its last step must not be cached either
        if _cancelled(cancel_event):
            raise DiscoveryCancelled()
        self._logger.info("[%s] Cache built: %d", self.name, len(paths))
        return paths

    def serve(self, paths: list[str]) -> list[WorkspaceReference]:
        """Drop paths that no longer exist and order the rest by recency.

        Existence is re-checked here because a cache entry can outlive a
        deleted folder.  The sort is stable, so ties keep collection order.
        """
        refs = [
            WorkspaceReference(
                path=path,
                provider=self.name,
                icon=self.icon,
                modified=self._modified(path),
                launch=self.open_workspace,
            )
            for path in paths
            if self.fs.exists(path)
        ]
        refs.sort(key=lambda ref: ref.modified, reverse=True)
        return refs

    def _modified(self, path: str) -> float:
        try:
            return self.fs.mtime(path)
        except OSError:
            return EARLIEST

    # -- launching ------------------------------------------------------

    def open_workspace(self, path: str) -> bool:
        """Open ``path`` with this provider's application.  Never raises."""
        self._logger.info("[%s] Launch request: %s", self.name, path)
        try:
            return self.launcher.try_candidates(
                self.executable,
                self.install_locations(),
                path,
                cwd=self.launch_cwd(path),
                is_file=self.fs.is_file,
            )
        except Exception:
            self._logger.exception("[%s] Launch error", self.name)
            return False
