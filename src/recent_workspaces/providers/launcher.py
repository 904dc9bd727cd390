"""Starting editor processes for a chosen workspace.

``ProcessLauncher`` turns "open this path with that program" into a boolean:
it resolves the executable, starts it detached with the path as its single
argument and reports whether the start succeeded.  The process starter is
injectable so tests can record launches instead of spawning anything.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from collections.abc import Callable, Sequence
from typing import Protocol

logger = logging.getLogger(__name__)


class ProcessStarter(Protocol):
    """Callable that starts ``argv`` in ``cwd`` or raises ``OSError``."""

    def __call__(self, argv: Sequence[str], cwd: str | None) -> None:
        ...


def default_starter(argv: Sequence[str], cwd: str | None) -> None:
    """Start a detached process without a console window."""
    kwargs: dict[str, object] = {}
    if sys.platform == "win32":
        kwargs["creationflags"] = subprocess.CREATE_NO_WINDOW | subprocess.DETACHED_PROCESS
    else:
        kwargs["start_new_session"] = True
    subprocess.Popen(
        list(argv),
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        shell=False,
        **kwargs,
    )


class ProcessLauncher:
    """Start external programs with minimal boilerplate."""

    def __init__(
        self,
        starter: ProcessStarter | None = None,
        which: Callable[[str], str | None] = shutil.which,
        log: logging.Logger | None = None,
    ) -> None:
        self._starter = starter or default_starter
        self._which = which
        self._logger = log or logger

    def try_start(self, file_name: str, argument: str, cwd: str | None = None) -> bool:
        """Start ``file_name`` with ``argument``; return ``True`` on success.

        ``file_name`` is an executable name looked up on ``PATH`` or a full
        path.  The working directory defaults to ``argument`` (a folder).
        """
        executable = self._which(file_name)
        if executable is None:
            self._logger.debug("Executable not found: %s", file_name)
            return False
        workdir = cwd if cwd is not None else argument
        try:
            self._starter([executable, argument], workdir)
        except (OSError, ValueError) as exc:
            self._logger.info("Start failed for '%s': %s", file_name, exc)
            return False
        self._logger.info("Started: %s \"%s\"", executable, argument)
        return True

    def try_candidates(
        self,
        executable: str,
        install_locations: Sequence[str],
        argument: str,
        cwd: str | None = None,
        is_file: Callable[[str], bool] = os.path.isfile,
    ) -> bool:
        """Try ``executable`` on ``PATH``, then each existing install location in order."""
        if self.try_start(executable, argument, cwd):
            return True
        for location in install_locations:
            if is_file(location) and self.try_start(location, argument, cwd):
                return True
        return False
