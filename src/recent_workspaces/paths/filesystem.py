"""Filesystem abstraction used by every discovery component.

Providers, the hive scanner and the path normalizer never touch ``os``
directly.  They go through a ``FileSystem`` so that Windows-flavoured
behaviour (drive letters, backslashes, case-insensitive names) can be tested
on any platform with an in-memory fake.

In production, only ``LocalFileSystem`` is used.  For testing, a
FakeFileSystem is available in tests/conftest.py.
"""

from __future__ import annotations

import os
from types import ModuleType
from typing import Protocol


class FileSystem(Protocol):
    """Interface for filesystem access.

    ``pathmod`` is an ``os.path`` compatible module (``os.path`` itself, or
    ``ntpath`` for a Windows view).  ``mtime`` and ``read_text`` raise
    ``OSError`` on failure; the predicates return ``False`` instead.
    """

    pathmod: ModuleType

    def exists(self, path: str) -> bool:
        ...

    def is_file(self, path: str) -> bool:
        ...

    def is_dir(self, path: str) -> bool:
        ...

    def mtime(self, path: str) -> float:
        ...

    def read_text(self, path: str) -> str:
        ...

    def list_dirs(self, path: str) -> list[str]:
        ...


class LocalFileSystem:
    """``FileSystem`` backed by the host operating system."""

    pathmod = os.path

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def mtime(self, path: str) -> float:
        return os.stat(path).st_mtime

    def read_text(self, path: str) -> str:
        with open(path, encoding="utf-8-sig", errors="replace") as f:
            return f.read()

    def list_dirs(self, path: str) -> list[str]:
        with os.scandir(path) as entries:
            return [entry.name for entry in entries if entry.is_dir()]


LOCAL_FS = LocalFileSystem()
