"""Pytest configuration and fixtures for Recent Workspaces tests.

This module provides in-memory stand-ins for everything discovery touches:
a Windows-flavoured FakeFileSystem, a FakeRegistryKey tree with a hive loader
that records releases, and a process starter that records launches.  With
them the Windows-specific behaviour runs on any platform.

IMPORTANT: Environment variables must be set BEFORE importing
recent_workspaces.state, which loads configuration at import time.
"""

from __future__ import annotations

import os

# Set environment variables BEFORE any recent_workspaces imports
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("RECENT_WORKSPACES_PROVIDERS", "cursor,vscode,vscodium,visualstudio")

import ntpath
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

import pytest


@dataclass
class _Entry:
    path: str
    is_dir: bool
    mtime: float
    content: str = ""


class FakeFileSystem:
    """Case-insensitive, in-memory Windows filesystem.

    This is ONLY for testing - not used in production.
    """

    pathmod = ntpath

    def __init__(self) -> None:
        self._entries: dict[str, _Entry] = {}
        self.unreadable: set[str] = set()
        self.reads: list[str] = []

    @staticmethod
    def _key(path: str) -> str:
        return ntpath.normpath(path).casefold()

    def _ensure_parents(self, path: str) -> None:
        parent = ntpath.dirname(ntpath.normpath(path))
        while parent and self._key(parent) not in self._entries:
            self._entries[self._key(parent)] = _Entry(ntpath.normpath(parent), True, 0.0)
            grand = ntpath.dirname(parent)
            if grand == parent:
                break
            parent = grand

    def add_dir(self, path: str, mtime: float = 1.0) -> str:
        self._ensure_parents(path)
        self._entries[self._key(path)] = _Entry(ntpath.normpath(path), True, mtime)
        return ntpath.normpath(path)

    def add_file(self, path: str, content: str = "", mtime: float = 1.0) -> str:
        self._ensure_parents(path)
        self._entries[self._key(path)] = _Entry(ntpath.normpath(path), False, mtime, content)
        return ntpath.normpath(path)

    def touch(self, path: str, mtime: float) -> None:
        self._entries[self._key(path)].mtime = mtime

    def write(self, path: str, content: str, mtime: float) -> None:
        entry = self._entries[self._key(path)]
        entry.content = content
        entry.mtime = mtime

    def remove(self, path: str) -> None:
        self._entries.pop(self._key(path), None)

    def make_unreadable(self, path: str) -> None:
        self.unreadable.add(self._key(path))

    # FileSystem protocol

    def exists(self, path: str) -> bool:
        return self._key(path) in self._entries

    def is_file(self, path: str) -> bool:
        entry = self._entries.get(self._key(path))
        return entry is not None and not entry.is_dir

    def is_dir(self, path: str) -> bool:
        entry = self._entries.get(self._key(path))
        return entry is not None and entry.is_dir

    def mtime(self, path: str) -> float:
        key = self._key(path)
        if key in self.unreadable:
            raise PermissionError(f"Access denied: {path}")
        entry = self._entries.get(key)
        if entry is None:
            raise FileNotFoundError(path)
        return entry.mtime

    def read_text(self, path: str) -> str:
        key = self._key(path)
        if key in self.unreadable:
            raise PermissionError(f"Access denied: {path}")
        entry = self._entries.get(key)
        if entry is None:
            raise FileNotFoundError(path)
        if entry.is_dir:
            raise IsADirectoryError(path)
        self.reads.append(entry.path)
        return entry.content

    def list_dirs(self, path: str) -> list[str]:
        key = self._key(path)
        if key not in self._entries:
            raise FileNotFoundError(path)
        names = []
        for entry in self._entries.values():
            if entry.is_dir and self._key(ntpath.dirname(entry.path)) == key and self._key(entry.path) != key:
                names.append(ntpath.basename(entry.path))
        return names


class FakeRegistryKey:
    """In-memory registry key tree.

    ``fail_values`` / ``fail_enum`` make the corresponding call raise ``OSError``
    to simulate unreadable keys.
    """

    def __init__(
        self,
        values: dict[str, object] | None = None,
        subkeys: dict[str, FakeRegistryKey] | None = None,
        *,
        fail_values: bool = False,
        fail_enum: bool = False,
    ) -> None:
        self._values = dict(values or {})
        self._subkeys = dict(subkeys or {})
        self.fail_values = fail_values
        self.fail_enum = fail_enum
        self.closed = 0

    def add(self, name: str, key: FakeRegistryKey) -> FakeRegistryKey:
        self._subkeys[name] = key
        return key

    def subkey_names(self) -> list[str]:
        if self.fail_enum:
            raise OSError("enumeration failed")
        return list(self._subkeys)

    def open_subkey(self, path: str) -> FakeRegistryKey | None:
        node = self
        for part in path.split("\\"):
            if not part:
                continue
            match = None
            for name, child in node._subkeys.items():
                if name.casefold() == part.casefold():
                    match = child
                    break
            if match is None:
                return None
            node = match
        return node

    def values(self) -> Iterator[tuple[str, object]]:
        if self.fail_values:
            raise OSError("value read failed")
        yield from self._values.items()

    def close(self) -> None:
        self.closed += 1


def vs_hive(instances: dict[str, FakeRegistryKey]) -> FakeRegistryKey:
    """Build a hive root with ``Software\\Microsoft\\VisualStudio\\<instance>`` keys."""
    product = FakeRegistryKey(subkeys=instances)
    microsoft = FakeRegistryKey(subkeys={"VisualStudio": product})
    software = FakeRegistryKey(subkeys={"Microsoft": microsoft})
    return FakeRegistryKey(subkeys={"Software": software})


class FakeHiveLoader:
    """Hive loader mapping hive file paths to FakeRegistryKey roots.

    Records every load and release so tests can check handle lifetimes.
    """

    def __init__(self, hives: dict[str, FakeRegistryKey] | None = None) -> None:
        self.hives = {ntpath.normpath(path).casefold(): root for path, root in (hives or {}).items()}
        self.loaded: list[str] = []
        self.released: list[str] = []

    def add(self, path: str, root: FakeRegistryKey) -> None:
        self.hives[ntpath.normpath(path).casefold()] = root

    @contextmanager
    def __call__(self, hive_path: str) -> Iterator[FakeRegistryKey | None]:
        root = self.hives.get(ntpath.normpath(hive_path).casefold())
        if root is None:
            yield None
            return
        self.loaded.append(hive_path)
        try:
            yield root
        finally:
            self.released.append(hive_path)


class RecordingStarter:
    """Process starter that records launches instead of spawning processes."""

    def __init__(self, fail_for: Sequence[str] = ()) -> None:
        self.fail_for = set(fail_for)
        self.calls: list[tuple[list[str], str | None]] = []

    def __call__(self, argv: Sequence[str], cwd: str | None) -> None:
        if argv[0] in self.fail_for:
            raise OSError(f"cannot start {argv[0]}")
        self.calls.append((list(argv), cwd))


ROAMING = r"C:\Users\dev\AppData\Roaming"
LOCAL = r"C:\Users\dev\AppData\Local"


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    fs = FakeFileSystem()
    fs.add_dir(ROAMING)
    fs.add_dir(LOCAL)
    return fs


@pytest.fixture
def hive_loader() -> FakeHiveLoader:
    return FakeHiveLoader()


@pytest.fixture
def starter() -> RecordingStarter:
    return RecordingStarter()


@pytest.fixture
def launcher(starter):
    """Launcher where only ``code`` and ``devenv`` are on PATH."""
    from recent_workspaces.providers.launcher import ProcessLauncher

    on_path = {"code": r"C:\Tools\code.cmd", "devenv": r"C:\VS\devenv.exe"}

    def which(name: str) -> str | None:
        if ntpath.isabs(name):
            return name
        return on_path.get(name)

    return ProcessLauncher(starter=starter, which=which)
