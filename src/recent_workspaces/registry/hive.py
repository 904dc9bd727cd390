"""Loading private registry hives without elevation.

Visual Studio keeps most of its per-instance settings in a private hive file
(``privateregistry.bin``) rather than in the live registry.  Windows can
mount such a file as a transient, process-private root with
``RegLoadAppKeyW``, which needs no administrator rights.  ``winreg`` does not
expose that call, so it is reached through ``ctypes``; everything after the
root handle is opened goes through ``winreg``.

The scanner only depends on the ``RegistryKey`` protocol and on a hive
loader (a context manager factory), so tests substitute an in-memory tree.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Protocol

logger = logging.getLogger(__name__)

KEY_READ = 0x20019  # STANDARD_RIGHTS_READ | KEY_QUERY_VALUE | KEY_ENUMERATE_SUB_KEYS | KEY_NOTIFY
ERROR_SUCCESS = 0


class RegistryKey(Protocol):
    """Read-only view of an open registry key.

    ``open_subkey`` accepts backslash-separated relative paths and returns
    ``None`` when the key is missing or cannot be opened.  ``values`` yields
    ``(name, data)`` pairs where ``data`` is whatever the value holds
    (``str`` for string values, ``list[str]`` for multi-string values).
    Enumeration methods may raise ``OSError``.
    """

    def subkey_names(self) -> list[str]:
        ...

    def open_subkey(self, path: str) -> RegistryKey | None:
        ...

    def values(self) -> Iterator[tuple[str, object]]:
        ...

    def close(self) -> None:
        ...


HiveLoader = Callable[[str], AbstractContextManager["RegistryKey | None"]]


class WinRegistryKey:
    """``RegistryKey`` over a ``winreg`` handle.

    ``handle`` is either a ``winreg.HKEYType`` owned by this object or a raw
    integer handle owned by the caller (the hive root).
    """

    def __init__(self, handle: object, owned: bool = True) -> None:
        self._handle = handle
        self._owned = owned

    def subkey_names(self) -> list[str]:
        import winreg

        names: list[str] = []
        index = 0
        while True:
            try:
                names.append(winreg.EnumKey(self._handle, index))
            except OSError:
                # ERROR_NO_MORE_ITEMS ends the enumeration
                break
            index += 1
        return names

    def open_subkey(self, path: str) -> WinRegistryKey | None:
        import winreg

        try:
            handle = winreg.OpenKeyEx(self._handle, path, 0, winreg.KEY_READ)
        except OSError:
            return None
        return WinRegistryKey(handle)

    def values(self) -> Iterator[tuple[str, object]]:
        import winreg

        index = 0
        while True:
            try:
                name, data, _kind = winreg.EnumValue(self._handle, index)
            except OSError:
                break
            index += 1
            yield name, data

    def close(self) -> None:
        if self._owned and self._handle is not None:
            self._handle.Close()
        self._handle = None


@contextmanager
def load_app_hive(hive_path: str, log: logging.Logger | None = None) -> Iterator[RegistryKey | None]:
    """Mount ``hive_path`` read-only and yield its root key.

    Yields ``None`` when the platform is not Windows or the load fails (the
    file may be missing, locked by a running IDE, or not a hive at all).
    The root handle is released on every exit path, including exceptions
    raised by the ``with`` body.
    """
    log = log or logger
    if sys.platform != "win32":
        yield None
        return

    import ctypes
    from ctypes import wintypes

    advapi32 = ctypes.WinDLL("advapi32", use_last_error=True)
    reg_load_app_key = advapi32.RegLoadAppKeyW
    reg_load_app_key.argtypes = [
        wintypes.LPCWSTR,
        ctypes.POINTER(wintypes.HKEY),
        wintypes.DWORD,
        wintypes.DWORD,
        wintypes.DWORD,
    ]
    reg_load_app_key.restype = wintypes.LONG
    reg_close_key = advapi32.RegCloseKey
    reg_close_key.argtypes = [wintypes.HKEY]
    reg_close_key.restype = wintypes.LONG

    hkey = wintypes.HKEY()
    status = reg_load_app_key(hive_path, ctypes.byref(hkey), KEY_READ, 0, 0)
    if status != ERROR_SUCCESS or not hkey.value:
        log.debug("RegLoadAppKey failed for %s (status %s)", hive_path, status)
        yield None
        return

    root = WinRegistryKey(hkey.value, owned=False)
    try:
        yield root
    finally:
        root.close()
        reg_close_key(hkey)
        log.debug("Released hive %s", hive_path)
