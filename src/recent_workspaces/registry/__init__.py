"""Private registry hive access and scanning."""

from .hive import HiveLoader, RegistryKey, WinRegistryKey, load_app_hive
from .scanner import (
    FILE_URI_PATTERN,
    SOLUTION_PATTERN,
    WINDOWS_PATH_PATTERN,
    HiveScanResult,
    RegistryHiveScanner,
)

__all__ = [
    "HiveLoader",
    "RegistryKey",
    "WinRegistryKey",
    "load_app_hive",
    "HiveScanResult",
    "RegistryHiveScanner",
    "FILE_URI_PATTERN",
    "WINDOWS_PATH_PATTERN",
    "SOLUTION_PATTERN",
]
