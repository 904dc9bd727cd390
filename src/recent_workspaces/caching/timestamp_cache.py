"""Single-slot cache keyed on a resource's modification time."""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _UnknownMtime:
    """Timestamp used when the resource cannot be probed.

    It never compares equal to anything, including itself, so an unreadable
    resource is rebuilt on every call until it becomes readable again.
    """

    def __eq__(self, other: object) -> bool:
        return False

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        return "UNKNOWN_MTIME"


UNKNOWN_MTIME = _UnknownMtime()


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """The cached ``(resource, timestamp, value)`` triple.  Replaced wholesale."""

    resource_id: str
    mtime: object
    value: T

    def matches(self, resource_id: str, mtime: object) -> bool:
        return self.resource_id.casefold() == resource_id.casefold() and self.mtime == mtime


class TimestampCache(Generic[T]):
    """Thread-safe memoizer holding one value for one resource.

    ``get_or_refresh`` returns the stored value while the resource identifier
    (case-insensitive) and its modification time are unchanged, and rebuilds
    it otherwise.  The lock guards only the comparison and the store; the
    mtime probe and the rebuild run outside it.
    """

    def __init__(
        self,
        probe: Callable[[str], float] = os.path.getmtime,
        log: logging.Logger | None = None,
    ) -> None:
        self._probe = probe
        self._lock = threading.Lock()
        self._entry: CacheEntry[T] | None = None
        self._logger = log or logger

    def probe(self, resource_id: str) -> object:
        """Return the resource's modification time, or ``UNKNOWN_MTIME``."""
        try:
            return self._probe(resource_id)
        except (OSError, ValueError) as exc:
            self._logger.debug("Cannot read modification time of %s: %s", resource_id, exc)
            return UNKNOWN_MTIME

    def get_or_refresh(
        self,
        resource_id: str,
        build: Callable[[str], T],
        current_mtime: object | None = None,
    ) -> T:
        """Return the cached value for ``resource_id`` or rebuild it.

        ``current_mtime`` lets the caller supply a timestamp it computed
        itself; by default the cache probes ``resource_id``.  Exceptions from
        ``build`` propagate and leave the previous entry in place.
        """
        if current_mtime is None:
            current_mtime = self.probe(resource_id)

        with self._lock:
            entry = self._entry
            if entry is not None and entry.matches(resource_id, current_mtime):
                return entry.value

        value = build(resource_id)

        with self._lock:
            entry = self._entry
            if entry is not None and entry.matches(resource_id, current_mtime):
                # Another thread stored the same state while we were building
                return entry.value
            self._entry = CacheEntry(resource_id=resource_id, mtime=current_mtime, value=value)
        self._logger.debug("Cache refreshed for %s", resource_id)
        return value
