"""Data types shared by providers, the aggregator and the tool layer."""

from __future__ import annotations

import ntpath
from collections.abc import Callable
from dataclasses import dataclass, field

# Sort key for entries whose modification time cannot be read
EARLIEST = float("-inf")


@dataclass(frozen=True)
class WorkspaceReference:
    """A recently used workspace as reported by one provider.

    ``path`` is canonical and absolute.  ``modified`` is the path's
    modification time at discovery, or ``EARLIEST`` when it could not be read.
    """

    path: str
    provider: str
    icon: str
    modified: float = EARLIEST
    launch: Callable[[str], bool] | None = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        """Final path segment, used as the display title."""
        # ntpath splits on both separators, so this works for either flavour
        trimmed = self.path.rstrip("\\/")
        return ntpath.basename(trimmed) or self.path

    def open(self) -> bool:
        """Launch the workspace with its provider's application."""
        if self.launch is None:
            return False
        return self.launch(self.path)

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "path": self.path,
            "provider": self.provider,
            "icon": self.icon,
            "modified": None if self.modified == EARLIEST else self.modified,
        }
