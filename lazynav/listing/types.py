"""Domain datatypes for scanned directory entries."""

from __future__ import annotations

import enum
import os
import stat as stat_module
from dataclasses import dataclass
from pathlib import Path

UNKNOWN_COUNT = -1


class LinkState(enum.Enum):
    NONE = "none"
    WORKING = "working"
    BROKEN = "broken"


@dataclass(eq=False)
class FileEntry:
    """One filesystem object observed by a directory scan.

    ``stat`` holds the target's metadata for a working symlink and the link's
    own ``lstat`` metadata otherwise. ``count`` is the lazily computed number
    of children for directories (``UNKNOWN_COUNT`` until requested).
    """

    path: Path
    stat: os.stat_result
    link_state: LinkState = LinkState.NONE
    count: int = UNKNOWN_COUNT

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size(self) -> int:
        return int(self.stat.st_size)

    @property
    def mtime_ns(self) -> int:
        return int(self.stat.st_mtime_ns)

    @property
    def mode(self) -> int:
        return int(self.stat.st_mode)

    @property
    def is_dir(self) -> bool:
        return stat_module.S_ISDIR(self.stat.st_mode)

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith(".")

    def count_children(self, show_hidden: bool) -> int:
        """Return (and cache) the child count of a directory entry.

        Non-directories and unreadable directories keep ``UNKNOWN_COUNT``.
        """
        if self.count != UNKNOWN_COUNT or not self.is_dir:
            return self.count
        try:
            names = os.listdir(self.path)
        except OSError:
            return self.count
        if not show_hidden:
            names = [name for name in names if not name.startswith(".")]
        self.count = len(names)
        return self.count


def make_placeholder_entry(path: Path, stat: os.stat_result) -> FileEntry:
    """Build a synthetic entry for ``path`` from an already obtained ``stat``."""
    return FileEntry(path=path, stat=stat)


__all__ = [
    "UNKNOWN_COUNT",
    "LinkState",
    "FileEntry",
    "make_placeholder_entry",
]
