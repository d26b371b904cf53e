"""Directory snapshot with a sorted/filtered view and cursor state."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

from .types import FileEntry


@dataclass(eq=False)
class Listing:
    """Children of one directory at a point in time.

    ``all`` holds every scanned entry in scan order. ``visible`` is the view
    derived from ``all`` by ``sort_listing`` and is never filtered further in
    place. ``ind`` indexes ``visible``; ``pos`` is the cursor's screen row.
    """

    path: Path
    all: list[FileEntry] = field(default_factory=list)
    visible: list[FileEntry] = field(default_factory=list)
    loading: bool = False
    load_time_ns: int = field(default_factory=time.time_ns)
    ind: int = 0
    pos: int = 0

    @classmethod
    def placeholder(cls, path: Path) -> Listing:
        """Return an empty ``loading`` listing standing in for ``path``."""
        return cls(path=path, loading=True)

    def name(self) -> str:
        """Return the highlighted entry's name, or ``""`` when empty."""
        if not self.visible:
            return ""
        return self.visible[self.ind].name

    def current(self) -> FileEntry | None:
        if not self.visible:
            return None
        return self.visible[self.ind]

    def find(self, name: str, height: int, scrolloff: int) -> None:
        """Move the cursor onto ``name`` and recompute the scroll row.

        When ``name`` is absent the cursor stays at its previous index,
        clamped into range.
        """
        if not self.visible:
            self.ind, self.pos = 0, 0
            return

        self.ind = max(0, min(self.ind, len(self.visible) - 1))

        if self.visible[self.ind].name != name:
            for i, entry in enumerate(self.visible):
                if entry.name == name:
                    self.ind = i
                    break

        edge = min(scrolloff, height // 2, len(self.visible) - self.ind - 1)
        self.pos = max(0, min(self.ind, height - edge - 1))

    def add_placeholder_entry(self, entry: FileEntry) -> None:
        """Append a synthetic entry so the cursor can land on it after loading."""
        self.all.append(entry)
        self.visible.append(entry)


__all__ = ["Listing"]
