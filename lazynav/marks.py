"""Insertion-ordered multi-file selection."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path


class MarkSet:
    """Marked paths with the sequence number they were toggled on at.

    ``ordered()`` follows toggle order regardless of dict iteration order.
    The sequence counter restarts at zero whenever the set becomes empty.
    """

    def __init__(self) -> None:
        self._marks: dict[Path, int] = {}
        self._next_index = 0

    def __contains__(self, path: object) -> bool:
        return path in self._marks

    def __len__(self) -> int:
        return len(self._marks)

    def __iter__(self) -> Iterator[Path]:
        return iter(self.ordered())

    def toggle(self, path: Path) -> bool:
        """Mark ``path`` or unmark it if already marked. Returns new state."""
        if path in self._marks:
            self.discard(path)
            return False
        self._marks[path] = self._next_index
        self._next_index += 1
        return True

    def discard(self, path: Path) -> None:
        self._marks.pop(path, None)
        if not self._marks:
            self._next_index = 0

    def clear(self) -> None:
        self._marks = {}
        self._next_index = 0

    def ordered(self) -> list[Path]:
        return sorted(self._marks, key=self._marks.__getitem__)

    def prune(self, exists: Callable[[Path], bool]) -> list[Path]:
        """Drop marks whose path no longer exists; return the dropped paths."""
        dropped = [path for path in self._marks if not exists(path)]
        for path in dropped:
            del self._marks[path]
        if not self._marks:
            self._next_index = 0
        return dropped


__all__ = ["MarkSet"]
