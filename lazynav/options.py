"""Read-only navigation options consumed by sorting, matching, and preview.

Options are an immutable value passed explicitly into each operation, so
worker threads can capture them without sharing mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

SORT_KEYS = ("natural", "name", "size", "time")


@dataclass(frozen=True)
class NavOptions:
    """Sorting, visibility, search, and preview settings."""

    sort_by: str = "natural"
    reverse: bool = False
    dir_first: bool = True
    hidden: bool = False
    scrolloff: int = 0
    ignorecase: bool = True
    smartcase: bool = False
    globsearch: bool = False
    wrapscan: bool = True
    previewer: str | None = None
    highlight: bool = False
    style: str = "monokai"

    def with_changes(self, **changes: object) -> NavOptions:
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)


DEFAULT_OPTIONS = NavOptions()


__all__ = [
    "SORT_KEYS",
    "NavOptions",
    "DEFAULT_OPTIONS",
]
