"""Name matching for incremental search in a listing."""

from __future__ import annotations

import fnmatch

from ..options import NavOptions


def match(pattern: str, name: str, options: NavOptions) -> bool:
    """Return whether ``name`` matches search ``pattern`` under ``options``.

    With ``ignorecase`` both sides are lower-cased, except that ``smartcase``
    keeps exact case when the pattern contains an uppercase character.
    ``globsearch`` matches the whole name as a shell glob; otherwise the
    pattern is a plain substring.
    """
    if options.ignorecase:
        lowered = pattern.lower()
        if not options.smartcase or lowered == pattern:
            pattern = lowered
            name = name.lower()
    if options.globsearch:
        return fnmatch.fnmatchcase(name, pattern)
    return pattern in name


def find_next(pattern: str, names: list[str], start: int, options: NavOptions) -> int | None:
    """Index of the first match after ``start``, wrapping when enabled."""
    for i in range(start + 1, len(names)):
        if match(pattern, names[i], options):
            return i
    if options.wrapscan:
        for i in range(0, min(start, len(names))):
            if match(pattern, names[i], options):
                return i
    return None


def find_prev(pattern: str, names: list[str], start: int, options: NavOptions) -> int | None:
    """Index of the first match before ``start``, wrapping when enabled."""
    for i in range(min(start, len(names)) - 1, -1, -1):
        if match(pattern, names[i], options):
            return i
    if options.wrapscan:
        for i in range(len(names) - 1, start, -1):
            if match(pattern, names[i], options):
                return i
    return None


__all__ = [
    "match",
    "find_next",
    "find_prev",
]
