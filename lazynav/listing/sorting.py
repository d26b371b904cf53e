"""Sort and hidden-file filtering for directory listings.

Every call rebuilds ``visible`` from ``all`` so repeated option toggles never
compound on a previously filtered view.
"""

from __future__ import annotations

import functools
import logging

from ..options import NavOptions
from .listing import Listing
from .types import FileEntry

logger = logging.getLogger(__name__)


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def natural_less(s1: str, s2: str) -> bool:
    """Compare strings chunk by chunk, ordering digit runs numerically."""
    hi1 = hi2 = 0
    while True:
        if hi1 >= len(s1):
            return hi2 != len(s2)
        if hi2 >= len(s2):
            return False

        is_digit1 = _is_digit(s1[hi1])
        is_digit2 = _is_digit(s2[hi2])

        lo1 = hi1
        while hi1 < len(s1) and _is_digit(s1[hi1]) == is_digit1:
            hi1 += 1
        lo2 = hi2
        while hi2 < len(s2) and _is_digit(s2[hi2]) == is_digit2:
            hi2 += 1

        chunk1 = s1[lo1:hi1]
        chunk2 = s2[lo2:hi2]
        if chunk1 == chunk2:
            continue
        if is_digit1 and is_digit2:
            return int(chunk1) < int(chunk2)
        return chunk1 < chunk2


def _natural_cmp(a: FileEntry, b: FileEntry) -> int:
    name_a = a.name.lower()
    name_b = b.name.lower()
    if natural_less(name_a, name_b):
        return -1
    if natural_less(name_b, name_a):
        return 1
    return 0


_SORT_KEYS = {
    "natural": functools.cmp_to_key(_natural_cmp),
    "name": lambda entry: entry.name.lower(),
    "size": lambda entry: entry.size,
    "time": lambda entry: entry.mtime_ns,
}


def sort_entries(entries: list[FileEntry], options: NavOptions) -> list[FileEntry]:
    """Return ``entries`` ordered by the configured key, reverse and dirfirst passes."""
    key = _SORT_KEYS.get(options.sort_by)
    if key is None:
        logger.warning("unknown sorting type: %s", options.sort_by)
        ordered = list(entries)
    else:
        # Python's sort is stable in both directions: ties keep scan order.
        ordered = sorted(entries, key=key, reverse=options.reverse)

    if options.dir_first:
        ordered.sort(key=lambda entry: not entry.is_dir)
    return ordered


def sort_listing(listing: Listing, options: NavOptions) -> None:
    """Recompute ``listing.visible`` from ``listing.all`` under ``options``."""
    visible = sort_entries(listing.all, options)

    if not options.hidden:
        # Hidden entries end up contiguous at the front, then get trimmed off.
        visible.sort(key=lambda entry: not entry.is_hidden)
        first_shown = next(
            (i for i, entry in enumerate(visible) if not entry.is_hidden),
            len(visible),
        )
        visible = visible[first_shown:]

    listing.visible = visible


__all__ = [
    "natural_less",
    "sort_entries",
    "sort_listing",
]
