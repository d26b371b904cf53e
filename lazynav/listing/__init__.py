"""Domain model for directory listings.

This package contains non-UI listing primitives:
- scanned entry datatypes with symlink resolution state
- directory scanning and listing construction
- sort/hidden-filter derivation of the visible view
"""

from __future__ import annotations

from .types import UNKNOWN_COUNT, FileEntry, LinkState, make_placeholder_entry
from .listing import Listing
from .sorting import natural_less, sort_entries, sort_listing
from .fs import ScanFunction, directory_mtime_ns, load_listing, scan_directory

__all__ = [
    "UNKNOWN_COUNT",
    "FileEntry",
    "LinkState",
    "make_placeholder_entry",
    "Listing",
    "natural_less",
    "sort_entries",
    "sort_listing",
    "ScanFunction",
    "directory_mtime_ns",
    "load_listing",
    "scan_directory",
]
