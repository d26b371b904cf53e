"""Filesystem scanning for directory listings."""

from __future__ import annotations

import logging
import os
import stat as stat_module
import time
from collections.abc import Callable
from pathlib import Path

from ..options import NavOptions
from .listing import Listing
from .sorting import sort_listing
from .types import FileEntry, LinkState

logger = logging.getLogger(__name__)

ScanFunction = Callable[[Path], list[FileEntry]]


def scan_directory(path: Path) -> list[FileEntry]:
    """Return one ``FileEntry`` per child of ``path`` in enumeration order.

    Entries removed between enumeration and ``lstat`` are dropped. Other
    per-entry failures are logged and skipped. Symlinks are resolved; a broken
    one keeps its own ``lstat`` metadata. Raises ``OSError`` only when the
    directory itself cannot be enumerated.
    """
    names = os.listdir(path)

    entries: list[FileEntry] = []
    for name in names:
        entry_path = path / name
        try:
            lstat = os.lstat(entry_path)
        except FileNotFoundError:
            continue
        except OSError as exc:
            logger.warning("getting file info: %s", exc)
            continue

        link_state = LinkState.NONE
        metadata = lstat
        if stat_module.S_ISLNK(lstat.st_mode):
            try:
                metadata = os.stat(entry_path)
                link_state = LinkState.WORKING
            except OSError as exc:
                link_state = LinkState.BROKEN
                logger.warning("getting link destination info: %s", exc)

        entries.append(FileEntry(path=entry_path, stat=metadata, link_state=link_state))
    return entries


def load_listing(
    path: Path,
    options: NavOptions,
    scan: ScanFunction = scan_directory,
) -> Listing:
    """Scan and sort ``path`` into a finished (non-loading) listing."""
    load_time_ns = time.time_ns()
    try:
        entries = scan(path)
    except OSError as exc:
        logger.error("reading directory: %s", exc)
        entries = []

    listing = Listing(path=path, all=entries, load_time_ns=load_time_ns)
    sort_listing(listing, options)
    return listing


def directory_mtime_ns(path: Path) -> int | None:
    """Return ``st_mtime_ns`` for ``path`` or ``None`` on stat failure."""
    try:
        return int(os.stat(path).st_mtime_ns)
    except OSError as exc:
        logger.warning("getting directory info: %s", exc)
        return None


__all__ = [
    "ScanFunction",
    "scan_directory",
    "load_listing",
    "directory_mtime_ns",
]
