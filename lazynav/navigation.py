"""Navigation stack: the chain of listings from ``/`` down to the current directory.

The stack, its caches, and the mark set are owned by a single thread. Loads
run in background workers (see ``runtime.loader``); the owner merges their
results with ``process_results``. Commands that change the current directory
call ``os.chdir`` before touching the stack, so a failed change leaves the
stack untouched.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time
from pathlib import Path

from .errors import EmptyBufferError, NavigationError, NoFileSelectedError, OperationError
from .jobs import PutJob, put_files
from .listing import FileEntry, Listing, make_placeholder_entry, sort_listing
from .marks import MarkSet
from .options import DEFAULT_OPTIONS, NavOptions
from .preview import Register
from .runtime.loader import Loader
from .runtime.pending import PendingOperationStore
from .search import find_next, find_prev

logger = logging.getLogger(__name__)


def _getcwd() -> Path:
    try:
        return Path(os.getcwd())
    except OSError as exc:
        logger.error("getting current directory: %s", exc)
        return Path.home()


class NavigationStack:
    """Directory levels, cursor movement, marks, and the pending operation."""

    def __init__(
        self,
        height: int,
        options: NavOptions = DEFAULT_OPTIONS,
        *,
        path: Path | str | None = None,
        loader: Loader | None = None,
        store: PendingOperationStore | None = None,
        put_job: PutJob = put_files,
    ) -> None:
        self.height = max(1, height)
        self.options = options
        self.loader = Loader() if loader is None else loader
        self.store = PendingOperationStore() if store is None else store
        self.put_job = put_job
        self.marks = MarkSet()
        self.saves: dict[Path, bool] = {}
        self.search = ""
        self.dirs: list[Listing] = []

        if path is None:
            self.rebuild(_getcwd())
        else:
            self.cd(path)

    def rebuild(self, wd: Path) -> None:
        """Rebuild the stack for ``wd`` and every ancestor up to the root.

        Each ancestor's cursor is seeded on the child directory below it.
        """
        dirs: list[Listing] = []
        curr = wd
        base: str | None = None
        while True:
            listing = self.loader.request_listing(curr, self.options)
            listing.find(listing.name() if base is None else base, self.height, self.options.scrolloff)
            dirs.append(listing)
            if curr.parent == curr:
                break
            base = curr.name
            curr = curr.parent

        dirs.reverse()
        self.dirs = dirs

    def position(self) -> None:
        """Point every ancestor's cursor at the directory below it."""
        path = self.current_dir().path
        for level in reversed(self.dirs[:-1]):
            level.find(path.name, self.height, self.options.scrolloff)
            path = path.parent

    def _merge_listing(self, listing: Listing) -> None:
        prev = self.loader.listings.get(listing.path)
        if prev is None:
            prev = next((level for level in self.dirs if level.path == listing.path), None)
        if prev is not None:
            listing.ind, listing.pos = prev.ind, prev.pos
            listing.find(prev.name(), self.height, self.options.scrolloff)

        self.loader.listings[listing.path] = listing
        for i, level in enumerate(self.dirs):
            if level.path == listing.path:
                self.dirs[i] = listing
        self.position()

    def process_results(self) -> int:
        """Merge every finished load into the caches and stack.

        Returns the number of merged results.
        """
        merged = 0
        for listing in self.loader.drain_listings():
            self._merge_listing(listing)
            merged += 1
        for register in self.loader.drain_registers():
            self.loader.registers[register.path] = register
            merged += 1
        return merged

    def wait_until_idle(self, timeout: float = 5.0, interval: float = 0.01) -> bool:
        """Keep merging results until no load is outstanding.

        Returns ``False`` if loads are still running when ``timeout`` expires.
        """
        deadline = time.monotonic() + timeout
        while True:
            self.process_results()
            if not self.loader.busy:
                return True
            if time.monotonic() >= deadline:
                return False
            time.sleep(interval)

    def refresh(self, height: int | None = None) -> None:
        """Reload stack levels whose directory changed and drop stale marks.

        The listing cache is reduced to the levels currently on the stack.
        """
        self.loader.retain_listings(self.dirs)
        if height is not None:
            self.height = max(1, height)
        for level in self.dirs:
            self.loader.schedule_reload(level, self.options)

        self.marks.prune(os.path.exists)

    def reload(self) -> None:
        """Drop every cache and rebuild the stack from the working directory."""
        current = self.current_dir().current() if self.dirs else None
        self.loader.clear()
        self.rebuild(_getcwd())
        last = self.current_dir()
        if current is not None and last.loading:
            last.add_placeholder_entry(current)

    def sort(self) -> None:
        """Re-sort every cached listing, keeping each highlighted name."""
        seen: set[int] = set()
        for listing in [*self.loader.listings.values(), *self.dirs]:
            if id(listing) in seen:
                continue
            seen.add(id(listing))
            name = listing.name()
            sort_listing(listing, self.options)
            listing.find(name, self.height, self.options.scrolloff)

    def set_options(self, options: NavOptions) -> None:
        self.options = options
        self.sort()

    def current_dir(self) -> Listing:
        return self.dirs[-1]

    def current_entry(self) -> FileEntry:
        """Return the highlighted entry or raise ``NavigationError`` when empty."""
        entry = self.current_dir().current()
        if entry is None:
            raise NavigationError("empty directory")
        return entry

    def preview(self) -> Listing | Register | None:
        """Return the listing or register previewing the highlighted entry."""
        entry = self.current_dir().current()
        if entry is None:
            return None
        if entry.is_dir:
            return self.loader.request_listing(entry.path, self.options)
        return self.loader.request_register(entry, self.height, self.options)

    def up(self, dist: int) -> None:
        listing = self.current_dir()
        if listing.ind == 0:
            return

        listing.ind = max(0, listing.ind - dist)

        listing.pos -= dist
        edge = min(self.options.scrolloff, self.height // 2, listing.ind)
        listing.pos = max(listing.pos, edge)

    def down(self, dist: int) -> None:
        listing = self.current_dir()
        maxind = len(listing.visible) - 1
        if listing.ind >= maxind:
            return

        listing.ind = min(maxind, listing.ind + dist)

        listing.pos += dist
        edge = min(self.options.scrolloff, self.height // 2, maxind - listing.ind)

        # Smaller margin when the height is even and scrolloff is maxed, so the
        # cursor stays on the same row across repeated up/down moves.
        edge = min(edge, self.height // 2 + self.height % 2 - 1)

        listing.pos = min(listing.pos, self.height - edge - 1)
        listing.pos = min(listing.pos, maxind)

    def move_by(self, distance: int) -> None:
        """Move the cursor ``distance`` rows (negative is up)."""
        if distance < 0:
            self.up(-distance)
        elif distance > 0:
            self.down(distance)

    def top(self) -> None:
        listing = self.current_dir()
        listing.ind = 0
        listing.pos = 0

    def bottom(self) -> None:
        listing = self.current_dir()
        if not listing.visible:
            listing.ind, listing.pos = 0, 0
            return
        listing.ind = len(listing.visible) - 1
        listing.pos = min(listing.ind, self.height - 1)

    def open(self) -> None:
        """Descend into the highlighted directory."""
        try:
            entry = self.current_entry()
        except NavigationError as exc:
            raise NavigationError(f"open: {exc}") from exc
        if not entry.is_dir:
            raise NavigationError(f"open: not a directory: {entry.path}")

        try:
            os.chdir(entry.path)
        except OSError as exc:
            raise NavigationError(f"open: {exc}") from exc

        self.dirs.append(self.loader.request_listing(entry.path, self.options))

    def updir(self) -> None:
        """Go to the parent directory; no-op at the outermost level."""
        if len(self.dirs) <= 1:
            return

        parent = self.current_dir().path.parent
        try:
            os.chdir(parent)
        except OSError as exc:
            raise NavigationError(f"updir: {exc}") from exc

        self.dirs.pop()

    def _resolve(self, path: Path | str) -> Path:
        raw = os.path.expanduser(str(path))
        raw = os.path.normpath(raw)
        if not os.path.isabs(raw):
            base = self.current_dir().path if self.dirs else _getcwd()
            raw = os.path.normpath(os.path.join(base, raw))
        return Path(raw)

    def cd(self, path: Path | str) -> None:
        """Change to ``path`` (``~`` expanded, relative to the current directory)."""
        wd = self._resolve(path)
        try:
            os.chdir(wd)
        except OSError as exc:
            raise NavigationError(f"cd: {exc}") from exc

        logger.debug("changed directory to %s", wd)
        self.rebuild(wd)

    def select_path(self, path: Path | str) -> None:
        """Change to the parent of ``path`` and put the cursor on it."""
        target = self._resolve(path)
        try:
            stat = os.stat(target)
        except OSError as exc:
            raise NavigationError(f"select: {exc}") from exc

        try:
            self.cd(target.parent)
        except NavigationError as exc:
            raise NavigationError(f"select: {exc}") from exc

        last = self.current_dir()
        if last.loading:
            # Merging the real listing re-finds this name.
            last.add_placeholder_entry(make_placeholder_entry(target, stat))
            last.ind = len(last.visible) - 1
        last.find(target.name, self.height, self.options.scrolloff)

    def toggle_mark(self, path: Path) -> None:
        self.marks.toggle(path)

    def toggle(self) -> None:
        """Toggle the mark on the highlighted entry and move down."""
        entry = self.current_dir().current()
        if entry is None:
            return
        self.toggle_mark(entry.path)
        self.down(1)

    def invert(self) -> None:
        for entry in self.current_dir().visible:
            self.toggle_mark(entry.path)

    def unmark(self) -> None:
        self.marks.clear()

    def ordered_marks(self) -> list[Path]:
        return self.marks.ordered()

    def snapshot(self, copy: bool) -> list[Path]:
        """Record the marked files (or the highlighted one) for a later put."""
        if self.marks:
            paths = self.ordered_marks()
        else:
            entry = self.current_dir().current()
            if entry is None:
                raise NoFileSelectedError()
            paths = [entry.path]

        try:
            self.store.save(paths, copy)
        except OSError as exc:
            raise OperationError(f"saving files: {exc}") from exc

        self.saves = {path: copy for path in paths}
        return paths

    def commit(self) -> list[Path]:
        """Copy or move the pending files into the current directory."""
        try:
            paths, copy = self.store.load()
        except OSError as exc:
            raise OperationError(f"loading files: {exc}") from exc
        if not paths:
            raise EmptyBufferError()

        destination = self.current_dir().path
        try:
            self.put_job(paths, destination, copy)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise OperationError(f"putting files: {exc}") from exc

        try:
            self.store.clear()
        except OSError as exc:
            raise OperationError(f"clearing yank/delete buffer: {exc}") from exc

        logger.info("%s %d file(s) into %s", "copied" if copy else "moved", len(paths), destination)
        self.saves = {}
        self.refresh()
        return paths

    def reconcile(self) -> None:
        """Reload the pending-operation mirror from the store."""
        try:
            paths, copy = self.store.load()
        except OSError as exc:
            raise OperationError(f"loading files: {exc}") from exc
        self.saves = {path: copy for path in paths}

    def _names(self) -> list[str]:
        return [entry.name for entry in self.current_dir().visible]

    def search_next(self) -> bool:
        """Move to the next entry matching ``search``; ``False`` if none."""
        listing = self.current_dir()
        index = find_next(self.search, self._names(), listing.ind, self.options)
        if index is None:
            return False
        self.move_by(index - listing.ind)
        return True

    def search_prev(self) -> bool:
        """Move to the previous entry matching ``search``; ``False`` if none."""
        listing = self.current_dir()
        index = find_prev(self.search, self._names(), listing.ind, self.options)
        if index is None:
            return False
        self.move_by(index - listing.ind)
        return True


__all__ = ["NavigationStack"]
