"""Background loading of directory listings and preview registers.

Workers never touch the caches. Each one posts a single finished object onto
the result queue for its kind; the owning thread drains the queues and merges.
A path has at most one load outstanding at a time: the owner inserts a
``loading`` placeholder (and an in-flight flag) before starting the worker.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from pathlib import Path
from queue import Empty, Queue

from ..listing import FileEntry, Listing, ScanFunction, directory_mtime_ns, load_listing, scan_directory
from ..options import NavOptions
from ..preview import Register, build_register

logger = logging.getLogger(__name__)

RegisterBuilder = Callable[[Path, int, NavOptions], Register]


class Loader:
    """Listing and register caches fed by daemon worker threads."""

    def __init__(
        self,
        scan: ScanFunction = scan_directory,
        build_preview: RegisterBuilder = build_register,
    ) -> None:
        self._scan = scan
        self._build_preview = build_preview
        self.listings: dict[Path, Listing] = {}
        self.registers: dict[Path, Register] = {}
        self._listing_results: Queue[Listing | _Unchanged] = Queue()
        self._register_results: Queue[Register] = Queue()
        self._listings_in_flight: set[Path] = set()
        self._registers_in_flight: set[Path] = set()

    @property
    def busy(self) -> bool:
        """Whether any started load has not been drained yet."""
        return bool(self._listings_in_flight or self._registers_in_flight)

    def _start(self, target: Callable[[], None], name: str) -> None:
        worker = threading.Thread(target=target, name=name, daemon=True)
        worker.start()

    def _spawn_listing_load(self, path: Path, options: NavOptions, not_before_ns: int | None = None) -> None:
        self._listings_in_flight.add(path)

        def work() -> None:
            try:
                if not_before_ns is not None:
                    mtime_ns = directory_mtime_ns(path)
                    if mtime_ns is not None and not_before_ns > mtime_ns:
                        self._listing_results.put(_Unchanged(path, options))
                        return
                listing = load_listing(path, options, scan=self._scan)
            except Exception:
                logger.exception("loading directory %s", path)
                listing = Listing(path=path)
            self._listing_results.put(listing)

        self._start(work, "lazynav-listing-load")

    def request_listing(self, path: Path, options: NavOptions) -> Listing:
        """Return the cached listing for ``path``, starting a load on a miss."""
        listing = self.listings.get(path)
        if listing is not None:
            return listing

        listing = Listing.placeholder(path)
        self.listings[path] = listing
        # An evicted path may still have its earlier load outstanding.
        if path not in self._listings_in_flight:
            self._spawn_listing_load(path, options)
        return listing

    def schedule_reload(self, listing: Listing, options: NavOptions) -> bool:
        """Reload ``listing`` in the background when its directory changed.

        The modification-time check runs in the worker; an unchanged directory
        delivers nothing, unless the cache was reset to a placeholder in the
        meantime, in which case draining starts a full load. Returns ``False`` when a load is already outstanding.
        """
        if listing.loading or listing.path in self._listings_in_flight:
            return False
        self._spawn_listing_load(listing.path, options, not_before_ns=listing.load_time_ns)
        return True

    def request_register(self, entry: FileEntry, height: int, options: NavOptions) -> Register:
        """Return the cached preview for ``entry``, starting a load on a miss."""
        register = self.registers.get(entry.path)
        if register is not None:
            return register

        path = entry.path
        register = Register.placeholder(path)
        self.registers[path] = register
        if path in self._registers_in_flight:
            return register
        self._registers_in_flight.add(path)

        def work() -> None:
            try:
                result = self._build_preview(path, height, options)
            except Exception:
                logger.exception("previewing file %s", path)
                result = Register(path=path)
            self._register_results.put(result)

        self._start(work, "lazynav-preview-load")
        return register

    def drain_listings(self) -> list[Listing]:
        """Drain finished listings in arrival order."""
        out: list[Listing] = []
        while True:
            try:
                result = self._listing_results.get_nowait()
            except Empty:
                break
            self._listings_in_flight.discard(result.path)
            if isinstance(result, _Unchanged):
                cached = self.listings.get(result.path)
                if cached is not None and cached.loading:
                    # A placeholder was inserted while the reload was gated.
                    self._spawn_listing_load(result.path, result.options)
                continue
            out.append(result)
        return out

    def drain_registers(self) -> list[Register]:
        """Drain finished registers in arrival order."""
        out: list[Register] = []
        while True:
            try:
                register = self._register_results.get_nowait()
            except Empty:
                break
            self._registers_in_flight.discard(register.path)
            out.append(register)
        return out

    def retain_listings(self, listings: Iterable[Listing]) -> None:
        """Rebuild the listing cache from ``listings`` alone."""
        self.listings = {listing.path: listing for listing in listings}

    def clear(self) -> None:
        self.listings = {}
        self.registers = {}


class _Unchanged:
    """Result posted when a reload found the directory unmodified."""

    __slots__ = ("path", "options")

    def __init__(self, path: Path, options: NavOptions) -> None:
        self.path = path
        self.options = options


__all__ = [
    "RegisterBuilder",
    "Loader",
]
