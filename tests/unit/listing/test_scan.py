"""Tests for directory scanning, symlink states, and listing construction."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazynav.listing import LinkState, load_listing, scan_directory
from lazynav.options import NavOptions


class ScanDirectoryTests(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name).resolve()

    def _by_name(self) -> dict:
        return {entry.name: entry for entry in scan_directory(self.root)}

    def test_regular_entries_carry_lstat_metadata(self) -> None:
        (self.root / "file.txt").write_bytes(b"12345")
        (self.root / "sub").mkdir()

        entries = self._by_name()

        self.assertEqual(set(entries), {"file.txt", "sub"})
        self.assertEqual(entries["file.txt"].size, 5)
        self.assertFalse(entries["file.txt"].is_dir)
        self.assertTrue(entries["sub"].is_dir)
        self.assertEqual(entries["file.txt"].link_state, LinkState.NONE)
        self.assertEqual(entries["file.txt"].path, self.root / "file.txt")

    def test_working_symlink_adopts_target_metadata(self) -> None:
        target = self.root / "target"
        target.mkdir()
        os.symlink(target, self.root / "link")

        link = self._by_name()["link"]

        self.assertEqual(link.link_state, LinkState.WORKING)
        self.assertTrue(link.is_dir)
        self.assertEqual(link.stat.st_ino, os.stat(target).st_ino)

    def test_broken_symlink_keeps_its_own_lstat(self) -> None:
        link_path = self.root / "dangling"
        os.symlink(self.root / "missing", link_path)
        (self.root / "after.txt").write_text("ok", encoding="utf-8")

        with self.assertLogs("lazynav.listing.fs", level="WARNING") as logs:
            entries = self._by_name()

        link = entries["dangling"]
        own = os.lstat(link_path)
        self.assertEqual(link.link_state, LinkState.BROKEN)
        self.assertEqual(link.stat.st_ino, own.st_ino)
        self.assertEqual(link.mode, own.st_mode)
        self.assertEqual(link.size, own.st_size)
        self.assertIn("after.txt", entries)
        self.assertTrue(any("getting link destination info" in line for line in logs.output))

    def test_symlink_loop_is_broken_not_fatal(self) -> None:
        os.symlink(self.root / "loop", self.root / "loop")

        with self.assertLogs("lazynav.listing.fs", level="WARNING"):
            entries = self._by_name()

        self.assertEqual(entries["loop"].link_state, LinkState.BROKEN)

    def test_entry_vanishing_before_lstat_is_dropped(self) -> None:
        (self.root / "keep").write_text("", encoding="utf-8")
        (self.root / "gone").write_text("", encoding="utf-8")
        real_lstat = os.lstat

        def flaky_lstat(path, *args, **kwargs):
            if Path(path).name == "gone":
                raise FileNotFoundError(2, "No such file or directory", str(path))
            return real_lstat(path, *args, **kwargs)

        with mock.patch("lazynav.listing.fs.os.lstat", side_effect=flaky_lstat):
            names = [entry.name for entry in scan_directory(self.root)]

        self.assertEqual(names, ["keep"])

    def test_other_entry_errors_are_logged_and_skipped(self) -> None:
        (self.root / "keep").write_text("", encoding="utf-8")
        (self.root / "denied").write_text("", encoding="utf-8")
        real_lstat = os.lstat

        def denied_lstat(path, *args, **kwargs):
            if Path(path).name == "denied":
                raise PermissionError(13, "Permission denied", str(path))
            return real_lstat(path, *args, **kwargs)

        with mock.patch("lazynav.listing.fs.os.lstat", side_effect=denied_lstat):
            with self.assertLogs("lazynav.listing.fs", level="WARNING"):
                names = [entry.name for entry in scan_directory(self.root)]

        self.assertEqual(names, ["keep"])

    def test_missing_directory_raises(self) -> None:
        with self.assertRaises(OSError):
            scan_directory(self.root / "nope")

    def test_count_children_is_lazy_and_respects_hidden(self) -> None:
        sub = self.root / "sub"
        sub.mkdir()
        (sub / "a").write_text("", encoding="utf-8")
        (sub / ".b").write_text("", encoding="utf-8")

        entry = self._by_name()["sub"]

        self.assertEqual(entry.count, -1)
        self.assertEqual(entry.count_children(show_hidden=False), 1)
        self.assertEqual(entry.count, 1)


class LoadListingTests(unittest.TestCase):
    def test_load_listing_sorts_and_is_not_loading(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            for name in ("b", "a", ".c"):
                (root / name).write_text("", encoding="utf-8")

            listing = load_listing(root, NavOptions(sort_by="name"))

            self.assertFalse(listing.loading)
            self.assertEqual([entry.name for entry in listing.visible], ["a", "b"])
            self.assertEqual(len(listing.all), 3)
            self.assertGreater(listing.load_time_ns, 0)

    def test_unreadable_directory_yields_empty_listing(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            missing = Path(tmp).resolve() / "missing"

            with self.assertLogs("lazynav.listing.fs", level="ERROR") as logs:
                listing = load_listing(missing, NavOptions())

            self.assertEqual(listing.all, [])
            self.assertEqual(listing.visible, [])
            self.assertTrue(any("reading directory" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
