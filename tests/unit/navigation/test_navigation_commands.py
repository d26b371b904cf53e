"""Tests for marks, pending copy/move commands, and search on the navigation stack."""

from __future__ import annotations

import os
import subprocess
import tempfile
import unittest
from pathlib import Path

from lazynav.errors import EmptyBufferError, NoFileSelectedError, NothingToDoError, OperationError
from lazynav.navigation import NavigationStack
from lazynav.options import NavOptions
from lazynav.runtime.pending import PendingOperationStore


class CommandTestCase(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        state = tempfile.TemporaryDirectory()
        self.addCleanup(state.cleanup)
        previous_cwd = os.getcwd()
        self.addCleanup(os.chdir, previous_cwd)

        self.root = Path(tmp.name).resolve()
        self.store = PendingOperationStore(Path(state.name) / "pending.json")
        for name in ("a", "b", "c", "d"):
            (self.root / name).write_text(name, encoding="utf-8")
        self.put_calls: list[tuple[list[Path], Path, bool]] = []

    def record_put(self, paths: list[Path], destination: Path, copy: bool) -> None:
        self.put_calls.append((list(paths), destination, copy))

    def make_nav(self, path: Path | None = None, options: NavOptions | None = None, **kwargs) -> NavigationStack:
        kwargs.setdefault("store", self.store)
        kwargs.setdefault("put_job", self.record_put)
        nav = NavigationStack(10, options or NavOptions(), path=path or self.root, **kwargs)
        self.assertTrue(nav.wait_until_idle(timeout=5.0))
        return nav


class MarkCommandTests(CommandTestCase):
    def test_toggle_marks_and_moves_down(self) -> None:
        nav = self.make_nav()

        nav.toggle()
        nav.toggle()

        self.assertEqual(nav.ordered_marks(), [self.root / "a", self.root / "b"])
        self.assertEqual(nav.current_entry().name, "c")

    def test_ordered_marks_follow_toggle_order(self) -> None:
        nav = self.make_nav()
        a, b, c = (self.root / name for name in ("a", "b", "c"))

        for path in (a, b, c):
            nav.toggle_mark(path)
        self.assertEqual(nav.ordered_marks(), [a, b, c])

        nav.toggle_mark(b)
        nav.toggle_mark(b)
        self.assertEqual(nav.ordered_marks(), [a, c, b])

    def test_invert_toggles_every_visible_entry(self) -> None:
        nav = self.make_nav()
        nav.toggle_mark(self.root / "b")

        nav.invert()

        self.assertEqual(nav.ordered_marks(), [self.root / "a", self.root / "c", self.root / "d"])

    def test_unmark_clears_everything(self) -> None:
        nav = self.make_nav()
        nav.invert()

        nav.unmark()

        self.assertEqual(nav.ordered_marks(), [])
        self.assertEqual(len(nav.marks), 0)


class PendingOperationTests(CommandTestCase):
    def test_snapshot_without_marks_uses_highlighted_file(self) -> None:
        nav = self.make_nav()
        nav.down(2)

        paths = nav.snapshot(copy=True)

        self.assertEqual(paths, [self.root / "c"])
        self.assertEqual(self.store.load(), ([self.root / "c"], True))
        self.assertEqual(nav.saves, {self.root / "c": True})

    def test_snapshot_uses_marks_in_toggle_order(self) -> None:
        nav = self.make_nav()
        nav.toggle_mark(self.root / "d")
        nav.toggle_mark(self.root / "a")

        nav.snapshot(copy=False)

        self.assertEqual(self.store.load(), ([self.root / "d", self.root / "a"], False))

    def test_snapshot_in_empty_directory_has_nothing_to_do(self) -> None:
        empty = self.root / "empty"
        empty.mkdir()
        nav = self.make_nav(empty)

        with self.assertRaises(NoFileSelectedError) as ctx:
            nav.snapshot(copy=True)

        self.assertIsInstance(ctx.exception, NothingToDoError)
        self.assertEqual(self.store.load(), ([], False))

    def test_commit_runs_job_then_clears_store(self) -> None:
        nav = self.make_nav()
        nav.toggle_mark(self.root / "b")
        nav.snapshot(copy=True)
        target = self.root / "target"
        target.mkdir()
        nav.cd(target)

        nav.commit()

        self.assertEqual(self.put_calls, [([self.root / "b"], target, True)])
        self.assertEqual(self.store.load(), ([], False))
        self.assertEqual(nav.saves, {})

    def test_commit_with_empty_buffer(self) -> None:
        nav = self.make_nav()

        with self.assertRaises(EmptyBufferError):
            nav.commit()

        self.assertEqual(self.put_calls, [])

    def test_failed_job_keeps_pending_record(self) -> None:
        def failing_put(paths: list[Path], destination: Path, copy: bool) -> None:
            raise subprocess.CalledProcessError(1, ["mv"])

        nav = self.make_nav(put_job=failing_put)
        nav.snapshot(copy=False)

        with self.assertRaises(OperationError):
            nav.commit()

        self.assertEqual(self.store.load(), ([self.root / "a"], False))

    def test_commit_moves_files_with_real_job(self) -> None:
        from lazynav.jobs import put_files

        target = self.root / "target"
        target.mkdir()
        nav = self.make_nav(put_job=put_files)
        nav.select_path(self.root / "d")
        nav.snapshot(copy=False)
        nav.cd(target)

        nav.commit()

        self.assertTrue((target / "d").exists())
        self.assertFalse((self.root / "d").exists())
        self.assertTrue(nav.wait_until_idle(timeout=5.0))

    def test_reconcile_reads_record_from_other_session(self) -> None:
        first = self.make_nav()
        first.snapshot(copy=True)
        second = self.make_nav()
        self.assertEqual(second.saves, {})

        second.reconcile()

        self.assertEqual(second.saves, {self.root / "a": True})


class SearchCommandTests(CommandTestCase):
    def test_search_next_wraps_to_first_entry(self) -> None:
        nav = self.make_nav(options=NavOptions(wrapscan=True))
        nav.bottom()
        nav.search = "a"

        self.assertTrue(nav.search_next())

        self.assertEqual(nav.current_dir().ind, 0)
        self.assertEqual(nav.current_dir().pos, 0)

    def test_search_next_without_wrap_leaves_cursor(self) -> None:
        nav = self.make_nav(options=NavOptions(wrapscan=False))
        nav.bottom()
        nav.search = "a"

        self.assertFalse(nav.search_next())

        self.assertEqual(nav.current_dir().ind, 3)

    def test_search_prev_moves_backwards(self) -> None:
        nav = self.make_nav()
        nav.bottom()
        nav.search = "b"

        self.assertTrue(nav.search_prev())

        self.assertEqual(nav.current_entry().name, "b")

    def test_glob_search(self) -> None:
        (self.root / "notes.md").write_text("", encoding="utf-8")
        nav = self.make_nav(options=NavOptions(globsearch=True))
        nav.search = "*.md"

        self.assertTrue(nav.search_next())

        self.assertEqual(nav.current_entry().name, "notes.md")


if __name__ == "__main__":
    unittest.main()
