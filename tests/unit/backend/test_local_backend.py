"""Tests for the local-filesystem backend."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from lazytree.backend import LocalDirectoryBackend
from lazytree.errors import BackendIOError, Conflict, InvalidPath, NotFound
from lazytree.paths import ROOT, TreePath


class LocalDirectoryBackendTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "src").mkdir()
        (self.root / "src" / "main.py").write_text("print('hi')\n", encoding="utf-8")
        (self.root / "notes.txt").write_text("x" * 42, encoding="utf-8")
        self.backend = LocalDirectoryBackend(self.root)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_list_directory_reports_kind_size_and_mtime(self) -> None:
        entries = {entry.name: entry for entry in self.backend.list_directory(ROOT)}
        self.assertEqual(set(entries), {"src", "notes.txt"})
        self.assertTrue(entries["src"].is_dir)
        self.assertFalse(entries["notes.txt"].is_dir)
        self.assertEqual(entries["notes.txt"].size, 42)
        self.assertGreater(entries["notes.txt"].mod_time, 0.0)

    def test_list_missing_directory_raises_not_found(self) -> None:
        with self.assertRaises(NotFound) as ctx:
            self.backend.list_directory(TreePath("missing"))
        self.assertEqual(ctx.exception.path, TreePath("missing"))

    def test_create_rejects_existing_entry(self) -> None:
        self.backend.create_entry(TreePath("src/new.py"), "file")
        self.backend.create_entry(TreePath("docs/api"), "dir")
        self.assertTrue((self.root / "src" / "new.py").is_file())
        self.assertTrue((self.root / "docs" / "api").is_dir())
        with self.assertRaises(Conflict):
            self.backend.create_entry(TreePath("src/new.py"), "file")

    def test_rename_and_move(self) -> None:
        self.backend.rename_entry(TreePath("notes.txt"), TreePath("todo.txt"))
        self.assertTrue((self.root / "todo.txt").exists())
        self.backend.move_entry(TreePath("todo.txt"), TreePath("src"))
        self.assertTrue((self.root / "src" / "todo.txt").exists())
        with self.assertRaises(NotFound):
            self.backend.rename_entry(TreePath("gone.txt"), TreePath("other.txt"))
        with self.assertRaises(NotFound):
            self.backend.move_entry(TreePath("src"), TreePath("missing"))

    def test_duplicate_file_and_directory(self) -> None:
        self.backend.duplicate_entry(TreePath("notes.txt"), TreePath("notes copy.txt"))
        self.backend.duplicate_entry(TreePath("src"), TreePath("src copy"))
        self.assertEqual((self.root / "notes copy.txt").read_text(encoding="utf-8"), "x" * 42)
        self.assertTrue((self.root / "src copy" / "main.py").is_file())
        with self.assertRaises(Conflict):
            self.backend.duplicate_entry(TreePath("src"), TreePath("notes.txt"))

    def test_delete_non_empty_directory_needs_recursive(self) -> None:
        with self.assertRaises(BackendIOError):
            self.backend.delete_entry(TreePath("src"), False)
        self.backend.delete_entry(TreePath("src"), True)
        self.assertFalse((self.root / "src").exists())
        self.backend.delete_entry(TreePath("notes.txt"), False)
        self.assertEqual(self.backend.list_directory(ROOT), [])

    def test_delete_root_is_refused(self) -> None:
        with self.assertRaises(BackendIOError):
            self.backend.delete_entry(ROOT, True)

    def test_resolve_stays_inside_root(self) -> None:
        self.assertEqual(self.backend.resolve("src/main.py"), self.root / "src" / "main.py")
        with self.assertRaises(InvalidPath):
            self.backend.resolve("../outside")


if __name__ == "__main__":
    unittest.main()
