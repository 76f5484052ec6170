"""Session mutation tests: create, rename, move, duplicate, delete.

Checks cache invalidation, refetch of visible directories, and how
expansion, selection, and the open file follow renamed or deleted entries.
"""

from __future__ import annotations

import threading
import unittest

from lazytree.backend import MemoryBackend
from lazytree.errors import BackendIOError, Conflict, InvalidDrop, InvalidPath
from lazytree.paths import TreePath
from lazytree.runtime import TreeSession
from lazytree.runtime.fetch import FolderFetchScheduler


def _values(paths) -> list[str]:
    return [path.value for path in paths]


class SessionMutationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.backend = MemoryBackend(
            {
                "docs": {"guide": {"intro.md": 3}, "notes.md": 4},
                "src": {"app.py": 5},
                "a.txt": 1,
                "b.txt": 2,
            }
        )
        self.session = TreeSession(self.backend)
        self.session.start()
        self.session.expand_paths(["docs", "docs/guide", "src"])

    def test_create_file_refetches_parent_and_expands_it(self) -> None:
        self.session.collapse("src")
        created = self.session.create_entry("src", "new.py")
        self.assertEqual(created, TreePath("src/new.py"))
        self.assertTrue(self.session.is_expanded("src"))
        self.assertIn(created, self.session.flat)

    def test_create_folder_at_root(self) -> None:
        created = self.session.create_folder(None, "build")
        self.assertIn(created, self.session.flat)
        self.assertTrue(self.session.flat.node(created).is_dir)

    def test_create_rejects_bad_names_and_conflicts(self) -> None:
        with self.assertRaises(InvalidPath):
            self.session.create_entry("src", "a/b")
        with self.assertRaises(InvalidPath):
            self.session.create_entry("src", "  ")
        with self.assertRaises(Conflict):
            self.session.create_entry("src", "app.py")

    def test_rename_directory_rekeys_expansion_selection_and_open_file(self) -> None:
        self.session.click("docs/guide/intro.md")
        renamed = self.session.rename_entry("docs", "manual")

        self.assertEqual(renamed, TreePath("manual"))
        self.assertIn(TreePath("manual"), self.session.expanded)
        self.assertIn(TreePath("manual/guide"), self.session.expanded)
        self.assertNotIn(TreePath("docs"), self.session.expanded)
        self.assertIn(TreePath("manual/guide/intro.md"), self.session.flat)
        self.assertEqual(_values(self.session.selected_paths()), ["manual/guide/intro.md"])
        self.assertEqual(self.session.current_file, TreePath("manual/guide/intro.md"))
        self.assertNotIn(TreePath("docs/guide"), self.session.cache)

    def test_failed_rename_leaves_tree_untouched(self) -> None:
        before = self.session.flat_paths
        self.backend.fail("rename_entry", "a.txt", BackendIOError("read-only"))
        with self.assertRaises(BackendIOError):
            self.session.rename_entry("a.txt", "c.txt")
        self.assertEqual(self.session.flat_paths, before)

    def test_move_into_directory(self) -> None:
        self.session.click("a.txt")
        moved = self.session.move_entry("a.txt", "src")
        self.assertEqual(moved, TreePath("src/a.txt"))
        self.assertIn(moved, self.session.flat)
        self.assertNotIn(TreePath("a.txt"), self.session.flat)
        self.assertEqual(_values(self.session.selected_paths()), ["src/a.txt"])

    def test_move_to_root(self) -> None:
        moved = self.session.move_entry("docs/notes.md", None)
        self.assertEqual(moved, TreePath("notes.md"))
        self.assertIn(moved, self.session.flat)

    def test_invalid_drop_raises_before_backend_call(self) -> None:
        with self.assertLogs("lazytree.runtime.session", level="WARNING"):
            with self.assertRaises(InvalidDrop):
                self.session.move_entry("docs", "docs/guide")
        self.assertFalse(self.session.can_drop("docs", "docs"))
        self.assertTrue(self.session.can_drop("docs", "src"))
        self.assertNotIn("move_entry", [call[0] for call in self.backend.calls])

    def test_move_within_same_parent_is_a_no_op(self) -> None:
        self.assertEqual(self.session.move_entry("src/app.py", "src"), TreePath("src/app.py"))
        self.assertNotIn("move_entry", [call[0] for call in self.backend.calls])

    def test_duplicate_uses_copy_suffix_by_default(self) -> None:
        copy = self.session.duplicate_entry("src/app.py")
        self.assertEqual(copy, TreePath("src/app.py copy"))
        self.assertIn(copy, self.session.flat)
        named = self.session.duplicate_entry("docs", "docs-backup")
        self.assertIn(named, self.session.flat)

    def test_delete_prunes_selection(self) -> None:
        self.session.click("a.txt")
        self.session.click("b.txt", ctrl=True)
        self.session.delete_entry("b.txt")
        self.assertEqual(_values(self.session.selected_paths()), ["a.txt"])
        self.assertNotIn(TreePath("b.txt"), self.session.flat)

    def test_delete_directory_is_recursive_and_forgets_expansion(self) -> None:
        self.session.click("docs/guide/intro.md")
        self.session.delete_entry("docs")
        self.assertFalse(self.backend.exists("docs"))
        self.assertFalse(any(path.value.startswith("docs") for path in self.session.expanded))
        self.assertIsNone(self.session.current_file)
        self.assertTrue(self.session.selection.is_empty())

    def test_delete_selected_removes_only_topmost_entries(self) -> None:
        self.session.click("docs", ctrl=True)
        self.session.click("docs/notes.md", ctrl=True)
        self.session.click("a.txt", ctrl=True)
        removed = self.session.delete_selected()
        self.assertEqual(_values(removed), ["docs", "a.txt"])
        self.assertEqual(_values(self.session.flat_paths), ["src", "src/app.py", "b.txt"])


class ThreadedMutationTests(unittest.TestCase):
    """Mutations while listings complete on worker threads."""

    def setUp(self) -> None:
        self.backend = MemoryBackend({"a.txt": 1, "b.txt": 2, "c.txt": 3})
        self.gate = threading.Event()
        self.gate.set()

        def gated_listing(path: TreePath):
            self.gate.wait(timeout=5)
            return self.backend.list_directory(path)

        self.session = TreeSession(self.backend, fetcher=FolderFetchScheduler(gated_listing, max_workers=2))
        self.session.start()
        self.assertTrue(self.session.wait_until_idle(timeout=5))

    def tearDown(self) -> None:
        self.gate.set()
        self.session.close()

    def test_delete_keeps_surviving_selection_until_refetch_lands(self) -> None:
        self.session.click("a.txt")
        self.session.click("b.txt", ctrl=True)
        self.gate.clear()
        self.session.delete_entry("b.txt")

        self.assertTrue(self.session.is_pending(""))
        self.assertEqual(self.session.selection.state.selected, {TreePath("a.txt")})
        self.gate.set()
        self.assertTrue(self.session.wait_until_idle(timeout=5))
        self.assertEqual(_values(self.session.selected_paths()), ["a.txt"])
        self.assertEqual(_values(self.session.flat_paths), ["a.txt", "c.txt"])

    def test_rename_rekeys_selection_before_refetch_lands(self) -> None:
        self.session.click("a.txt")
        self.gate.clear()
        self.session.rename_entry("a.txt", "z.txt")

        self.assertEqual(self.session.selection.state.selected, {TreePath("z.txt")})
        self.gate.set()
        self.assertTrue(self.session.wait_until_idle(timeout=5))
        self.assertEqual(_values(self.session.selected_paths()), ["z.txt"])
        self.assertEqual(self.session.current_file, TreePath("z.txt"))


if __name__ == "__main__":
    unittest.main()
