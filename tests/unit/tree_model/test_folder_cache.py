"""Tests for the per-directory listing cache."""

from __future__ import annotations

import unittest

from lazytree.paths import ROOT, TreePath
from lazytree.tree_model import Entry, FolderContentCache


class FolderContentCacheTests(unittest.TestCase):
    def test_get_before_set_returns_none(self) -> None:
        cache = FolderContentCache()
        self.assertIsNone(cache.get("never/fetched"))
        self.assertNotIn("never/fetched", cache)

    def test_last_set_wins(self) -> None:
        cache = FolderContentCache()
        cache.set("src", [Entry("old.py", False)])
        cache.set("src", [Entry("new.py", False)])
        self.assertEqual(cache.get(TreePath("src")), (Entry("new.py", False),))

    def test_root_accepts_string_or_path_key(self) -> None:
        cache = FolderContentCache()
        cache.set("", [Entry("a", False)])
        self.assertIn(ROOT, cache)
        self.assertEqual(len(cache), 1)

    def test_invalidate_reports_whether_slot_existed(self) -> None:
        cache = FolderContentCache()
        cache.set("docs", [])
        self.assertTrue(cache.invalidate("docs"))
        self.assertFalse(cache.invalidate("docs"))
        self.assertIsNone(cache.get("docs"))

    def test_invalidate_subtree_drops_only_nested_slots(self) -> None:
        cache = FolderContentCache()
        for path in ("a", "a/b", "a/b/c", "ab", ""):
            cache.set(path, [])
        self.assertEqual(cache.invalidate_subtree("a"), 3)
        self.assertEqual(sorted(cache.paths()), [ROOT, TreePath("ab")])

    def test_rekey_subtree_moves_listings_to_new_location(self) -> None:
        cache = FolderContentCache()
        cache.set("docs", [Entry("guide", True)])
        cache.set("docs/guide", [Entry("intro.md", False)])
        cache.set("docs-old", [])
        self.assertEqual(cache.rekey_subtree("docs", "archive/docs"), 2)
        self.assertEqual(cache.get("archive/docs/guide"), (Entry("intro.md", False),))
        self.assertNotIn("docs", cache)
        self.assertIn("docs-old", cache)

    def test_non_path_membership_is_false(self) -> None:
        self.assertNotIn(3, FolderContentCache())


if __name__ == "__main__":
    unittest.main()
