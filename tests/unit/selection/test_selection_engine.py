"""Tests for click, ctrl-click, shift-click, and pruning selection semantics."""

from __future__ import annotations

import unittest

from lazytree.paths import TreePath
from lazytree.selection import CLICK_OPEN, CLICK_TOGGLE_EXPAND, SelectionEngine
from lazytree.tree_model import FlatTree, TreeNode


def _paths(*values: str) -> set[TreePath]:
    return {TreePath(value) for value in values}


def _flat(*names: str, dirs: tuple[str, ...] = ()) -> FlatTree:
    return FlatTree(tuple(TreeNode(name, name in dirs, TreePath(name), 0) for name in names))


class SelectionEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.flat = _flat("a", "b", "c", "d", "e", dirs=("e",))
        self.engine = SelectionEngine()

    def test_plain_click_selects_only_and_reports_action(self) -> None:
        self.assertEqual(self.engine.click("b", self.flat), CLICK_OPEN)
        self.assertEqual(self.engine.selected, _paths("b"))
        self.assertEqual(self.engine.anchor, TreePath("b"))
        self.assertEqual(self.engine.focus, TreePath("b"))
        self.assertEqual(self.engine.click("e", self.flat), CLICK_TOGGLE_EXPAND)
        self.assertEqual(self.engine.selected, _paths("e"))

    def test_shift_range_selects_exact_run_and_keeps_anchor(self) -> None:
        self.engine.click("b", self.flat)
        self.assertIsNone(self.engine.click("d", self.flat, shift=True))
        self.assertEqual(self.engine.selected, _paths("b", "c", "d"))
        self.assertEqual(self.engine.anchor, TreePath("b"))

        self.engine.click("a", self.flat, shift=True)
        self.assertEqual(self.engine.selected, _paths("a", "b"))
        self.assertEqual(self.engine.anchor, TreePath("b"))
        self.assertEqual(self.engine.focus, TreePath("a"))

    def test_ctrl_click_toggles_without_clearing(self) -> None:
        self.engine.click("a", self.flat)
        self.engine.click("c", self.flat, ctrl=True)
        self.assertEqual(self.engine.selected, _paths("a", "c"))
        self.engine.click("a", self.flat, ctrl=True)
        self.assertEqual(self.engine.selected, _paths("c"))
        self.assertEqual(self.engine.anchor, TreePath("a"))

    def test_shift_without_anchor_falls_back_to_plain_click(self) -> None:
        self.assertEqual(self.engine.click("c", self.flat, shift=True), CLICK_OPEN)
        self.assertEqual(self.engine.selected, _paths("c"))
        self.assertEqual(self.engine.anchor, TreePath("c"))

    def test_click_on_undisplayed_path_is_ignored(self) -> None:
        self.assertIsNone(self.engine.click("zzz", self.flat))
        self.assertTrue(self.engine.is_empty())

    def test_prune_drops_missing_paths_silently(self) -> None:
        self.engine.click("a", self.flat)
        self.engine.click("b", self.flat, ctrl=True)
        self.assertTrue(self.engine.prune(_paths("a", "c")))
        self.assertEqual(self.engine.selected, _paths("a"))
        self.assertIsNone(self.engine.anchor)
        self.assertIsNone(self.engine.focus)
        self.assertFalse(self.engine.prune(_paths("a", "c")))

    def test_select_all_clear_and_ordered_selection(self) -> None:
        self.engine.select_all(self.flat)
        self.assertEqual(self.engine.count(), 5)
        self.engine.clear()
        self.assertTrue(self.engine.is_empty())
        self.assertIsNone(self.engine.anchor)

        self.engine.click("d", self.flat)
        self.engine.click("a", self.flat, ctrl=True)
        self.assertEqual([p.value for p in self.engine.ordered_selection(self.flat)], ["a", "d"])

    def test_toggle_focus_flips_only_focused_path(self) -> None:
        self.engine.click("b", self.flat)
        self.engine.set_focus("c")
        self.engine.toggle_focus()
        self.assertEqual(self.engine.selected, _paths("b", "c"))
        self.engine.toggle_focus()
        self.assertEqual(self.engine.selected, _paths("b"))
        self.assertEqual(self.engine.anchor, TreePath("b"))

    def test_root_is_never_selected(self) -> None:
        self.engine.select_only("")
        self.engine.toggle("")
        self.assertTrue(self.engine.is_empty())


if __name__ == "__main__":
    unittest.main()
