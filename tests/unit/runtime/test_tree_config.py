"""Tests for persisted view options and per-project expanded folders.

Ensures malformed config data is safely normalized on load.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from lazytree.paths import TreePath
from lazytree.runtime import config
from lazytree.tree_model import ViewOptions


class TreeConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "lazytree" / "config.json"
        patcher = mock.patch("lazytree.runtime.config.CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_missing_or_malformed_file_loads_empty(self) -> None:
        self.assertEqual(config.load_config(), {})
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text("[1, 2", encoding="utf-8")
        self.assertEqual(config.load_config(), {})
        self.config_path.write_text("[1, 2]", encoding="utf-8")
        self.assertEqual(config.load_config(), {})

    def test_view_options_round_trip_without_search_query(self) -> None:
        config.save_view_options(
            ViewOptions(hide_hidden=True, type_filter="code", search_query="abc", sort_by="date", sort_order="desc")
        )
        loaded = config.load_view_options()
        self.assertEqual(
            loaded,
            ViewOptions(hide_hidden=True, type_filter="code", sort_by="date", sort_order="desc"),
        )
        self.assertNotIn("search_query", config.load_config())

    def test_invalid_view_option_values_fall_back_per_key(self) -> None:
        config.save_config({"hide_hidden": "yes", "type_filter": "video", "sort_by": "size", "sort_order": 3})
        self.assertEqual(config.load_view_options(), ViewOptions(sort_by="size"))

    def test_expanded_folders_are_stored_per_project(self) -> None:
        config.save_expanded_folders("one", {TreePath("b"), TreePath("a/c")})
        config.save_expanded_folders("two", {TreePath("x")})
        self.assertEqual(config.load_expanded_folders("one"), {TreePath("a/c"), TreePath("b")})
        self.assertEqual(config.load_expanded_folders("two"), {TreePath("x")})
        self.assertEqual(json.loads(self.config_path.read_text(encoding="utf-8"))["expanded"]["one"], ["a/c", "b"])

        config.forget_project("one")
        self.assertEqual(config.load_expanded_folders("one"), set())
        self.assertEqual(config.load_expanded_folders("two"), {TreePath("x")})

    def test_load_expanded_folders_drops_invalid_entries(self) -> None:
        config.save_config({"expanded": {"p": ["ok", 7, "", "../escape", "a//b"]}})
        self.assertEqual(config.load_expanded_folders("p"), {TreePath("ok"), TreePath("a/b")})
        config.save_config({"expanded": ["not", "a", "mapping"]})
        self.assertEqual(config.load_expanded_folders("p"), set())


if __name__ == "__main__":
    unittest.main()
