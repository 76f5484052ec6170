"""Tests for key tokens and the key-combo dispatch registry."""

from __future__ import annotations

import unittest

from lazytree.input.key_registry import KeyComboBinding, KeyComboRegistry
from lazytree.input.keys import KeyEvent, canonical_token, parse_key_token


class KeyTokenTests(unittest.TestCase):
    def test_event_token_orders_modifiers(self) -> None:
        self.assertEqual(KeyEvent("n", ctrl=True, shift=True).token(), "CTRL_SHIFT_N")
        self.assertEqual(KeyEvent("ArrowDown", shift=True).token(), "SHIFT_DOWN")
        self.assertEqual(KeyEvent(" ").token(), "SPACE")

    def test_meta_folds_into_ctrl(self) -> None:
        self.assertEqual(KeyEvent("a", meta=True).token(), "CTRL_A")
        self.assertEqual(canonical_token("cmd+a"), "CTRL_A")

    def test_parse_accepts_plus_and_underscore(self) -> None:
        self.assertEqual(parse_key_token("Shift+Up"), KeyEvent("Up", shift=True))
        self.assertEqual(canonical_token("shift_ctrl_n"), "CTRL_SHIFT_N")
        self.assertEqual(canonical_token("Escape"), "ESC")
        self.assertEqual(canonical_token("Return"), "ENTER")

    def test_modifier_name_alone_is_a_key(self) -> None:
        self.assertEqual(canonical_token("SHIFT"), "SHIFT")


class KeyComboRegistryTests(unittest.TestCase):
    def test_dispatch_matches_any_spelling(self) -> None:
        calls: list[str] = []
        registry = KeyComboRegistry().register_binding(
            KeyComboBinding(("ctrl+a",), lambda event: calls.append(event.token()) or True)
        )
        self.assertTrue(registry.dispatch(KeyEvent("A", meta=True)))
        self.assertEqual(calls, ["CTRL_A"])
        self.assertEqual(registry.bound_tokens(), ["CTRL_A"])

    def test_unbound_key_returns_none(self) -> None:
        registry = KeyComboRegistry()
        self.assertIsNone(registry.dispatch(KeyEvent("x")))

    def test_later_binding_replaces_earlier(self) -> None:
        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(("F2",), lambda _event: False),
            KeyComboBinding(("f2",), lambda _event: True),
        )
        self.assertTrue(registry.dispatch(parse_key_token("F2")))


if __name__ == "__main__":
    unittest.main()
