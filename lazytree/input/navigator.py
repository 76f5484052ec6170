"""Keyboard navigation over the flattened displayed forest.

The navigator moves the selection engine's focus and selection directly.
Everything that changes the tree (expand, collapse, open, and the mutation
requests) is returned as ``TreeIntent`` values for the session to carry out.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass

from ..paths import ROOT, TreePath
from ..selection import SelectionEngine
from ..tree_model.navigation import FlatTree
from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import KeyEvent, parse_key_token

logger = logging.getLogger(__name__)

INTENT_EXPAND = "expand"
INTENT_COLLAPSE = "collapse"
INTENT_OPEN = "open"
INTENT_DELETE = "delete"
INTENT_RENAME = "rename"
INTENT_CREATE_FILE = "create_file"
INTENT_CREATE_FOLDER = "create_folder"

MUTATION_INTENTS = frozenset({INTENT_DELETE, INTENT_RENAME, INTENT_CREATE_FILE, INTENT_CREATE_FOLDER})


@dataclass(frozen=True)
class TreeIntent:
    """Request emitted by a key press.

    For create intents ``path`` is the directory the new entry goes into.
    """

    kind: str
    path: TreePath
    is_dir: bool = False


@dataclass(frozen=True)
class KeyOutcome:
    handled: bool
    intents: tuple[TreeIntent, ...] = ()


def _with_modifiers(key: str, *prefixes: str) -> tuple[str, ...]:
    return (key, *(f"{prefix}_{key}" for prefix in prefixes))


class KeyboardNavigator:
    """Maps key events to focus moves, selection changes, and tree intents."""

    def __init__(self, selection: SelectionEngine) -> None:
        self.selection = selection

    def handle_key(
        self,
        key: KeyEvent | str,
        flat: FlatTree,
        expanded: Collection[TreePath],
    ) -> KeyOutcome:
        """Handle one key against the current displayed rows and expand state."""
        event = key if isinstance(key, KeyEvent) else parse_key_token(key)
        selection = self.selection
        intents: list[TreeIntent] = []

        def focused_node():
            return flat.node(selection.focus)

        def is_expanded(path: TreePath) -> bool:
            return path in expanded

        def move(direction: int, current: KeyEvent) -> bool:
            target = flat.step(selection.focus, direction)
            if target is None:
                return True
            if current.shift and selection.select_range(target, flat):
                return True
            if current.has_ctrl:
                selection.toggle(target)
            else:
                selection.select_only(target)
            return True

        def move_up(current: KeyEvent) -> bool:
            return move(-1, current)

        def move_down(current: KeyEvent) -> bool:
            return move(1, current)

        def move_right(_current: KeyEvent) -> bool:
            node = focused_node()
            if node is None or not node.is_dir:
                return True
            if not is_expanded(node.path):
                intents.append(TreeIntent(INTENT_EXPAND, node.path, True))
                return True
            child = flat.first_child(node.path)
            if child is not None:
                selection.select_only(child)
            return True

        def move_left(_current: KeyEvent) -> bool:
            node = focused_node()
            if node is None:
                return True
            if node.is_dir and is_expanded(node.path):
                intents.append(TreeIntent(INTENT_COLLAPSE, node.path, True))
                return True
            parent = node.path.parent
            if not parent.is_root and parent in flat:
                selection.select_only(parent)
            return True

        def activate(_current: KeyEvent) -> bool:
            node = focused_node()
            if node is None:
                return True
            if node.is_dir:
                kind = INTENT_COLLAPSE if is_expanded(node.path) else INTENT_EXPAND
                intents.append(TreeIntent(kind, node.path, True))
            else:
                intents.append(TreeIntent(INTENT_OPEN, node.path, False))
            return True

        def toggle_focus(_current: KeyEvent) -> bool:
            selection.toggle_focus()
            return True

        def select_all(_current: KeyEvent) -> bool:
            selection.select_all(flat)
            return True

        def clear(_current: KeyEvent) -> bool:
            selection.clear()
            return True

        def request_on_focus(kind: str) -> bool:
            node = focused_node()
            if node is not None:
                intents.append(TreeIntent(kind, node.path, node.is_dir))
            return True

        def request_create(kind: str) -> bool:
            node = focused_node()
            if node is None:
                directory = ROOT
            elif node.is_dir:
                directory = node.path
            else:
                directory = node.path.parent
            intents.append(TreeIntent(kind, directory, True))
            return True

        registry = KeyComboRegistry().register_bindings(
            KeyComboBinding(_with_modifiers("UP", "CTRL", "SHIFT", "CTRL_SHIFT"), move_up),
            KeyComboBinding(_with_modifiers("DOWN", "CTRL", "SHIFT", "CTRL_SHIFT"), move_down),
            KeyComboBinding(("RIGHT",), move_right),
            KeyComboBinding(("LEFT",), move_left),
            KeyComboBinding(("ENTER",), activate),
            KeyComboBinding(("SPACE",), toggle_focus),
            KeyComboBinding(("CTRL_A",), select_all),
            KeyComboBinding(("ESC",), clear),
            KeyComboBinding(
                _with_modifiers("DELETE", "SHIFT") + _with_modifiers("BACKSPACE", "SHIFT"),
                lambda _current: request_on_focus(INTENT_DELETE),
            ),
            KeyComboBinding(("F2",), lambda _current: request_on_focus(INTENT_RENAME)),
            KeyComboBinding(("CTRL_N",), lambda _current: request_create(INTENT_CREATE_FILE)),
            KeyComboBinding(("CTRL_SHIFT_N",), lambda _current: request_create(INTENT_CREATE_FOLDER)),
        )

        handled = registry.dispatch(event)
        if handled is None:
            return KeyOutcome(False)
        logger.debug("key %s -> %d intent(s)", event.token(), len(intents))
        return KeyOutcome(bool(handled), tuple(intents))


__all__ = [
    "INTENT_COLLAPSE",
    "INTENT_CREATE_FILE",
    "INTENT_CREATE_FOLDER",
    "INTENT_DELETE",
    "INTENT_EXPAND",
    "INTENT_OPEN",
    "INTENT_RENAME",
    "KeyOutcome",
    "KeyboardNavigator",
    "MUTATION_INTENTS",
    "TreeIntent",
]
