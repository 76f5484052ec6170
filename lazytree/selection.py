"""Multi-selection state with click, ctrl-click, and shift-click semantics.

The engine works against the flattened displayed forest (``FlatTree``) that the
session hands it after each rebuild. It never expands or opens anything
itself; ``click`` returns what the host should do with the clicked node.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .paths import TreePath, as_tree_path
from .tree_model.navigation import FlatTree

CLICK_OPEN = "open"
CLICK_TOGGLE_EXPAND = "toggle_expand"


@dataclass
class SelectionState:
    """Selected paths plus the range anchor and the keyboard cursor."""

    selected: set[TreePath] = field(default_factory=set)
    anchor: TreePath | None = None
    focus: TreePath | None = None


class SelectionEngine:
    """Owns one ``SelectionState`` and applies selection gestures to it."""

    def __init__(self, state: SelectionState | None = None) -> None:
        self.state = state if state is not None else SelectionState()

    @property
    def selected(self) -> set[TreePath]:
        return self.state.selected

    @property
    def anchor(self) -> TreePath | None:
        return self.state.anchor

    @property
    def focus(self) -> TreePath | None:
        return self.state.focus

    def has(self, path: TreePath | str) -> bool:
        return as_tree_path(path) in self.state.selected

    def is_empty(self) -> bool:
        return not self.state.selected

    def count(self) -> int:
        return len(self.state.selected)

    def ordered_selection(self, flat: FlatTree) -> list[TreePath]:
        """Selected paths in display order."""
        return [path for path in flat.paths if path in self.state.selected]

    def select_only(self, path: TreePath | str) -> None:
        """Replace the selection with ``path`` and move anchor and focus there."""
        target = as_tree_path(path)
        if target.is_root:
            return
        self.state.selected = {target}
        self.state.anchor = target
        self.state.focus = target

    def toggle(self, path: TreePath | str) -> None:
        """Flip membership of ``path``; anchor and focus follow it."""
        target = as_tree_path(path)
        if target.is_root:
            return
        if target in self.state.selected:
            self.state.selected.discard(target)
        else:
            self.state.selected.add(target)
        self.state.anchor = target
        self.state.focus = target

    def toggle_focus(self) -> None:
        """Flip membership of the focused path without moving anything."""
        focus = self.state.focus
        if focus is None or focus.is_root:
            return
        if focus in self.state.selected:
            self.state.selected.discard(focus)
        else:
            self.state.selected.add(focus)

    def select_range(self, path: TreePath | str, flat: FlatTree) -> bool:
        """Select exactly the displayed run between the anchor and ``path``.

        The anchor is kept; focus moves to ``path``. Returns ``False`` and
        leaves the state alone when either end is not displayed.
        """
        target = as_tree_path(path)
        anchor = self.state.anchor
        if anchor is None:
            return False
        run = flat.slice_between(anchor, target)
        if run is None:
            return False
        self.state.selected = {item for item in run if not item.is_root}
        self.state.focus = target
        return True

    def select_all(self, flat: FlatTree) -> None:
        self.state.selected = {path for path in flat.paths if not path.is_root}

    def clear(self) -> None:
        self.state.selected = set()
        self.state.anchor = None
        self.state.focus = None

    def set_focus(self, path: TreePath | str | None) -> None:
        self.state.focus = None if path is None else as_tree_path(path)

    def click(
        self,
        path: TreePath | str,
        flat: FlatTree,
        *,
        ctrl: bool = False,
        shift: bool = False,
    ) -> str | None:
        """Apply a pointer click and return the follow-up action for the host.

        Plain clicks return ``CLICK_OPEN`` for files and ``CLICK_TOGGLE_EXPAND``
        for directories; modified clicks only change the selection. Shift
        without a usable anchor behaves like a plain (or ctrl) click.
        """
        target = as_tree_path(path)
        node = flat.node(target)
        if node is None:
            return None
        if shift and self.select_range(target, flat):
            return None
        if ctrl:
            self.toggle(target)
            return None
        self.select_only(target)
        return CLICK_TOGGLE_EXPAND if node.is_dir else CLICK_OPEN

    def prune(self, valid_paths: Iterable[TreePath]) -> bool:
        """Drop selected, anchor, and focus paths missing from ``valid_paths``.

        Returns whether anything changed.
        """
        valid = valid_paths if isinstance(valid_paths, (set, frozenset)) else set(valid_paths)
        kept = {path for path in self.state.selected if path in valid and not path.is_root}
        changed = kept != self.state.selected
        self.state.selected = kept
        if self.state.anchor is not None and self.state.anchor not in valid:
            self.state.anchor = None
            changed = True
        if self.state.focus is not None and self.state.focus not in valid:
            self.state.focus = None
            changed = True
        return changed


__all__ = [
    "CLICK_OPEN",
    "CLICK_TOGGLE_EXPAND",
    "SelectionEngine",
    "SelectionState",
]
