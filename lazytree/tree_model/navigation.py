"""Forest linearization and lookup helpers."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from ..paths import TreePath, as_tree_path
from .types import TreeNode


def iter_nodes(forest: Sequence[TreeNode]) -> Iterator[TreeNode]:
    """Yield nodes depth-first in document order (each parent before its children)."""
    stack: list[TreeNode] = list(reversed(forest))
    while stack:
        node = stack.pop()
        yield node
        if node.children:
            stack.extend(reversed(node.children))


def flatten_tree(forest: Sequence[TreeNode]) -> list[TreePath]:
    """Return pre-order paths for keyboard navigation and range selection."""
    return [node.path for node in iter_nodes(forest)]


def find_node_by_path(forest: Sequence[TreeNode], path: TreePath | str) -> TreeNode | None:
    target = as_tree_path(path)
    for node in iter_nodes(forest):
        if node.path == target:
            return node
    return None


def descendant_paths(node: TreeNode) -> list[TreePath]:
    """Return loaded descendant paths of ``node`` in document order, excluding itself."""
    return flatten_tree(node.children or ())


def count_nodes(forest: Sequence[TreeNode]) -> int:
    return sum(1 for _node in iter_nodes(forest))


class FlatTree:
    """Indexed pre-order view of a displayed forest.

    Built once per rebuild and shared by selection and keyboard handling so
    repeated index lookups stay O(1).
    """

    def __init__(self, forest: Sequence[TreeNode]) -> None:
        self.forest: tuple[TreeNode, ...] = tuple(forest)
        self.nodes: list[TreeNode] = list(iter_nodes(self.forest))
        self.paths: list[TreePath] = [node.path for node in self.nodes]
        self._index: dict[TreePath, int] = {path: idx for idx, path in enumerate(self.paths)}

    def __len__(self) -> int:
        return len(self.paths)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (TreePath, str)):
            return False
        return as_tree_path(path) in self._index

    def index_of(self, path: TreePath | str | None) -> int | None:
        if path is None:
            return None
        return self._index.get(as_tree_path(path))

    def node(self, path: TreePath | str | None) -> TreeNode | None:
        idx = self.index_of(path)
        return None if idx is None else self.nodes[idx]

    def path_set(self) -> set[TreePath]:
        return set(self._index)

    def slice_between(self, first: TreePath | str, second: TreePath | str) -> list[TreePath] | None:
        """Inclusive contiguous run between two paths in either order."""
        first_idx = self.index_of(first)
        second_idx = self.index_of(second)
        if first_idx is None or second_idx is None:
            return None
        low, high = sorted((first_idx, second_idx))
        return self.paths[low : high + 1]

    def step(self, path: TreePath | str | None, direction: int) -> TreePath | None:
        """Return the neighbor ``direction`` rows away, or ``None`` at the edges.

        Without a current path, moving down lands on the first row.
        """
        if not self.paths or direction == 0:
            return None
        idx = self.index_of(path)
        if idx is None:
            return self.paths[0] if direction > 0 else None
        target = idx + (1 if direction > 0 else -1)
        if 0 <= target < len(self.paths):
            return self.paths[target]
        return None

    def first_child(self, path: TreePath | str) -> TreePath | None:
        node = self.node(path)
        if node is None or not node.children:
            return None
        return node.children[0].path


__all__ = [
    "FlatTree",
    "count_nodes",
    "descendant_paths",
    "find_node_by_path",
    "flatten_tree",
    "iter_nodes",
]
