"""Listing and tree-node datatypes shared by the tree-model modules."""

from __future__ import annotations

from dataclasses import dataclass

from ..paths import TreePath


@dataclass(frozen=True)
class Entry:
    """One directory-listing row as reported by a backend."""

    name: str
    is_dir: bool
    size: int = 0
    mod_time: float = 0.0


@dataclass(frozen=True)
class TreeNode:
    """One node of a built forest.

    ``children`` is ``None`` for files, collapsed directories, and expanded
    directories whose listing is not cached yet. An empty tuple means the
    directory is expanded, cached, and empty.
    """

    name: str
    is_dir: bool
    path: TreePath
    depth: int
    size: int = 0
    mod_time: float = 0.0
    children: tuple[TreeNode, ...] | None = None

    @classmethod
    def from_entry(
        cls,
        entry: Entry,
        path: TreePath,
        depth: int,
        children: tuple[TreeNode, ...] | None = None,
    ) -> TreeNode:
        return cls(
            name=entry.name,
            is_dir=entry.is_dir,
            path=path,
            depth=depth,
            size=entry.size,
            mod_time=entry.mod_time,
            children=children,
        )

    @property
    def is_loaded(self) -> bool:
        return self.children is not None


Forest = tuple[TreeNode, ...]


__all__ = ["Entry", "Forest", "TreeNode"]
