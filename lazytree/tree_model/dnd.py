"""Move/drop validity for drag-and-drop and keyboard moves."""

from __future__ import annotations

from ..paths import TreePath, as_tree_path


def is_descendant(path: TreePath | str, ancestor: TreePath | str) -> bool:
    """Return whether ``path`` lies strictly below a non-root ``ancestor``."""
    ancestor_path = as_tree_path(ancestor)
    if ancestor_path.is_root:
        return False
    return as_tree_path(path).is_descendant_of(ancestor_path)


def is_valid_drop(source: TreePath | str, target: TreePath | str) -> bool:
    """Reject dropping a node onto itself or into its own subtree."""
    source_path = as_tree_path(source)
    target_path = as_tree_path(target)
    if source_path == target_path:
        return False
    return not is_descendant(target_path, source_path)


def drop_destination(source: TreePath | str, target_dir: TreePath | str | None) -> TreePath:
    """Path ``source`` would occupy after moving into ``target_dir`` (root when ``None``)."""
    return as_tree_path(target_dir).join(as_tree_path(source).base_name)


__all__ = ["drop_destination", "is_descendant", "is_valid_drop"]
