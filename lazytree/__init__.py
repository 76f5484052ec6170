"""Public package surface for lazytree.

Re-exports the session and the pure tree-model helpers most hosts need.
Exports ``main`` for programmatic CLI invocation.
"""

from __future__ import annotations

from .paths import ROOT, TreePath
from .runtime.session import TreeSession
from .selection import SelectionEngine, SelectionState
from .tree_model import (
    Entry,
    FolderContentCache,
    TreeNode,
    ViewOptions,
    apply_view_transforms,
    build_tree,
    flatten_tree,
    is_valid_drop,
)


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "ROOT",
    "TreePath",
    "Entry",
    "TreeNode",
    "FolderContentCache",
    "ViewOptions",
    "build_tree",
    "apply_view_transforms",
    "flatten_tree",
    "is_valid_drop",
    "SelectionEngine",
    "SelectionState",
    "TreeSession",
    "main",
]
