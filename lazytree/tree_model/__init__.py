"""Tree-model primitives: listing cache, forest building, transforms, drops.

Everything here is synchronous and side-effect free except the cache, which is
plain owned state. Fetching and mutation live in ``lazytree.runtime``.
"""

from __future__ import annotations

from .build import build_tree, cached_listing
from .cache import FolderContentCache
from .dnd import drop_destination, is_descendant, is_valid_drop
from .navigation import (
    FlatTree,
    count_nodes,
    descendant_paths,
    find_node_by_path,
    flatten_tree,
    iter_nodes,
)
from .transforms import (
    SORT_KEYS,
    SORT_ORDERS,
    TYPE_FILTERS,
    ViewOptions,
    apply_view_transforms,
    filter_by_type,
    filter_hidden_nodes,
    filter_tree,
    highlighted_paths,
    sort_tree,
)
from .types import Entry, Forest, TreeNode

__all__ = [
    "Entry",
    "Forest",
    "TreeNode",
    "FolderContentCache",
    "build_tree",
    "cached_listing",
    "FlatTree",
    "count_nodes",
    "descendant_paths",
    "find_node_by_path",
    "flatten_tree",
    "iter_nodes",
    "SORT_KEYS",
    "SORT_ORDERS",
    "TYPE_FILTERS",
    "ViewOptions",
    "apply_view_transforms",
    "filter_by_type",
    "filter_hidden_nodes",
    "filter_tree",
    "highlighted_paths",
    "sort_tree",
    "drop_destination",
    "is_descendant",
    "is_valid_drop",
]
