"""Pure forest transforms applied between building and display.

Pipeline order is fixed: hidden-file filter, type filter, search filter,
sort. Every transform returns a new forest and leaves its input untouched.
"""

from __future__ import annotations

import locale
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace

from ..paths import TreePath
from .navigation import iter_nodes
from .types import Forest, TreeNode

TYPE_FILTERS = ("all", "latex", "code", "image")
SORT_KEYS = ("name", "size", "date")
SORT_ORDERS = ("asc", "desc")

TYPE_EXTENSIONS: dict[str, frozenset[str]] = {
    "latex": frozenset({"tex", "sty", "cls", "bib"}),
    "image": frozenset({"jpg", "jpeg", "png", "gif", "svg", "webp", "bmp"}),
    "code": frozenset({"js", "ts", "jsx", "tsx", "py", "go", "rs", "cpp", "c", "h", "java"}),
}


@dataclass(frozen=True)
class ViewOptions:
    """Display settings that drive the transform pipeline."""

    hide_hidden: bool = False
    type_filter: str = "all"
    search_query: str = ""
    sort_by: str = "name"
    sort_order: str = "asc"

    def __post_init__(self) -> None:
        if self.type_filter not in TYPE_FILTERS:
            raise ValueError(f"unknown type filter: {self.type_filter!r}")
        if self.sort_by not in SORT_KEYS:
            raise ValueError(f"unknown sort key: {self.sort_by!r}")
        if self.sort_order not in SORT_ORDERS:
            raise ValueError(f"unknown sort order: {self.sort_order!r}")


@dataclass
class _RewriteFrame:
    nodes: Sequence[TreeNode]
    owner: TreeNode | None
    index: int = 0
    out: list[TreeNode] = field(default_factory=list)


def _rewrite(
    forest: Sequence[TreeNode],
    rebuild: Callable[[TreeNode, tuple[TreeNode, ...] | None], TreeNode | None],
    skip: Callable[[TreeNode], bool] | None = None,
) -> Forest:
    """Bottom-up forest rewrite driven by an explicit stack.

    ``skip`` drops a node before its subtree is visited. ``rebuild`` receives
    each surviving node with its already rewritten children (``None`` when the
    node had none) and returns the replacement node or ``None`` to drop it.
    """
    frames = [_RewriteFrame(forest, None)]
    while True:
        frame = frames[-1]
        if frame.index >= len(frame.nodes):
            frames.pop()
            rewritten = tuple(frame.out)
            if frame.owner is None:
                return rewritten
            parent = frames[-1]
            result = rebuild(frame.owner, rewritten)
            if result is not None:
                parent.out.append(result)
            parent.index += 1
            continue

        node = frame.nodes[frame.index]
        if skip is not None and skip(node):
            frame.index += 1
            continue
        if node.children is not None:
            frames.append(_RewriteFrame(node.children, node))
            continue
        result = rebuild(node, None)
        if result is not None:
            frame.out.append(result)
        frame.index += 1


def _with_children(node: TreeNode, children: tuple[TreeNode, ...] | None) -> TreeNode:
    if children is None:
        return node
    current = node.children
    if current is not None and len(current) == len(children) and all(a is b for a, b in zip(current, children)):
        return node
    return replace(node, children=children)


def is_hidden_name(name: str) -> bool:
    return name.startswith(".")


def filter_hidden_nodes(forest: Sequence[TreeNode]) -> Forest:
    """Drop dot-named nodes at every depth without visiting their subtrees.

    Directories left empty by the filter stay visible.
    """
    return _rewrite(forest, _with_children, skip=lambda node: is_hidden_name(node.name))


def _extension(name: str) -> str:
    _stem, dot, suffix = name.rpartition(".")
    return suffix.casefold() if dot else ""


def matches_type(name: str, type_filter: str) -> bool:
    """Return whether a file name belongs to ``type_filter``'s extension set."""
    if type_filter == "all":
        return True
    extensions = TYPE_EXTENSIONS.get(type_filter)
    if extensions is None:
        return True
    return _extension(name) in extensions


def filter_by_type(forest: Sequence[TreeNode], type_filter: str) -> Forest:
    """Keep files whose extension matches; directories are always kept."""
    if type_filter == "all" or type_filter not in TYPE_EXTENSIONS:
        return tuple(forest)

    def rebuild(node: TreeNode, children: tuple[TreeNode, ...] | None) -> TreeNode | None:
        if node.is_dir:
            return _with_children(node, children)
        return node if matches_type(node.name, type_filter) else None

    return _rewrite(forest, rebuild)


def normalize_query(query: str) -> str:
    """Return the folded query, or ``""`` when it is blank."""
    stripped = query.strip()
    return stripped.casefold() if stripped else ""


def filter_tree(forest: Sequence[TreeNode], query: str) -> Forest:
    """Keep nodes whose name contains ``query`` plus all their ancestors.

    Matching is a case-insensitive substring test on the name only. A blank
    query returns the forest unchanged.
    """
    folded = normalize_query(query)
    if not folded:
        return tuple(forest)

    def rebuild(node: TreeNode, children: tuple[TreeNode, ...] | None) -> TreeNode | None:
        if children or folded in node.name.casefold():
            return _with_children(node, children)
        return None

    return _rewrite(forest, rebuild)


def _sort_key_for(sort_by: str) -> Callable[[TreeNode], object]:
    if sort_by == "size":
        return lambda node: node.size
    if sort_by == "date":
        return lambda node: node.mod_time
    # Collate with the active locale; the casefolded and raw names break ties.
    return lambda node: (locale.strxfrm(node.name.casefold()), node.name.casefold(), node.name)


def sort_nodes(nodes: Sequence[TreeNode], sort_by: str = "name", sort_order: str = "asc") -> tuple[TreeNode, ...]:
    """Sort one sibling list: directories first, then by key within each group."""
    key = _sort_key_for(sort_by)
    descending = sort_order == "desc"
    directories = sorted((node for node in nodes if node.is_dir), key=key, reverse=descending)
    files = sorted((node for node in nodes if not node.is_dir), key=key, reverse=descending)
    return tuple(directories + files)


def sort_tree(forest: Sequence[TreeNode], sort_by: str = "name", sort_order: str = "asc") -> Forest:
    """Apply ``sort_nodes`` to every sibling list in the forest."""

    def rebuild(node: TreeNode, children: tuple[TreeNode, ...] | None) -> TreeNode:
        if children is None:
            return node
        return _with_children(node, sort_nodes(children, sort_by, sort_order))

    return sort_nodes(_rewrite(forest, rebuild), sort_by, sort_order)


def apply_view_transforms(forest: Sequence[TreeNode], options: ViewOptions) -> Forest:
    """Run the full pipeline: hidden, type, search, then sort."""
    displayed: Forest = tuple(forest)
    if options.hide_hidden:
        displayed = filter_hidden_nodes(displayed)
    displayed = filter_by_type(displayed, options.type_filter)
    displayed = filter_tree(displayed, options.search_query)
    return sort_tree(displayed, options.sort_by, options.sort_order)


def highlighted_paths(forest: Sequence[TreeNode], query: str) -> set[TreePath]:
    """Paths whose own name matches ``query`` (ancestors kept only for context are excluded)."""
    folded = normalize_query(query)
    if not folded:
        return set()
    return {node.path for node in iter_nodes(forest) if folded in node.name.casefold()}


__all__ = [
    "SORT_KEYS",
    "SORT_ORDERS",
    "TYPE_EXTENSIONS",
    "TYPE_FILTERS",
    "ViewOptions",
    "apply_view_transforms",
    "filter_by_type",
    "filter_hidden_nodes",
    "filter_tree",
    "highlighted_paths",
    "is_hidden_name",
    "matches_type",
    "normalize_query",
    "sort_nodes",
    "sort_tree",
]
