"""Text formatting for displayed forests (CLI output and debugging)."""

from __future__ import annotations

from collections.abc import Collection, Sequence

from pygments.console import ansiformat, colorize

from .paths import TreePath
from .tree_model.navigation import iter_nodes
from .tree_model.transforms import TYPE_EXTENSIONS, normalize_query
from .tree_model.types import TreeNode

TREE_SIZE_LABEL_MIN_BYTES = 10 * 1024

_TYPE_COLORS = {
    "latex": "green",
    "image": "magenta",
    "code": "cyan",
}


def file_color_for(name: str) -> str:
    """Return the pygments console color used for a file name."""
    _stem, dot, suffix = name.rpartition(".")
    if dot:
        folded = suffix.casefold()
        for type_name, extensions in TYPE_EXTENSIONS.items():
            if folded in extensions:
                return _TYPE_COLORS[type_name]
    return ""


def highlight_substring(text: str, query: str, color: bool = True) -> str:
    """Emphasize the first case-insensitive occurrence of ``query`` in ``text``."""
    folded_query = normalize_query(query)
    if not folded_query or not color:
        return text
    idx = text.casefold().find(folded_query)
    if idx < 0:
        return text
    end = idx + len(folded_query)
    return text[:idx] + ansiformat("*yellow*", text[idx:end]) + text[end:]


def format_tree_node(
    node: TreeNode,
    expanded: Collection[TreePath],
    *,
    selected: Collection[TreePath] = (),
    focus: TreePath | None = None,
    search_query: str = "",
    pending: Collection[TreePath] = (),
    failed: Collection[TreePath] = (),
    show_size_labels: bool = True,
    color: bool = True,
) -> str:
    """Render one row: indent, expand marker, name, and status suffixes."""
    cursor = ">" if node.path == focus else " "
    mark = "*" if node.path in selected else " "
    indent = "  " * node.depth
    name = highlight_substring(node.name, search_query, color)

    if node.is_dir:
        is_open = node.path in expanded
        marker = "▾ " if is_open else "▸ "
        label = f"{name}/"
        if color:
            label = colorize("brightblue", label)
        suffix = ""
        if node.path in failed:
            suffix = " [error]"
        elif is_open and node.children is None and node.path in pending:
            suffix = " [loading]"
        return f"{cursor}{mark}{indent}{marker}{label}{suffix}"

    file_color = file_color_for(node.name) if color else ""
    label = colorize(file_color, name) if file_color else name
    size_label = ""
    if show_size_labels and node.size >= TREE_SIZE_LABEL_MIN_BYTES:
        size_label = f" [{node.size // 1024} KB]"
        if color:
            size_label = colorize("gray", size_label)
    return f"{cursor}{mark}{indent}  {label}{size_label}"


def render_forest(
    forest: Sequence[TreeNode],
    expanded: Collection[TreePath],
    **row_options: object,
) -> list[str]:
    """Render every displayed node in document order."""
    return [format_tree_node(node, expanded, **row_options) for node in iter_nodes(forest)]


__all__ = [
    "TREE_SIZE_LABEL_MIN_BYTES",
    "file_color_for",
    "format_tree_node",
    "highlight_substring",
    "render_forest",
]
