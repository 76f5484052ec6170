"""Forest construction from cached listings and expansion state."""

from __future__ import annotations

from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass, field

from ..paths import SEPARATOR, TreePath, as_tree_path
from .cache import FolderContentCache
from .types import Entry, Forest, TreeNode

ListingLookup = Callable[[TreePath], object]


def _lookup_for(cache: FolderContentCache | ListingLookup) -> ListingLookup:
    getter = getattr(cache, "get", None)
    if callable(getter):
        return getter
    return cache


def _usable_name(name: object) -> bool:
    return isinstance(name, str) and name not in {"", ".", ".."} and SEPARATOR not in name


def cached_listing(cache: FolderContentCache | ListingLookup, path: TreePath) -> list[Entry] | None:
    """Return the usable entries cached for ``path``.

    Anything that is not a list/tuple counts as absent. Rows that are not
    ``Entry`` objects or carry unusable names are skipped.
    """
    try:
        value = _lookup_for(cache)(path)
    except Exception:
        return None
    if not isinstance(value, (list, tuple)):
        return None
    return [item for item in value if isinstance(item, Entry) and _usable_name(item.name)]


@dataclass
class _Frame:
    """One directory level awaiting completion on the build stack."""

    path: TreePath
    depth: int
    entries: Sequence[Entry]
    index: int = 0
    built: list[TreeNode] = field(default_factory=list)


def build_tree(
    root: TreePath | str,
    depth: int,
    cache: FolderContentCache | ListingLookup,
    expanded: Collection[TreePath | str],
) -> Forest:
    """Build the forest below ``root`` in backend listing order.

    A directory gets ``children`` only when it is expanded and its listing is
    cached; otherwise ``children`` stays ``None``. Returns an empty forest when
    the listing for ``root`` itself is absent. Uses an explicit stack so deep
    trees never hit the interpreter recursion limit.
    """
    root_path = as_tree_path(root)
    expanded_paths = {as_tree_path(path) for path in expanded}
    root_listing = cached_listing(cache, root_path)
    if root_listing is None:
        return ()

    frames = [_Frame(root_path, depth, root_listing)]
    while True:
        frame = frames[-1]
        if frame.index >= len(frame.entries):
            frames.pop()
            children = tuple(frame.built)
            if not frames:
                return children
            parent = frames[-1]
            entry = parent.entries[parent.index]
            parent.built.append(TreeNode.from_entry(entry, frame.path, parent.depth, children))
            parent.index += 1
            continue

        entry = frame.entries[frame.index]
        path = frame.path.join(entry.name)
        if entry.is_dir and path in expanded_paths:
            listing = cached_listing(cache, path)
            if listing is not None:
                frames.append(_Frame(path, frame.depth + 1, listing))
                continue
        frame.built.append(TreeNode.from_entry(entry, path, frame.depth))
        frame.index += 1


__all__ = ["build_tree", "cached_listing"]
