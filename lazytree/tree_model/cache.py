"""Per-directory listing cache.

The cache is the single source of truth for directory contents. Slots are
written when a listing completes and removed only by explicit invalidation;
there is no expiry.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from ..paths import TreePath, as_tree_path
from .types import Entry

logger = logging.getLogger(__name__)


class FolderContentCache:
    """Mapping from directory path to its most recently stored listing."""

    def __init__(self) -> None:
        self._slots: dict[TreePath, tuple[Entry, ...]] = {}

    def get(self, path: TreePath | str) -> tuple[Entry, ...] | None:
        """Return the cached listing for ``path`` or ``None`` when absent."""
        return self._slots.get(as_tree_path(path))

    def set(self, path: TreePath | str, entries: Iterable[Entry]) -> None:
        """Store ``entries`` for ``path``, replacing any previous slot.

        Writes apply in call order, so the listing that completes last wins.
        """
        key = as_tree_path(path)
        self._slots[key] = tuple(entries)
        logger.debug("cached %d entries for %r", len(self._slots[key]), key.value)

    def invalidate(self, path: TreePath | str) -> bool:
        """Drop the slot for ``path``; return whether one existed."""
        key = as_tree_path(path)
        removed = self._slots.pop(key, None) is not None
        if removed:
            logger.debug("invalidated cache slot %r", key.value)
        return removed

    def invalidate_subtree(self, path: TreePath | str) -> int:
        """Drop the slot for ``path`` and every slot below it."""
        key = as_tree_path(path)
        doomed = [slot for slot in self._slots if slot == key or slot.is_descendant_of(key)]
        for slot in doomed:
            del self._slots[slot]
        return len(doomed)

    def rekey_subtree(self, old: TreePath | str, new: TreePath | str) -> int:
        """Move the slots at and below ``old`` to the matching paths below ``new``.

        Listings hold names relative to their directory, so the stored entries
        stay valid after a rename or move.
        """
        old_key = as_tree_path(old)
        new_key = as_tree_path(new)
        moving = [slot for slot in self._slots if slot == old_key or slot.is_descendant_of(old_key)]
        listings = {slot.rebase(old_key, new_key): self._slots.pop(slot) for slot in moving}
        self._slots.update(listings)
        return len(listings)

    def clear(self) -> None:
        self._slots.clear()

    def paths(self) -> list[TreePath]:
        return list(self._slots)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (TreePath, str)):
            return False
        return as_tree_path(path) in self._slots

    def __len__(self) -> int:
        return len(self._slots)

    def __iter__(self) -> Iterator[TreePath]:
        return iter(list(self._slots))


__all__ = ["FolderContentCache"]
