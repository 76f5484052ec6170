"""Project-relative tree paths.

A ``TreePath`` is the identity of every node: a ``/``-joined string relative to
the project root, where the empty string is the root itself.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidPath

SEPARATOR = "/"


def _normalize(raw: str) -> str:
    """Collapse separators and ``.`` segments; reject ``..`` escapes."""
    parts: list[str] = []
    for segment in raw.replace("\\", SEPARATOR).split(SEPARATOR):
        if segment in {"", "."}:
            continue
        if segment == "..":
            raise InvalidPath(f"path escapes project root: {raw!r}")
        parts.append(segment)
    return SEPARATOR.join(parts)


@dataclass(frozen=True, order=True)
class TreePath:
    """Normalized project-relative path; ``TreePath("")`` is the root."""

    value: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", _normalize(str(self.value)))

    def __str__(self) -> str:
        return self.value

    @property
    def is_root(self) -> bool:
        return self.value == ""

    @property
    def base_name(self) -> str:
        """Last segment, or ``""`` for the root."""
        return self.value.rsplit(SEPARATOR, 1)[-1]

    @property
    def depth(self) -> int:
        """Number of segments; root has depth 0."""
        return 0 if self.is_root else self.value.count(SEPARATOR) + 1

    @property
    def parent(self) -> TreePath:
        """Strip the last segment. The root is its own parent."""
        if SEPARATOR not in self.value:
            return ROOT
        return TreePath(self.value.rsplit(SEPARATOR, 1)[0])

    def join(self, name: str) -> TreePath:
        if self.is_root:
            return TreePath(name)
        return TreePath(f"{self.value}{SEPARATOR}{name}")

    def is_descendant_of(self, ancestor: TreePath | str) -> bool:
        """Strict prefix containment on segment boundaries.

        Every non-root path descends from the root; nothing descends from itself.
        """
        ancestor_path = as_tree_path(ancestor)
        if ancestor_path.is_root:
            return not self.is_root
        return self.value.startswith(ancestor_path.value + SEPARATOR)

    def relative_to(self, ancestor: TreePath | str) -> str:
        """Return the suffix of ``self`` below ``ancestor``."""
        ancestor_path = as_tree_path(ancestor)
        if ancestor_path == self:
            return ""
        if not self.is_descendant_of(ancestor_path):
            raise InvalidPath(f"{self.value!r} is not below {ancestor_path.value!r}")
        if ancestor_path.is_root:
            return self.value
        return self.value[len(ancestor_path.value) + 1 :]

    def rebase(self, old_prefix: TreePath | str, new_prefix: TreePath | str) -> TreePath:
        """Move ``self`` from below ``old_prefix`` to below ``new_prefix``."""
        suffix = self.relative_to(old_prefix)
        new_base = as_tree_path(new_prefix)
        return new_base.join(suffix) if suffix else new_base


ROOT = TreePath("")


def as_tree_path(value: TreePath | str | None) -> TreePath:
    """Coerce user-facing path arguments; ``None`` means the root."""
    if isinstance(value, TreePath):
        return value
    if value is None:
        return ROOT
    return TreePath(value)


__all__ = ["ROOT", "SEPARATOR", "TreePath", "as_tree_path"]
