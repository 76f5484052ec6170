"""Exception hierarchy for lazytree.

Hierarchy::

    LazyTreeError
    ├── InvalidPath   - malformed or root-escaping path strings
    ├── InvalidDrop   - a move that would put a node inside itself
    └── BackendError  - failures reported by a directory backend
        ├── NotFound
        ├── Conflict  - destination already exists
        └── BackendIOError

Backends raise only ``BackendError`` subclasses so callers can catch one type.
"""

from __future__ import annotations


class LazyTreeError(Exception):
    """Base class for all lazytree errors."""


class InvalidPath(LazyTreeError, ValueError):
    """Raised for paths that cannot identify a node below the project root."""


class InvalidDrop(LazyTreeError):
    """Raised when a move targets the source itself or one of its descendants."""

    def __init__(self, source: object, target: object) -> None:
        super().__init__(f"cannot move {str(source)!r} into {str(target)!r}")
        self.source = source
        self.target = target


class BackendError(LazyTreeError):
    """Failure reported by a listing or mutation collaborator."""

    def __init__(self, message: str, *, path: object = None) -> None:
        super().__init__(message)
        self.path = path


class NotFound(BackendError):
    """Source path does not exist."""


class Conflict(BackendError):
    """Destination path already exists."""


class BackendIOError(BackendError):
    """Any other I/O failure, including non-empty directories on plain delete."""


__all__ = [
    "LazyTreeError",
    "InvalidPath",
    "InvalidDrop",
    "BackendError",
    "NotFound",
    "Conflict",
    "BackendIOError",
]
