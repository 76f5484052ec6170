"""Interface the engine needs from a listing/mutation collaborator."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from ..paths import TreePath
from ..tree_model.types import Entry

KIND_FILE = "file"
KIND_DIR = "dir"
ENTRY_KINDS = (KIND_FILE, KIND_DIR)


@runtime_checkable
class DirectoryBackend(Protocol):
    """Directory listing and mutation calls.

    Every method may raise ``NotFound``, ``Conflict`` or ``BackendIOError``
    from ``lazytree.errors``. Implementations may block; the session runs
    listings off the host thread.
    """

    def list_directory(self, path: TreePath) -> Sequence[Entry]: ...

    def create_entry(self, path: TreePath, kind: str) -> None: ...

    def rename_entry(self, source: TreePath, destination: TreePath) -> None: ...

    def move_entry(self, source: TreePath, target_dir: TreePath) -> None: ...

    def duplicate_entry(self, source: TreePath, destination: TreePath) -> None: ...

    def delete_entry(self, path: TreePath, recursive: bool) -> None: ...


__all__ = ["DirectoryBackend", "ENTRY_KINDS", "KIND_DIR", "KIND_FILE"]
