"""Directory backends: the collaborator protocol plus local and in-memory implementations."""

from __future__ import annotations

from .local import LocalDirectoryBackend
from .memory import MemoryBackend
from .protocol import ENTRY_KINDS, KIND_DIR, KIND_FILE, DirectoryBackend

__all__ = [
    "DirectoryBackend",
    "ENTRY_KINDS",
    "KIND_DIR",
    "KIND_FILE",
    "LocalDirectoryBackend",
    "MemoryBackend",
]
