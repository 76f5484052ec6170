"""Runtime orchestration: listing fetchers, persisted preferences, and the tree session."""

from __future__ import annotations

from .fetch import FetchResult, FolderFetchScheduler, InlineFetcher
from .session import TreeSession

__all__ = [
    "FetchResult",
    "FolderFetchScheduler",
    "InlineFetcher",
    "TreeSession",
]
