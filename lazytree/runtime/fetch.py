"""Directory-listing fetchers that report results back to the host thread.

Fetchers never touch session state. They push ``FetchResult`` records onto a
queue in completion order and the host drains them with ``drain_results``,
so the last listing to finish is the last one applied.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Protocol

from ..paths import TreePath
from ..tree_model.types import Entry

logger = logging.getLogger(__name__)

ListDirectory = Callable[[TreePath], Sequence[Entry]]


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one listing call, tagged with the project epoch it belongs to."""

    path: TreePath
    epoch: int
    entries: tuple[Entry, ...] | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _run_listing(list_directory: ListDirectory, path: TreePath, epoch: int) -> FetchResult:
    try:
        entries = tuple(list_directory(path))
    except Exception as exc:
        logger.warning("listing %r failed: %s", path.value, exc)
        return FetchResult(path, epoch, error=exc)
    return FetchResult(path, epoch, entries=entries)


class Fetcher(Protocol):
    """What the session needs from a listing fetcher."""

    def schedule(self, path: TreePath, epoch: int) -> None: ...

    def drain_results(self) -> list[FetchResult]: ...

    def rebind(self, list_directory: ListDirectory) -> None: ...

    def shutdown(self) -> None: ...


class InlineFetcher:
    """Runs each listing synchronously inside ``schedule``."""

    def __init__(self, list_directory: ListDirectory) -> None:
        self._list_directory = list_directory
        self._results: list[FetchResult] = []

    def rebind(self, list_directory: ListDirectory) -> None:
        """Route later listings to another backend."""
        self._list_directory = list_directory

    def schedule(self, path: TreePath, epoch: int) -> None:
        self._results.append(_run_listing(self._list_directory, path, epoch))

    def drain_results(self) -> list[FetchResult]:
        out, self._results = self._results, []
        return out

    def shutdown(self) -> None:
        self._results.clear()


class FolderFetchScheduler:
    """Runs listings on a small thread pool and queues completed results."""

    def __init__(self, list_directory: ListDirectory, max_workers: int = 4) -> None:
        self._list_directory = list_directory
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="lazytree-fetch",
        )
        self._results: Queue[FetchResult] = Queue()

    def _worker(self, list_directory: ListDirectory, path: TreePath, epoch: int) -> None:
        self._results.put(_run_listing(list_directory, path, epoch))

    def rebind(self, list_directory: ListDirectory) -> None:
        """Route listings scheduled from now on to another backend.

        Jobs already submitted keep the function they were scheduled with.
        """
        self._list_directory = list_directory

    def schedule(self, path: TreePath, epoch: int) -> None:
        logger.debug("scheduling listing for %r (epoch %d)", path.value, epoch)
        self._executor.submit(self._worker, self._list_directory, path, epoch)

    def drain_results(self) -> list[FetchResult]:
        """Return every result completed so far, oldest completion first."""
        out: list[FetchResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out

    def wait_for_result(self, timeout: float | None = None) -> FetchResult | None:
        """Block until one result completes; ``None`` on timeout."""
        try:
            return self._results.get(timeout=timeout)
        except Empty:
            return None

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)


__all__ = ["FetchResult", "Fetcher", "FolderFetchScheduler", "InlineFetcher", "ListDirectory"]
