"""In-memory directory backend for tests, demos, and offline hosts."""

from __future__ import annotations

import itertools
import threading
from collections.abc import Mapping
from dataclasses import replace

from ..errors import BackendError, BackendIOError, Conflict, NotFound
from ..paths import ROOT, TreePath, as_tree_path
from ..tree_model.types import Entry
from .protocol import ENTRY_KINDS, KIND_DIR

TreeLayout = Mapping[str, "TreeLayout | int | str | bytes"]


class MemoryBackend:
    """Directory tree held in dictionaries, preserving insertion order.

    ``tree`` is a nested mapping: mappings are directories, ints are file
    sizes, and ``str``/``bytes`` values are file contents (size = length).
    ``fail(op, path, exc)`` arms a one-shot failure for the next matching call.
    """

    def __init__(self, tree: TreeLayout | None = None) -> None:
        self._lock = threading.Lock()
        self._clock = itertools.count(1)
        self._children: dict[TreePath, list[str]] = {ROOT: []}
        self._entries: dict[TreePath, Entry] = {}
        self._failures: dict[tuple[str, TreePath], BackendError] = {}
        self.calls: list[tuple[str, tuple[TreePath, ...]]] = []
        if tree:
            self._load(ROOT, tree)

    def _load(self, directory: TreePath, layout: TreeLayout) -> None:
        for name, value in layout.items():
            path = directory.join(name)
            if isinstance(value, Mapping):
                self._add(path, Entry(name, True, 0, float(next(self._clock))))
                self._load(path, value)
            else:
                size = value if isinstance(value, int) else len(value)
                self._add(path, Entry(name, False, size, float(next(self._clock))))

    def _add(self, path: TreePath, entry: Entry) -> None:
        self._children[path.parent].append(entry.name)
        self._entries[path] = entry
        if entry.is_dir:
            self._children.setdefault(path, [])

    def _exists(self, path: TreePath) -> bool:
        return path.is_root or path in self._entries

    def _subtree(self, path: TreePath) -> list[TreePath]:
        """``path`` followed by every path below it, parents first."""
        out = [path]
        idx = 0
        while idx < len(out):
            current = out[idx]
            out.extend(current.join(name) for name in self._children.get(current, ()))
            idx += 1
        return out

    def _detach(self, path: TreePath) -> list[tuple[TreePath, Entry]]:
        doomed = self._subtree(path)
        removed = [(item, self._entries[item]) for item in doomed]
        self._children[path.parent].remove(path.base_name)
        for item in doomed:
            self._entries.pop(item, None)
            self._children.pop(item, None)
        return removed

    def _ensure_directory(self, path: TreePath) -> None:
        if path.is_root or path in self._children:
            return
        if path in self._entries:
            raise BackendIOError(f"not a directory: {path}", path=path)
        self._ensure_directory(path.parent)
        self._add(path, Entry(path.base_name, True, 0, float(next(self._clock))))

    def _attach(self, removed: list[tuple[TreePath, Entry]], source: TreePath, destination: TreePath) -> None:
        for old_path, entry in removed:
            new_path = old_path.rebase(source, destination)
            self._add(new_path, replace(entry, name=new_path.base_name))

    def _check(self, op: str, *paths: TreePath) -> None:
        self.calls.append((op, paths))
        for path in paths:
            failure = self._failures.pop((op, path), None)
            if failure is not None:
                raise failure

    def fail(self, op: str, path: TreePath | str, exc: BackendError) -> None:
        with self._lock:
            self._failures[(op, as_tree_path(path))] = exc

    def exists(self, path: TreePath | str) -> bool:
        with self._lock:
            return self._exists(as_tree_path(path))

    def list_directory(self, path: TreePath) -> tuple[Entry, ...]:
        path = as_tree_path(path)
        with self._lock:
            self._check("list_directory", path)
            if path not in self._children:
                if path in self._entries:
                    raise BackendIOError(f"not a directory: {path}", path=path)
                raise NotFound(f"no such directory: {path}", path=path)
            return tuple(self._entries[path.join(name)] for name in self._children[path])

    def create_entry(self, path: TreePath, kind: str) -> None:
        path = as_tree_path(path)
        if kind not in ENTRY_KINDS or path.is_root:
            raise BackendIOError(f"cannot create {kind!r} at {path}", path=path)
        with self._lock:
            self._check("create_entry", path)
            if self._exists(path):
                raise Conflict(f"already exists: {path}", path=path)
            self._ensure_directory(path.parent)
            self._add(path, Entry(path.base_name, kind == KIND_DIR, 0, float(next(self._clock))))

    def rename_entry(self, source: TreePath, destination: TreePath) -> None:
        source = as_tree_path(source)
        destination = as_tree_path(destination)
        with self._lock:
            self._check("rename_entry", source, destination)
            if source.is_root or source not in self._entries:
                raise NotFound(f"no such entry: {source}", path=source)
            if self._exists(destination):
                raise Conflict(f"already exists: {destination}", path=destination)
            if destination.is_descendant_of(source):
                raise BackendIOError(f"cannot move {source} below itself", path=destination)
            self._ensure_directory(destination.parent)
            self._attach(self._detach(source), source, destination)

    def move_entry(self, source: TreePath, target_dir: TreePath) -> None:
        source = as_tree_path(source)
        target_dir = as_tree_path(target_dir)
        with self._lock:
            self._check("move_entry", source, target_dir)
            if source.is_root or source not in self._entries:
                raise NotFound(f"no such entry: {source}", path=source)
            if target_dir not in self._children:
                raise NotFound(f"target directory not found: {target_dir}", path=target_dir)
            destination = target_dir.join(source.base_name)
            if self._exists(destination):
                raise Conflict(f"already exists: {destination}", path=destination)
            if destination.is_descendant_of(source):
                raise BackendIOError(f"cannot move {source} below itself", path=destination)
            self._attach(self._detach(source), source, destination)

    def duplicate_entry(self, source: TreePath, destination: TreePath) -> None:
        source = as_tree_path(source)
        destination = as_tree_path(destination)
        with self._lock:
            self._check("duplicate_entry", source, destination)
            if source.is_root or source not in self._entries:
                raise NotFound(f"no such entry: {source}", path=source)
            if self._exists(destination):
                raise Conflict(f"already exists: {destination}", path=destination)
            if destination.is_descendant_of(source):
                raise BackendIOError(f"cannot copy {source} into itself", path=destination)
            self._ensure_directory(destination.parent)
            copies = [(item, self._entries[item]) for item in self._subtree(source)]
            stamp = float(next(self._clock))
            self._attach([(item, replace(entry, mod_time=stamp)) for item, entry in copies], source, destination)

    def delete_entry(self, path: TreePath, recursive: bool) -> None:
        path = as_tree_path(path)
        with self._lock:
            self._check("delete_entry", path)
            if path.is_root or path not in self._entries:
                raise NotFound(f"no such entry: {path}", path=path)
            if self._children.get(path) and not recursive:
                raise BackendIOError(f"directory not empty: {path}", path=path)
            self._detach(path)


__all__ = ["MemoryBackend"]
