"""Local-filesystem directory backend rooted at one project directory."""

from __future__ import annotations

import errno
import logging
import os
import shutil
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..errors import BackendIOError, Conflict, InvalidPath, NotFound
from ..paths import TreePath, as_tree_path
from ..tree_model.types import Entry
from .protocol import ENTRY_KINDS, KIND_DIR

logger = logging.getLogger(__name__)


@contextmanager
def _translate_os_errors(path: TreePath) -> Iterator[None]:
    """Re-raise ``OSError`` as the matching ``BackendError`` subclass."""
    try:
        yield
    except FileNotFoundError as exc:
        raise NotFound(str(exc), path=path) from exc
    except FileExistsError as exc:
        raise Conflict(str(exc), path=path) from exc
    except OSError as exc:
        if exc.errno == errno.ENOTEMPTY:
            raise BackendIOError(f"directory not empty: {path}", path=path) from exc
        raise BackendIOError(str(exc), path=path) from exc


class LocalDirectoryBackend:
    """Lists and mutates entries below ``root`` on the local disk."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()

    def resolve(self, path: TreePath | str) -> Path:
        """Map a tree path to an absolute path, refusing anything outside the root."""
        tree_path = as_tree_path(path)
        absolute = self.root.joinpath(*tree_path.value.split("/")) if not tree_path.is_root else self.root
        if absolute != self.root and not absolute.is_relative_to(self.root):
            raise InvalidPath(f"path escapes project root: {tree_path.value!r}")
        return absolute

    def list_directory(self, path: TreePath) -> list[Entry]:
        """List direct children in OS order with size and modification time."""
        directory = self.resolve(path)
        entries: list[Entry] = []
        with _translate_os_errors(as_tree_path(path)):
            with os.scandir(directory) as scan:
                for child in scan:
                    try:
                        is_dir = child.is_dir(follow_symlinks=False)
                    except OSError:
                        is_dir = False
                    size = 0
                    mod_time = 0.0
                    try:
                        stat = child.stat(follow_symlinks=False)
                        mod_time = float(stat.st_mtime)
                        if not is_dir:
                            size = int(stat.st_size)
                    except OSError:
                        pass
                    entries.append(Entry(child.name, is_dir, size, mod_time))
        return entries

    def create_entry(self, path: TreePath, kind: str) -> None:
        tree_path = as_tree_path(path)
        if kind not in ENTRY_KINDS or tree_path.is_root:
            raise BackendIOError(f"cannot create {kind!r} at {tree_path}", path=tree_path)
        target = self.resolve(tree_path)
        with _translate_os_errors(tree_path):
            if target.exists():
                raise FileExistsError(errno.EEXIST, "already exists", str(target))
            if kind == KIND_DIR:
                target.mkdir(parents=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                with open(target, "x", encoding="utf-8"):
                    pass
        logger.info("created %s %s", kind, tree_path)

    def rename_entry(self, source: TreePath, destination: TreePath) -> None:
        source_path = self.resolve(source)
        destination_path = self.resolve(destination)
        with _translate_os_errors(as_tree_path(source)):
            if not source_path.exists():
                raise FileNotFoundError(errno.ENOENT, "no such entry", str(source_path))
            if destination_path.exists():
                raise FileExistsError(errno.EEXIST, "already exists", str(destination_path))
            destination_path.parent.mkdir(parents=True, exist_ok=True)
            source_path.rename(destination_path)

    def move_entry(self, source: TreePath, target_dir: TreePath) -> None:
        source_path = self.resolve(source)
        directory = self.resolve(target_dir)
        with _translate_os_errors(as_tree_path(source)):
            if not directory.is_dir():
                raise FileNotFoundError(errno.ENOENT, "target directory not found", str(directory))
            destination_path = directory / source_path.name
            if destination_path.exists():
                raise FileExistsError(errno.EEXIST, "already exists", str(destination_path))
            source_path.rename(destination_path)

    def duplicate_entry(self, source: TreePath, destination: TreePath) -> None:
        source_path = self.resolve(source)
        destination_path = self.resolve(destination)
        with _translate_os_errors(as_tree_path(source)):
            if destination_path.exists():
                raise FileExistsError(errno.EEXIST, "already exists", str(destination_path))
            if source_path.is_dir():
                shutil.copytree(source_path, destination_path, symlinks=True)
            else:
                destination_path.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source_path, destination_path)

    def delete_entry(self, path: TreePath, recursive: bool) -> None:
        tree_path = as_tree_path(path)
        if tree_path.is_root:
            raise BackendIOError("refusing to delete the project root", path=tree_path)
        target = self.resolve(tree_path)
        with _translate_os_errors(tree_path):
            if target.is_dir() and not target.is_symlink():
                if recursive:
                    shutil.rmtree(target)
                else:
                    target.rmdir()
            else:
                target.unlink()
        logger.info("deleted %s", tree_path)


__all__ = ["LocalDirectoryBackend"]
