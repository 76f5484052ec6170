"""Sidebar orchestration for one project tree.

``TreeSession`` is the single mutator of the listing cache, the expanded set,
and the selection. Every change goes through one of its methods, which
updates state, triggers fetches for missing listings, and then calls
``rebuild`` to derive the displayed forest and prune stale selection.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import replace

from ..backend.protocol import KIND_DIR, KIND_FILE, DirectoryBackend
from ..errors import InvalidDrop, InvalidPath
from ..input.keys import KeyEvent
from ..input.navigator import (
    INTENT_COLLAPSE,
    INTENT_EXPAND,
    INTENT_OPEN,
    KeyboardNavigator,
    KeyOutcome,
    TreeIntent,
)
from ..paths import ROOT, SEPARATOR, TreePath, as_tree_path
from ..selection import CLICK_OPEN, CLICK_TOGGLE_EXPAND, SelectionEngine
from ..tree_model.build import build_tree
from ..tree_model.cache import FolderContentCache
from ..tree_model.dnd import drop_destination, is_valid_drop
from ..tree_model.navigation import FlatTree, count_nodes
from ..tree_model.transforms import ViewOptions, apply_view_transforms, highlighted_paths
from ..tree_model.types import Forest
from . import config
from .fetch import Fetcher, FetchResult, InlineFetcher

logger = logging.getLogger(__name__)

SessionObserver = Callable[["TreeSession"], None]
IntentObserver = Callable[[TreeIntent], None]


def _validate_name(name: str) -> str:
    stripped = name.strip()
    if not stripped or stripped in {".", ".."} or SEPARATOR in stripped:
        raise InvalidPath(f"invalid entry name: {name!r}")
    return stripped


def _within(path: TreePath, ancestor: TreePath) -> bool:
    return path == ancestor or path.is_descendant_of(ancestor)


class TreeSession:
    """Lazy directory tree for one project, driven by host events.

    ``fetcher`` defaults to ``InlineFetcher`` (listings run synchronously);
    pass a ``FolderFetchScheduler`` and call ``poll`` from the host loop for
    background listing.
    """

    def __init__(
        self,
        backend: DirectoryBackend,
        *,
        project_id: str = "default",
        options: ViewOptions | None = None,
        fetcher: Fetcher | None = None,
        persist: bool = False,
        on_open: Callable[[TreePath], None] | None = None,
    ) -> None:
        self.backend = backend
        self.project_id = project_id
        self.persist = persist
        self.on_open = on_open
        if options is None:
            options = config.load_view_options() if persist else ViewOptions()
        self.options = options
        self.cache = FolderContentCache()
        self.expanded: set[TreePath] = set()
        self.selection = SelectionEngine()
        self.navigator = KeyboardNavigator(self.selection)
        self.current_file: TreePath | None = None
        self.raw_forest: Forest = ()
        self.forest: Forest = ()
        self.flat = FlatTree(())
        self._fetcher = fetcher if fetcher is not None else InlineFetcher(backend.list_directory)
        self._epoch = 0
        self._pending: dict[TreePath, int] = {}
        self._errors: dict[TreePath, Exception] = {}
        self._refreshing: set[TreePath] = set()
        self._observers: list[SessionObserver] = []
        self._intent_observers: list[IntentObserver] = []

    # Lifecycle

    @property
    def epoch(self) -> int:
        return self._epoch

    def start(self) -> None:
        """Fetch the root plus any remembered expanded folders, then rebuild."""
        if self.persist:
            self.expanded = config.load_expanded_folders(self.project_id)
        self.request_fetch(ROOT)
        for path in sorted(self.expanded):
            if path not in self.cache:
                self.request_fetch(path)
        self.rebuild()

    def switch_project(self, project_id: str, backend: DirectoryBackend | None = None) -> None:
        """Discard all per-project state and start over on another project.

        Listings still in flight for the old project are ignored when they land.
        """
        logger.info("switching project %r -> %r", self.project_id, project_id)
        self._epoch += 1
        self.project_id = project_id
        if backend is not None:
            self.backend = backend
            self._fetcher.rebind(backend.list_directory)
        self.cache.clear()
        self.expanded = set()
        self.selection.clear()
        self.current_file = None
        self._pending.clear()
        self._errors.clear()
        self._refreshing.clear()
        self.options = replace(self.options, search_query="")
        self.start()

    def close(self) -> None:
        self._fetcher.shutdown()

    # Observers

    def subscribe(self, callback: SessionObserver) -> Callable[[], None]:
        """Call ``callback(session)`` after every rebuild; returns an unsubscribe function."""
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def subscribe_intents(self, callback: IntentObserver) -> Callable[[], None]:
        """Receive delete/rename/create requests emitted by key presses."""
        self._intent_observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._intent_observers:
                self._intent_observers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._observers):
            callback(self)

    # Fetching

    def is_pending(self, path: TreePath | str) -> bool:
        return as_tree_path(path) in self._pending

    def has_pending(self) -> bool:
        return bool(self._pending)

    def fetch_error(self, path: TreePath | str) -> Exception | None:
        """Last listing failure for ``path``; cleared by the next successful fetch."""
        return self._errors.get(as_tree_path(path))

    def request_fetch(self, path: TreePath | str, *, force: bool = False) -> bool:
        """Ask the fetcher for ``path`` unless it is cached or already in flight.

        ``force`` refetches even when a slot exists or a listing is pending.
        Returns whether a listing was scheduled.
        """
        target = as_tree_path(path)
        if not force and (target in self._pending or target in self.cache):
            return False
        self._pending[target] = self._pending.get(target, 0) + 1
        self._errors.pop(target, None)
        self._fetcher.schedule(target, self._epoch)
        self._apply_ready_results()
        return True

    def _apply_fetch_result(self, result: FetchResult) -> bool:
        if result.epoch != self._epoch:
            logger.warning("discarding listing for %r from stale epoch %d", result.path.value, result.epoch)
            return False
        remaining = self._pending.get(result.path, 0) - 1
        if remaining > 0:
            self._pending[result.path] = remaining
        else:
            self._pending.pop(result.path, None)
            self._refreshing.discard(result.path)
        if result.ok:
            self.cache.set(result.path, result.entries or ())
            self._errors.pop(result.path, None)
        else:
            self.cache.invalidate(result.path)
            self._errors[result.path] = result.error
        return True

    def _apply_ready_results(self) -> bool:
        changed = False
        for result in self._fetcher.drain_results():
            changed = self._apply_fetch_result(result) or changed
        return changed

    def poll(self) -> bool:
        """Apply completed listings; rebuilds and returns ``True`` when any landed."""
        changed = self._apply_ready_results()
        if changed:
            self.rebuild()
        return changed

    def wait_until_idle(self, timeout: float = 5.0) -> bool:
        """Block until no listing is pending or ``timeout`` elapses."""
        deadline = time.monotonic() + timeout
        waiter = getattr(self._fetcher, "wait_for_result", None)
        while self._pending:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                break
            if waiter is None:
                self._apply_ready_results()
                time.sleep(min(0.01, remaining))
                continue
            result = waiter(remaining)
            if result is not None:
                self._apply_fetch_result(result)
        self._apply_ready_results()
        self.rebuild()
        return not self._pending

    # Tree derivation

    def rebuild(self) -> None:
        """Derive the displayed forest from cache and expansion, then prune selection."""
        self.raw_forest = build_tree(ROOT, 0, self.cache, self.expanded)
        self.forest = apply_view_transforms(self.raw_forest, self.options)
        self.flat = FlatTree(self.forest)
        # Listings being refetched after a mutation may still show the old layout.
        if not self._refreshing:
            self.selection.prune(self.flat.path_set())
        self._notify()

    @property
    def flat_paths(self) -> list[TreePath]:
        return list(self.flat.paths)

    @property
    def search_result_count(self) -> int:
        return count_nodes(self.forest)

    @property
    def highlighted_paths(self) -> set[TreePath]:
        return highlighted_paths(self.forest, self.options.search_query)

    @property
    def is_searching(self) -> bool:
        return bool(self.options.search_query.strip())

    def selected_paths(self) -> list[TreePath]:
        return self.selection.ordered_selection(self.flat)

    # Expansion

    def _persist_expanded(self) -> None:
        if self.persist:
            config.save_expanded_folders(self.project_id, self.expanded)

    def is_expanded(self, path: TreePath | str) -> bool:
        return as_tree_path(path) in self.expanded

    def expand(self, path: TreePath | str) -> bool:
        """Expand a directory and fetch its listing when it is not cached."""
        target = as_tree_path(path)
        if target.is_root:
            return False
        node = self.flat.node(target)
        if node is not None and not node.is_dir:
            return False
        self.expanded.add(target)
        if target not in self.cache:
            self.request_fetch(target)
        self._persist_expanded()
        self.rebuild()
        return True

    def expand_paths(self, paths: Iterable[TreePath | str]) -> None:
        """Expand several directories with a single rebuild."""
        for path in paths:
            target = as_tree_path(path)
            node = self.flat.node(target)
            if target.is_root or (node is not None and not node.is_dir):
                continue
            self.expanded.add(target)
            if target not in self.cache:
                self.request_fetch(target)
        self._persist_expanded()
        self.rebuild()

    def collapse(self, path: TreePath | str) -> bool:
        target = as_tree_path(path)
        if target not in self.expanded:
            return False
        self.expanded.discard(target)
        self._persist_expanded()
        self.rebuild()
        return True

    def toggle_expanded(self, path: TreePath | str) -> bool:
        """Toggle expansion; returns the new expanded state."""
        target = as_tree_path(path)
        if target in self.expanded:
            self.collapse(target)
            return False
        return self.expand(target)

    # View options

    def _set_options(self, options: ViewOptions, *, persist: bool = True) -> None:
        self.options = options
        if persist and self.persist:
            config.save_view_options(options)
        self.rebuild()

    def set_search_query(self, query: str) -> None:
        if query:
            logger.debug("search query updated: %r", query)
        self._set_options(replace(self.options, search_query=query), persist=False)

    def clear_search(self) -> None:
        self.set_search_query("")

    def set_type_filter(self, type_filter: str) -> None:
        self._set_options(replace(self.options, type_filter=type_filter))

    def set_hide_hidden(self, hide_hidden: bool) -> None:
        self._set_options(replace(self.options, hide_hidden=bool(hide_hidden)))

    def toggle_hide_hidden(self) -> None:
        self.set_hide_hidden(not self.options.hide_hidden)

    def set_sort(self, sort_by: str | None = None, sort_order: str | None = None) -> None:
        self._set_options(
            replace(
                self.options,
                sort_by=self.options.sort_by if sort_by is None else sort_by,
                sort_order=self.options.sort_order if sort_order is None else sort_order,
            )
        )

    def toggle_sort_order(self) -> None:
        self.set_sort(sort_order="desc" if self.options.sort_order == "asc" else "asc")

    # Pointer and keyboard

    def open_file(self, path: TreePath | str) -> None:
        target = as_tree_path(path)
        self.current_file = target
        if self.on_open is not None:
            self.on_open(target)

    def click(self, path: TreePath | str, *, ctrl: bool = False, shift: bool = False) -> str | None:
        """Apply a click on a displayed row; returns the follow-up action taken."""
        target = as_tree_path(path)
        action = self.selection.click(target, self.flat, ctrl=ctrl, shift=shift)
        if action == CLICK_TOGGLE_EXPAND:
            self.toggle_expanded(target)
        elif action == CLICK_OPEN:
            self.open_file(target)
        self._notify()
        return action

    def handle_key(self, key: KeyEvent | str) -> KeyOutcome:
        """Route one key through the navigator and carry out tree intents."""
        outcome = self.navigator.handle_key(key, self.flat, self.expanded)
        for intent in outcome.intents:
            if intent.kind == INTENT_EXPAND:
                self.expand(intent.path)
            elif intent.kind == INTENT_COLLAPSE:
                self.collapse(intent.path)
            elif intent.kind == INTENT_OPEN:
                self.open_file(intent.path)
            else:
                for callback in list(self._intent_observers):
                    callback(intent)
        if outcome.handled:
            self._notify()
        return outcome

    # Mutations

    def _refresh_directories(self, directories: Iterable[TreePath]) -> None:
        """Refetch listings touched by a mutation.

        Visible directories keep their old listing until the new one lands, and
        selection pruning waits for them; hidden ones are simply invalidated.
        """
        for directory in dict.fromkeys(directories):
            if directory.is_root or directory in self.expanded:
                self._refreshing.add(directory)
                self.request_fetch(directory, force=True)
            else:
                self.cache.invalidate(directory)
        # Newly expanded parents may have no listing yet.
        for path in sorted(self.expanded):
            if path not in self.cache:
                self.request_fetch(path)
        self.rebuild()

    def _relocate(self, old: TreePath, new: TreePath) -> None:
        """Re-key expansion, selection, and the open file after a rename or move."""

        def moved(path: TreePath | None) -> TreePath | None:
            if path is None or not _within(path, old):
                return path
            return path.rebase(old, new)

        self.expanded = {moved(path) for path in self.expanded}
        self.cache.rekey_subtree(old, new)
        state = self.selection.state
        state.selected = {moved(path) for path in state.selected}
        state.anchor = moved(state.anchor)
        state.focus = moved(state.focus)
        self.current_file = moved(self.current_file)
        self._persist_expanded()

    def _forget(self, path: TreePath) -> None:
        """Drop cached, expanded, selected, and open-file state at or below a deleted path."""
        self.cache.invalidate_subtree(path)
        state = self.selection.state
        state.selected = {item for item in state.selected if not _within(item, path)}
        if state.anchor is not None and _within(state.anchor, path):
            state.anchor = None
        if state.focus is not None and _within(state.focus, path):
            state.focus = None
        self.expanded = {item for item in self.expanded if not _within(item, path)}
        self._errors = {key: value for key, value in self._errors.items() if not _within(key, path)}
        if self.current_file is not None and _within(self.current_file, path):
            self.current_file = None
        self._persist_expanded()

    def create_entry(self, parent: TreePath | str, name: str, kind: str = KIND_FILE) -> TreePath:
        """Create a file or folder inside ``parent`` and show it."""
        directory = as_tree_path(parent)
        path = directory.join(_validate_name(name))
        self.backend.create_entry(path, kind)
        logger.info("created %s %r", kind, path.value)
        if not directory.is_root:
            self.expanded.add(directory)
            self._persist_expanded()
        self._refresh_directories([directory])
        return path

    def create_folder(self, parent: TreePath | str, name: str) -> TreePath:
        return self.create_entry(parent, name, KIND_DIR)

    def rename_entry(self, path: TreePath | str, new_name: str) -> TreePath:
        """Rename in place; returns the new path."""
        source = as_tree_path(path)
        destination = source.parent.join(_validate_name(new_name))
        if destination == source:
            return source
        self.backend.rename_entry(source, destination)
        logger.info("renamed %r -> %r", source.value, destination.value)
        self._relocate(source, destination)
        self._refresh_directories([source.parent])
        return destination

    def can_drop(self, source: TreePath | str, target_dir: TreePath | str) -> bool:
        return is_valid_drop(source, target_dir)

    def move_entry(self, source: TreePath | str, target_dir: TreePath | str | None) -> TreePath:
        """Move ``source`` into ``target_dir`` (the root when ``None``)."""
        source_path = as_tree_path(source)
        directory = as_tree_path(target_dir)
        if not is_valid_drop(source_path, directory):
            logger.warning("rejected move of %r into %r", source_path.value, directory.value)
            raise InvalidDrop(source_path, directory)
        if source_path.parent == directory:
            return source_path
        destination = drop_destination(source_path, directory)
        self.backend.move_entry(source_path, directory)
        logger.info("moved %r -> %r", source_path.value, destination.value)
        self._relocate(source_path, destination)
        self._refresh_directories([source_path.parent, directory])
        return destination

    def duplicate_entry(self, path: TreePath | str, new_name: str | None = None) -> TreePath:
        """Copy an entry next to itself, named ``"<name> copy"`` by default."""
        source = as_tree_path(path)
        name = _validate_name(new_name) if new_name is not None else f"{source.base_name} copy"
        destination = source.parent.join(name)
        self.backend.duplicate_entry(source, destination)
        logger.info("duplicated %r -> %r", source.value, destination.value)
        self._refresh_directories([source.parent])
        return destination

    def delete_entry(self, path: TreePath | str, recursive: bool | None = None) -> None:
        """Delete an entry; directories are removed recursively unless told otherwise."""
        target = as_tree_path(path)
        if recursive is None:
            node = self.flat.node(target)
            recursive = node.is_dir if node is not None else target in self.cache
        self.backend.delete_entry(target, recursive)
        logger.info("deleted %r", target.value)
        self._forget(target)
        self._refresh_directories([target.parent])

    def delete_selected(self) -> list[TreePath]:
        """Delete every selected entry whose ancestor is not also selected."""
        selected = self.selected_paths()
        roots = [
            path
            for path in selected
            if not any(path.is_descendant_of(other) for other in selected if other != path)
        ]
        for path in roots:
            self.delete_entry(path)
        return roots


__all__ = ["IntentObserver", "SessionObserver", "TreeSession"]
