"""Persistent JSON config helpers.

Stores sidebar view preferences and per-project expanded folders.
Malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from ..errors import InvalidPath
from ..paths import TreePath
from ..tree_model.transforms import SORT_KEYS, SORT_ORDERS, TYPE_FILTERS, ViewOptions

APP_NAME = "lazytree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are ignored so a read-only config directory never breaks
    tree interaction.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _choice(value: object, choices: tuple[str, ...], default: str) -> str:
    return value if isinstance(value, str) and value in choices else default


def load_view_options() -> ViewOptions:
    """Load hidden/type/sort preferences; the search query is never persisted.

    Unknown values fall back to the defaults one key at a time.
    """
    config = load_config()
    hide_hidden = config.get("hide_hidden")
    return ViewOptions(
        hide_hidden=hide_hidden if isinstance(hide_hidden, bool) else False,
        type_filter=_choice(config.get("type_filter"), TYPE_FILTERS, "all"),
        sort_by=_choice(config.get("sort_by"), SORT_KEYS, "name"),
        sort_order=_choice(config.get("sort_order"), SORT_ORDERS, "asc"),
    )


def save_view_options(options: ViewOptions) -> None:
    config = load_config()
    config["hide_hidden"] = bool(options.hide_hidden)
    config["type_filter"] = options.type_filter
    config["sort_by"] = options.sort_by
    config["sort_order"] = options.sort_order
    save_config(config)


def load_expanded_folders(project_id: str) -> set[TreePath]:
    """Load expanded folders remembered for ``project_id``.

    Non-string entries, the root, and paths that fail to normalize are dropped.
    """
    value = load_config().get("expanded")
    if not isinstance(value, dict):
        return set()
    raw_paths = value.get(project_id)
    if not isinstance(raw_paths, list):
        return set()

    expanded: set[TreePath] = set()
    for raw in raw_paths:
        if not isinstance(raw, str):
            continue
        try:
            path = TreePath(raw)
        except InvalidPath:
            continue
        if not path.is_root:
            expanded.add(path)
    return expanded


def save_expanded_folders(project_id: str, expanded: set[TreePath]) -> None:
    """Persist expanded folders for ``project_id`` in sorted string form."""
    config = load_config()
    by_project = config.get("expanded")
    if not isinstance(by_project, dict):
        by_project = {}
    by_project[project_id] = sorted(path.value for path in expanded if not path.is_root)
    config["expanded"] = by_project
    save_config(config)


def forget_project(project_id: str) -> None:
    """Remove remembered expanded folders for ``project_id``."""
    config = load_config()
    by_project = config.get("expanded")
    if isinstance(by_project, dict) and project_id in by_project:
        del by_project[project_id]
        save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "forget_project",
    "load_config",
    "load_expanded_folders",
    "load_view_options",
    "save_config",
    "save_expanded_folders",
    "save_view_options",
]
