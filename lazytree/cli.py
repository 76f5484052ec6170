"""Command-line front door for lazytree.

Lists a local directory through the lazy tree engine, applying the same
hidden/type/search/sort pipeline an interactive host would, and prints the
displayed rows.
"""

from __future__ import annotations

import argparse
import locale
import logging
import sys
from pathlib import Path

from .backend.local import LocalDirectoryBackend
from .errors import InvalidPath
from .paths import TreePath
from .runtime.session import TreeSession
from .render import render_forest
from .tree_model.navigation import iter_nodes
from .tree_model.transforms import SORT_KEYS, TYPE_FILTERS, ViewOptions

logger = logging.getLogger(__name__)


def _nonnegative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _tree_path_arg(value: str) -> TreePath:
    """argparse type for project-relative directory paths."""
    try:
        return TreePath(value)
    except InvalidPath as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazytree",
        description="Print a project directory tree with search, type filter, and sorting.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Project directory. Defaults to current directory.")
    parser.add_argument("--search", default="", help="Case-insensitive name filter; keeps ancestors of matches.")
    parser.add_argument("--type", dest="type_filter", choices=TYPE_FILTERS, default="all", help="File type filter.")
    parser.add_argument("--sort", dest="sort_by", choices=SORT_KEYS, default="name", help="Sort key.")
    parser.add_argument("--desc", action="store_true", help="Sort descending (directories still come first).")
    parser.add_argument("--hide-hidden", action="store_true", help="Hide dot-files and dot-directories.")
    depth_group = parser.add_mutually_exclusive_group()
    depth_group.add_argument(
        "--depth",
        type=_nonnegative_int,
        default=0,
        help="Expand directories down to this depth (0 lists only the top level).",
    )
    depth_group.add_argument("--expand-all", action="store_true", help="Expand every directory.")
    parser.add_argument(
        "--expand",
        action="append",
        type=_tree_path_arg,
        default=[],
        metavar="REL_PATH",
        help="Expand a directory (relative to the project root). Repeatable.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--verbose", action="store_true", help="Log engine activity to stderr.")
    return parser


def _configure_logging(verbose: bool) -> None:
    if not verbose:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    package_logger = logging.getLogger("lazytree")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def _use_system_collation() -> None:
    """Sort names by the user's locale; keep the C collation if it is unavailable."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.debug("system collation unavailable: %s", exc)


def render_tree(session: TreeSession, color: bool) -> str:
    rows = render_forest(
        session.forest,
        session.expanded,
        search_query=session.options.search_query,
        failed={path for path in session.expanded if session.fetch_error(path) is not None},
        color=color,
    )
    return "".join(f"{row}\n" for row in rows)


def main(argv: list[str] | None = None, default_path: Path | None = None) -> int:
    """Parse arguments, build the tree, and print it. Returns the exit status."""
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)
    _use_system_collation()

    root = Path(args.path) if args.path else (default_path or Path.cwd())
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")

    options = ViewOptions(
        hide_hidden=args.hide_hidden,
        type_filter=args.type_filter,
        search_query=args.search,
        sort_by=args.sort_by,
        sort_order="desc" if args.desc else "asc",
    )
    session = TreeSession(LocalDirectoryBackend(root), project_id=str(root.resolve()), options=options)
    session.start()
    if session.fetch_error("") is not None:
        raise SystemExit(f"Cannot list {root}: {session.fetch_error('')}")

    level = 0
    while args.expand_all or level < args.depth:
        directories = [node.path for node in iter_nodes(session.raw_forest) if node.is_dir and node.depth == level]
        if not directories:
            break
        session.expand_paths(directories)
        level += 1
    if args.expand:
        session.expand_paths(args.expand)

    color = not args.no_color and sys.stdout.isatty()
    sys.stdout.write(render_tree(session, color))
    session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
