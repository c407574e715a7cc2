"""Command-line front door for mirrortree.

Opens a tree at ``--root`` (restoring the saved open directories for it),
runs one query or file operation, prints the result, and saves the pruned
open-directory map back to the config.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import load_dirs_on_top, load_highlight_style, load_open_dirs, load_search_context, save_open_dirs
from .errors import FileTreeError
from .file_tree_model import FileAction, FileNode, FileTree, apply_action
from .search import search_tree

logger = logging.getLogger(__name__)


def _non_negative_int(value: str) -> int:
    """argparse type for non-negative integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mirrortree",
        description="Mirror a directory tree, query it, and search file contents.",
    )
    parser.add_argument("--root", default=None, help="Tree root directory. Defaults to current directory.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    parser.add_argument(
        "--dirs-on-top",
        dest="dirs_on_top",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="List directories before files (default from config).",
    )
    parser.add_argument("--all", action="store_true", help="Open every directory before running the command.")
    parser.add_argument("--no-save", action="store_true", help="Do not persist open directories.")
    sub = parser.add_subparsers(dest="command", required=True)

    tree = sub.add_parser("tree", help="Print the tree.")
    tree.add_argument("--open", action="append", default=[], metavar="REL", help="Open directory REL first.")
    tree.add_argument("--close", action="append", default=[], metavar="REL", help="Close directory REL first.")

    find = sub.add_parser("find", help="Find the first node whose path ends with NAME.")
    find.add_argument("name")

    match = sub.add_parser("match", help="List nodes whose name contains SUBSTR.")
    match.add_argument("substr")
    match.add_argument("-i", "--ignore-case", action="store_true")

    sub.add_parser("exts", help="Count file extensions.")

    search = sub.add_parser("search", help="Search file contents for a literal PATTERN.")
    search.add_argument("pattern")
    search.add_argument("-i", "--ignore-case", action="store_true")
    search.add_argument("--context", type=_non_negative_int, default=None, help="Context bytes around each hit.")

    show = sub.add_parser("show", help="Print a file highlighted.")
    show.add_argument("path")
    show.add_argument("--style", default=None, help="Pygments style name.")

    new_file = sub.add_parser("new-file", help="Create an empty file NAME in DIR.")
    new_file.add_argument("dir")
    new_file.add_argument("name")

    new_folder = sub.add_parser("new-folder", help="Create folder NAME in DIR.")
    new_folder.add_argument("dir")
    new_folder.add_argument("name")

    rename = sub.add_parser("rename", help="Rename PATH to NEW (a name or a path).")
    rename.add_argument("path")
    rename.add_argument("new")

    delete = sub.add_parser("delete", help="Delete PATH.")
    delete.add_argument("path")
    delete.add_argument("--yes", action="store_true", help="Confirm the deletion.")

    duplicate = sub.add_parser("duplicate", help="Copy PATH to a _Copy sibling.")
    duplicate.add_argument("path")

    for name, verb in (("copy", "Copy"), ("move", "Move")):
        cmd = sub.add_parser(name, help=f"{verb} SRC into directory DEST or onto file DEST.")
        cmd.add_argument("src")
        cmd.add_argument("dest")
        cmd.add_argument("--yes", action="store_true", help="Confirm overwriting existing files.")
    return parser


def render_tree(tree: FileNode) -> str:
    """Indented listing: directories end in ``/``; unopened ones in ``/ ...``."""
    out: list[str] = []

    def visit(node: FileNode, depth: int) -> None:
        label = node.name
        if node.is_dir:
            label += "/" if node.is_open else "/ ..."
        out.append("  " * depth + label)
        if node.is_dir and node.is_open:
            for child in node.children:
                visit(child, depth + 1)

    visit(tree, 0)
    return "\n".join(out) + "\n"


def _resolve_node(tree: FileTree, raw: str) -> FileNode:
    target = Path(raw).absolute()
    node = tree.find_file(target)
    if node is None:
        raise SystemExit(f"Path not in tree: {raw}")
    return node


def _run(tree: FileTree, args: argparse.Namespace) -> None:
    out = sys.stdout
    command = args.command
    root = tree.path

    if command == "tree":
        for rel in args.open:
            node = _resolve_node(tree, str(root / rel))
            if node.is_dir:
                node.open_dir()
        for rel in args.close:
            _resolve_node(tree, str(root / rel)).close_dir()
        out.write(render_tree(tree))
    elif command == "find":
        node = tree.find_file(args.name)
        if node is None:
            raise SystemExit(f"No node found for: {args.name}")
        out.write(f"{node.path}\n")
    elif command == "match":
        for node in tree.files_matching(args.substr, args.ignore_case):
            out.write(f"{node.path}\n")
    elif command == "exts":
        for row in tree.file_ext_counts():
            out.write(f"{row.count}\t{row.name or '(none)'}\n")
    elif command == "search":
        context = args.context if args.context is not None else load_search_context()
        results, errors = search_tree(tree, args.pattern, args.ignore_case, context)
        for result in results:
            for match in result.matches:
                snippet = match.text.decode("utf-8", errors="replace")
                region = match.region
                out.write(f"{result.node.path}:{region.start_line + 1}:{region.start_col + 1}: {snippet}\n")
        for path, exc in errors:
            sys.stderr.write(f"{path}: {exc}\n")
    elif command == "show":
        node = _resolve_node(tree, args.path)
        node.open_buffer(style=args.style or load_highlight_style())
        try:
            out.write(node.buffer.highlighted())
        finally:
            node.close_buffer()
    elif command == "new-file":
        created = apply_action(_resolve_node(tree, args.dir), FileAction.NEW_FILE, name=args.name)
        if created is not None:
            out.write(f"{created.path}\n")
    elif command == "new-folder":
        created = apply_action(_resolve_node(tree, args.dir), FileAction.NEW_FOLDER, name=args.name)
        if created is not None:
            out.write(f"{created.path}\n")
    elif command == "rename":
        renamed = apply_action(_resolve_node(tree, args.path), FileAction.RENAME, new_path=args.new)
        if renamed is not None:
            out.write(f"{renamed.path}\n")
    elif command == "delete":
        if not apply_action(_resolve_node(tree, args.path), FileAction.DELETE, confirmed=args.yes):
            raise SystemExit(f"Not deleted (pass --yes to confirm): {args.path}")
    elif command == "duplicate":
        out.write(f"{apply_action(_resolve_node(tree, args.path), FileAction.DUPLICATE)}\n")
    elif command in ("copy", "move"):
        action = FileAction.COPY_INTO if command == "copy" else FileAction.MOVE_INTO
        written = apply_action(
            _resolve_node(tree, args.dest),
            action,
            sources=[str(Path(args.src).absolute())],
            confirm_overwrite=lambda _target, _source: args.yes,
        )
        if not written:
            raise SystemExit(f"Nothing {command}d (existing target; pass --yes to overwrite): {args.dest}")
        for path in written:
            out.write(f"{path}\n")


def main(argv: list[str] | None = None, default_root: Path | None = None) -> None:
    """Parse CLI arguments, open the tree, and run one command.

    ``default_root`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.root) if args.root else (default_root or Path.cwd())
    if not root.is_dir():
        raise SystemExit(f"Not a directory: {root}")
    dirs_on_top = args.dirs_on_top if args.dirs_on_top is not None else load_dirs_on_top()

    tree = FileTree(open_dirs=load_open_dirs(root), dirs_on_top=dirs_on_top)
    try:
        tree.open_path(root)
        if args.all:
            tree.open_all_dirs()
        _run(tree, args)
    except (FileTreeError, OSError) as exc:
        raise SystemExit(f"mirrortree: {exc}") from exc

    if not args.no_save and not args.all:
        tree.prune_open_dirs()
        save_open_dirs(root, tree.open_dirs)


if __name__ == "__main__":
    main()
