"""Operations a front end can offer on a node, as a plain enum plus dispatch.

Menus, prompts and key bindings map onto ``FileAction`` however they like;
``ACTION_ARGS`` names the parameters each one needs and ``action_enabled``
says whether it applies to a given node.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from .node import FileNode
from .transfer import move_paths, paste_paths


class FileAction(Enum):
    NEW_FILE = "new-file"
    NEW_FOLDER = "new-folder"
    RENAME = "rename"
    DELETE = "delete"
    DUPLICATE = "duplicate"
    OPEN_DIR = "open-dir"
    CLOSE_DIR = "close-dir"
    OPEN_BUFFER = "open-buffer"
    CLOSE_BUFFER = "close-buffer"
    COPY_INTO = "copy-into"
    MOVE_INTO = "move-into"


ACTION_ARGS: dict[FileAction, tuple[str, ...]] = {
    FileAction.NEW_FILE: ("name",),
    FileAction.NEW_FOLDER: ("name",),
    FileAction.RENAME: ("new_path",),
    FileAction.DELETE: (),
    FileAction.DUPLICATE: (),
    FileAction.OPEN_DIR: (),
    FileAction.CLOSE_DIR: (),
    FileAction.OPEN_BUFFER: (),
    FileAction.CLOSE_BUFFER: (),
    FileAction.COPY_INTO: ("sources",),
    FileAction.MOVE_INTO: ("sources",),
}

_DIR_ONLY = frozenset({FileAction.NEW_FILE, FileAction.NEW_FOLDER, FileAction.OPEN_DIR, FileAction.CLOSE_DIR})
_FILE_ONLY = frozenset({FileAction.DUPLICATE, FileAction.OPEN_BUFFER, FileAction.CLOSE_BUFFER})


def action_enabled(node: FileNode, action: FileAction) -> bool:
    """Whether ``action`` makes sense for ``node`` (directory vs file)."""
    if action in _DIR_ONLY:
        return node.is_dir
    if action in _FILE_ONLY:
        return not node.is_dir
    if action is FileAction.DELETE:
        return node.parent is not None
    return True


def apply_action(node: FileNode, action: FileAction, **params: Any) -> Any:
    """Run ``action`` on ``node`` with the parameters named in ``ACTION_ARGS``.

    Optional extras are passed through: ``confirmed`` for ``DELETE``,
    ``style`` for ``OPEN_BUFFER``, ``confirm_overwrite`` for copy/move.
    """
    missing = [name for name in ACTION_ARGS[action] if name not in params]
    if missing:
        raise TypeError(f"{action.value} requires argument(s): {', '.join(missing)}")

    if action is FileAction.NEW_FILE:
        return node.new_file(params["name"])
    if action is FileAction.NEW_FOLDER:
        return node.new_folder(params["name"])
    if action is FileAction.RENAME:
        return node.rename_file(params["new_path"])
    if action is FileAction.DELETE:
        return node.delete_file(confirmed=params.get("confirmed", False))
    if action is FileAction.DUPLICATE:
        return node.duplicate_file()
    if action is FileAction.OPEN_DIR:
        return node.open_dir()
    if action is FileAction.CLOSE_DIR:
        return node.close_dir()
    if action is FileAction.OPEN_BUFFER:
        if "style" in params:
            return node.open_buffer(style=params["style"])
        return node.open_buffer()
    if action is FileAction.CLOSE_BUFFER:
        return node.close_buffer()
    if action is FileAction.COPY_INTO:
        return paste_paths(node, params["sources"], params.get("confirm_overwrite"))
    if action is FileAction.MOVE_INTO:
        return move_paths(node, params["sources"], params.get("confirm_overwrite"))
    raise ValueError(f"unsupported action: {action!r}")


__all__ = ["FileAction", "ACTION_ARGS", "action_enabled", "apply_action"]
