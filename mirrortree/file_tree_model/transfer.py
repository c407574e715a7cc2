"""Paste and move of tree files onto a target node (drag/drop semantics).

Both always copy. A move then deletes each copied source; that second step
is not atomic with the copy, so a failed delete leaves the copy in place and
raises ``MoveIncompleteError`` rather than the plain ``OSError`` a failed
copy raises.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Sequence
from pathlib import Path

from ..errors import MoveIncompleteError, TransferError
from .node import FileNode

logger = logging.getLogger(__name__)

ConfirmOverwrite = Callable[[Path, Path], bool]


def _decline(_target: Path, _source: Path) -> bool:
    return False


def _copy_one(target: FileNode, source: FileNode, confirm: ConfirmOverwrite) -> Path | None:
    if target.is_dir:
        dest = target.path / source.name
        confirmed = dest.exists() and confirm(dest, source.path)
        return dest if target.copy_file_to_dir(source.path, confirmed=confirmed) else None
    confirmed = confirm(target.path, source.path)
    return target.path if target.copy_file_to_file(source.path, confirmed=confirmed) else None


def _resolve_sources(target: FileNode, sources: Sequence[str | os.PathLike[str]]) -> list[FileNode]:
    root = target.root
    nodes: list[FileNode] = []
    for raw in sources:
        node = root.find_file(raw)
        if node is None:
            logger.warning("paste: could not find file node at path: %s", raw)
            continue
        nodes.append(node)
    return nodes


def paste_paths(
    target: FileNode,
    sources: Sequence[str | os.PathLike[str]],
    confirm_overwrite: ConfirmOverwrite | None = None,
) -> list[Path]:
    """Copy tree files ``sources`` into (directory) or onto (file) ``target``.

    Pasting more than one source onto a file is rejected outright. Each
    overwrite of an existing entry goes through ``confirm_overwrite(target,
    source)``, which declines by default. Returns the paths written.
    """
    if not target.is_dir and len(sources) != 1:
        exc = TransferError(f"only one file can be copied onto target file {target.name}, got {len(sources)}")
        logger.warning("paste: %s", exc)
        raise exc
    confirm = confirm_overwrite or _decline
    written: list[Path] = []
    for source in _resolve_sources(target, sources):
        dest = _copy_one(target, source, confirm)
        if dest is not None:
            written.append(dest)
    return written


def move_paths(
    target: FileNode,
    sources: Sequence[str | os.PathLike[str]],
    confirm_overwrite: ConfirmOverwrite | None = None,
) -> list[Path]:
    """Copy ``sources`` to ``target`` then delete each source that was copied.

    Sources whose copy was declined are left alone. Raises
    ``MoveIncompleteError`` on the first source that was copied but could not
    be deleted.
    """
    if not target.is_dir and len(sources) != 1:
        exc = TransferError(f"only one file can be moved onto target file {target.name}, got {len(sources)}")
        logger.warning("move: %s", exc)
        raise exc
    confirm = confirm_overwrite or _decline
    written: list[Path] = []
    for source in _resolve_sources(target, sources):
        if source is target or source.path == target.path:
            logger.warning("move: %s onto itself, skipping", source.path)
            continue
        dest = _copy_one(target, source, confirm)
        if dest is None:
            continue
        written.append(dest)
        try:
            source.delete_file()
        except OSError as exc:
            raise MoveIncompleteError(source.path, dest, exc) from exc
    return written


__all__ = ["ConfirmOverwrite", "paste_paths", "move_paths"]
