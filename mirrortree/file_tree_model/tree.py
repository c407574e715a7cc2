"""Root of a mirrored file tree plus the view state shared by all its nodes."""

from __future__ import annotations

import logging
import os
import weakref
from collections.abc import Callable
from pathlib import Path

from ..errors import FileTreeError
from .buffer import EditableBuffer, TextBuffer
from .node import FileNode
from .open_dirs import OpenDirMap

logger = logging.getLogger(__name__)

TreeObserver = Callable[[FileNode], None]


class FileTree(FileNode):
    """A ``FileNode`` that is its own root.

    ``open_dirs`` records which directories (relative to the root) the user
    has opened; hand a previously persisted map to a new tree before calling
    ``open_path`` to restore that view. ``dirs_on_top`` places directories
    before files at every level. ``node_type`` is the class instantiated for
    new children.
    """

    def __init__(
        self,
        open_dirs: OpenDirMap | None = None,
        dirs_on_top: bool = False,
        node_type: type[FileNode] | None = None,
        buffer_factory: Callable[[], EditableBuffer] | None = None,
    ) -> None:
        super().__init__("")
        self._root_ref = weakref.ref(self)
        self.open_dirs = open_dirs if open_dirs is not None else OpenDirMap()
        self.dirs_on_top = dirs_on_top
        self.node_type = node_type
        self.buffer_factory: Callable[[], EditableBuffer] = buffer_factory or TextBuffer
        self.observers: list[TreeObserver] = []

    def open_path(self, path: str | os.PathLike[str]) -> None:
        """Read the tree at ``path``, re-opening directories listed in ``open_dirs``.

        Liveness marks are cleared first so ``prune_open_dirs`` afterwards
        drops entries that no longer correspond to a reachable directory.
        """
        self._root_ref = weakref.ref(self)
        if self.node_type is None:
            self.node_type = FileNode
        self.open_dirs.clear_flags()
        self.read_dir(path)

    def is_dir_open(self, path: str | os.PathLike[str]) -> bool:
        if Path(os.path.abspath(path)) == self.path:  # we are always open
            return True
        return self.open_dirs.is_open(self.rel_path(path))

    def set_dir_open(self, path: str | os.PathLike[str]) -> None:
        self.open_dirs.set_open(self.rel_path(path))

    def set_dir_closed(self, path: str | os.PathLike[str]) -> None:
        self.open_dirs.set_closed(self.rel_path(path))

    def _rename_open_dirs(self, old: Path, new: Path) -> None:
        """Carry open-dir entries for ``old`` and its subdirectories over to ``new``."""
        old_rel = self.rel_path(old)
        new_rel = self.rel_path(new)
        if not old_rel or not new_rel:
            return
        prefix = old_rel + os.sep
        for key in [key for key in self.open_dirs if key == old_rel or key.startswith(prefix)]:
            live = self.open_dirs.pop(key)
            self.open_dirs[new_rel + key[len(old_rel):]] = live

    def _forget_open_dirs(self, path: Path) -> None:
        """Drop open-dir entries for ``path`` and everything below it."""
        rel = self.rel_path(path)
        if rel in ("", os.curdir) or rel.startswith(os.pardir):
            return
        prefix = rel + os.sep
        for key in [key for key in self.open_dirs if key == rel or key.startswith(prefix)]:
            del self.open_dirs[key]

    def update_new_file(self, path: str | os.PathLike[str]) -> FileNode | None:
        """Bring the tree up to date after ``path`` was created externally.

        Opens directories down to ``path`` and then updates its node, or the
        node of its directory if the file itself is not in the tree yet.
        Returns the updated node, or ``None`` (logged) if neither was found.
        """
        target = Path(os.path.abspath(path))
        try:
            self.open_dirs_to(target)
        except (FileTreeError, OSError):
            pass  # logged by open_dirs_to; fall back to lookup below
        node = self.find_file(target)
        if node is None:
            node = self.find_file(target.parent)
        if node is None:
            logger.warning("update_new_file: no node found for path to update: %s", target)
            return None
        node.update_node()
        return node

    def subscribe(self, observer: TreeObserver) -> None:
        """Register ``observer`` to be called with each structurally changed node."""
        self.observers.append(observer)

    def notify(self, node: FileNode) -> None:
        for observer in list(self.observers):
            observer(node)

    def prune_open_dirs(self) -> dict[str, bool]:
        """Drop open-dir entries not visited since ``open_path``; return the rest."""
        self.open_dirs.remove_stale()
        return self.open_dirs.to_json()


__all__ = ["FileTree", "TreeObserver"]
