"""File nodes: one in-memory entry per filesystem entry under a tree root.

Directory nodes are reconciled against the filesystem on demand by
``read_dir``. Children are matched by ``(node class, name)`` so that nodes
which still exist on disk keep their open flag, buffer and subtree across
rescans. Only directories recorded open in the root's ``OpenDirMap`` are
descended into.

Parent and root links are weak references: parents own their children,
nothing owns upwards.
"""

from __future__ import annotations

import errno
import logging
import os
import weakref
from collections.abc import Iterator
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import FileTreeError, NodeNotFoundError, PathError, StructuralError
from ..highlight import DEFAULT_STYLE, normalize_style
from ..search.content import DEFAULT_SEARCH_CONTEXT, SearchMatch, search_file
from .buffer import EditableBuffer
from .fs import (
    DEFAULT_DIR_MODE,
    copy_file,
    duplicate_path,
    list_directory_entries,
    remove_path,
    stat_file_info,
)
from .types import DirectoryChild, FileInfo, NameCount

if TYPE_CHECKING:
    from .tree import FileTree

logger = logging.getLogger(__name__)


def _abspath(path: str | os.PathLike[str]) -> Path:
    try:
        return Path(os.path.abspath(path))
    except (OSError, ValueError) as exc:
        raise PathError(f"could not make {path!s} absolute: {exc}") from exc


class FileNode:
    """A file or directory in the mirrored tree.

    Subclasses used as a tree's ``node_type`` must accept the same
    constructor arguments.
    """

    def __init__(self, name: str = "", parent: FileNode | None = None, root: FileTree | None = None) -> None:
        self.name = name
        self.path = Path(name)
        self.info: FileInfo | None = None
        self.is_open = False
        self.buffer: EditableBuffer | None = None
        self.children: list[FileNode] = []
        self._parent_ref: weakref.ref[FileNode] | None = weakref.ref(parent) if parent is not None else None
        self._root_ref: weakref.ref[FileTree] | None = weakref.ref(root) if root is not None else None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"

    @property
    def parent(self) -> FileNode | None:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def root(self) -> FileTree:
        root = self._root_ref() if self._root_ref is not None else None
        if root is None:
            raise FileTreeError(f"{self.path} is not attached to a file tree")
        return root

    @property
    def is_dir(self) -> bool:
        return self.info is not None and self.info.is_dir

    @property
    def is_symlink(self) -> bool:
        return self.info is not None and self.info.is_symlink

    @property
    def is_exec(self) -> bool:
        return self.info is not None and self.info.is_exec

    @property
    def is_changed(self) -> bool:
        """True when the file is open in a buffer with unsaved edits."""
        return self.buffer is not None and self.buffer.is_changed()

    @property
    def is_auto_save(self) -> bool:
        """True for editor auto-save files, named ``#...#``."""
        return self.name.startswith("#") and self.name.endswith("#")

    def child_by_name(self, name: str) -> FileNode | None:
        for child in self.children:
            if child.name == name:
                return child
        return None

    def walk(self) -> Iterator[FileNode]:
        """Yield this node and all descendants in depth-first pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def my_rel_path(self) -> str:
        return self.root.rel_path(self.path)

    # -- reconciliation ---------------------------------------------------

    def read_dir(self, path: str | os.PathLike[str]) -> None:
        """Reconcile this node's children with the directory at ``path``.

        Raises ``OSError`` if the directory cannot be stat'ed or listed; the
        node is then left open with whatever children it had.
        """
        abs_path = _abspath(path)
        self.is_open = True
        try:
            info = stat_file_info(abs_path)
        except OSError as exc:
            logger.warning("read_dir: could not read directory %s: %s", abs_path, exc)
            raise
        self.name = abs_path.name
        self.path = abs_path
        self.info = info

        root = self.root
        try:
            listing = list_directory_entries(abs_path, root.dirs_on_top)
        except OSError as exc:
            logger.warning("read_dir: could not list directory %s: %s", abs_path, exc)
            raise
        changed = self._config_children(listing)

        # always re-stat kids, regardless of structural changes
        for child in self.children:
            try:
                child.set_node_path(abs_path / child.name)
            except (OSError, FileTreeError):
                continue
        if changed:
            root.notify(self)

    def _config_children(self, listing: list[DirectoryChild]) -> bool:
        """Match ``listing`` against current children; return whether anything changed."""
        root = self.root
        node_type = root.node_type or FileNode
        previous = list(self.children)
        existing = {(type(child), child.name): child for child in previous}

        children: list[FileNode] = []
        for entry in listing:
            child = existing.pop((node_type, entry.name), None)
            if child is None:
                child = node_type(entry.name, parent=self, root=root)
            children.append(child)

        for stale in existing.values():
            stale._detach()
        self.children = children
        return len(children) != len(previous) or any(a is not b for a, b in zip(children, previous))

    def _detach(self) -> None:
        for child in self.children:
            child._detach()
        if self.buffer is not None:
            self.close_buffer()
        self._parent_ref = None

    def _drop_children(self) -> None:
        for child in self.children:
            child._detach()
        self.children = []

    def _remove_child(self, child: FileNode) -> None:
        self.children.remove(child)
        child._detach()
        self.root.notify(self)

    def _sort_children(self) -> None:
        if self.root.dirs_on_top:
            self.children.sort(key=lambda item: (not item.is_dir, item.name))
        else:
            self.children.sort(key=lambda item: item.name)

    def set_node_path(self, path: str | os.PathLike[str]) -> None:
        self.path = _abspath(path)
        self.update_node()

    def update_node(self) -> None:
        """Re-stat this node and re-read it if it is an open directory."""
        try:
            self.info = stat_file_info(self.path)
        except OSError as exc:
            logger.warning("update_node: %s: %s", self.path, exc)
            raise
        if not self.is_dir:
            if self.children or (self.is_open and self.buffer is None):
                # a directory was replaced by a file of the same name
                root = self.root
                self._drop_children()
                self.is_open = self.buffer is not None
                root._forget_open_dirs(self.path)
                root.notify(self)
            return
        if self.root.is_dir_open(self.path):
            self.read_dir(self.path)

    def open_dir(self) -> None:
        self.is_open = True
        self.root.set_dir_open(self.path)
        self.update_node()

    def close_dir(self) -> None:
        self.is_open = False
        self.root.set_dir_closed(self.path)

    def open_all_dirs(self) -> None:
        """Open every directory in this subtree (symlinked dirs are not followed)."""
        if self.is_dir and not self.is_open:
            self.open_dir()
        for child in list(self.children):
            if not child.is_dir or child.is_symlink:
                continue
            try:
                child.open_all_dirs()
            except OSError:
                continue

    # -- buffers ----------------------------------------------------------

    def open_buffer(self, style: str = DEFAULT_STYLE) -> bool:
        """Open this file in an editable buffer.

        Returns ``True`` if newly opened and ``False`` if a buffer for this
        path is already open. ``style`` is the highlighting style to apply.
        """
        if self.is_dir:
            exc = IsADirectoryError(errno.EISDIR, "cannot open directory in editor", str(self.path))
            logger.warning("open_buffer: %s", exc)
            raise exc
        created = False
        if self.buffer is not None:
            if self.buffer.path == self.path:
                return False
        else:
            self.buffer = self.root.buffer_factory()
            created = True
        self.buffer.style = normalize_style(style)
        try:
            self.buffer.open(self.path)
        except OSError as exc:
            logger.warning("open_buffer: %s: %s", self.path, exc)
            if created:
                self.buffer = None
            raise
        self.is_open = True
        return True

    def close_buffer(self) -> bool:
        if self.buffer is None:
            return False
        self.buffer.close()
        self.buffer = None
        if not self.is_dir:
            self.is_open = False
        return True

    # -- path resolution --------------------------------------------------

    def rel_path(self, path: str | os.PathLike[str]) -> str:
        """Path of ``path`` relative to this node, or ``""`` if there is none."""
        try:
            return os.path.relpath(os.path.abspath(path), self.path)
        except ValueError as exc:
            logger.warning("rel_path: %s relative to %s: %s", path, self.path, exc)
            return ""

    def open_dirs_to(self, path: str | os.PathLike[str]) -> FileNode:
        """Open every directory down to ``path`` and return its node.

        The terminal component need not exist yet: its deepest existing
        ancestor is returned instead. Intermediate components must exist and
        be directories.
        """
        target = _abspath(path)
        rel = self.rel_path(target)
        if rel == ".":
            return self
        if not rel or rel == os.pardir or rel.startswith(os.pardir + os.sep):
            exc = PathError(f"{target} is not within file tree path {self.path}")
            logger.warning("open_dirs_to: %s", exc)
            raise exc

        parts = rel.split(os.sep)
        last = len(parts) - 1
        current = self
        for idx, part in enumerate(parts):
            child = current.child_by_name(part)
            if child is None:
                if idx == last:  # might not exist yet
                    return current
                exc = NodeNotFoundError(f"could not find node {part!r} in {current.path}")
                logger.warning("open_dirs_to: %s", exc)
                raise exc
            if idx < last:
                if not child.is_dir:
                    exc = StructuralError(f"non-terminal node {part!r} is not a directory in {current.path}")
                    logger.warning("open_dirs_to: %s", exc)
                    raise exc
                if not child.is_open:
                    child.open_dir()
            current = child
        return current

    def find_file(self, name: str | os.PathLike[str]) -> FileNode | None:
        """Find the first node whose absolute path ends with ``name``.

        Leading ``..`` components are ignored. A full path under this node is
        resolved directly (opening directories on the way); anything else is
        a literal suffix match over the subtree in depth-first pre-order, so
        an ambiguous suffix returns only the first hit.
        """
        target = os.fspath(name)
        if not target:
            return None
        if target.startswith(os.pardir):
            parts = target.split(os.sep)
            while parts and parts[0] == os.pardir:
                parts.pop(0)
            if not parts:
                return None
            target = os.path.join(*parts)

        if target.startswith(str(self.path)):
            try:
                node = self.open_dirs_to(target)
            except (FileTreeError, OSError):
                node = None
            if node is not None and node.path == _abspath(target):
                return node

        for node in self.walk():
            if str(node.path).endswith(target):
                return node
        return None

    def files_matching(self, match: str, ignore_case: bool = False) -> list[FileNode]:
        """Return every node whose name contains ``match``, in pre-order."""
        if ignore_case:
            match = match.lower()
        found: list[FileNode] = []
        for node in self.walk():
            name = node.name.lower() if ignore_case else node.name
            if match in name:
                found.append(node)
        return found

    def file_ext_counts(self) -> list[NameCount]:
        """Histogram of lower-cased extensions, most common first.

        Ties keep first-seen order.
        """
        counts: dict[str, int] = {}
        for node in self.walk():
            ext = Path(node.name).suffix.lower()
            counts[ext] = counts.get(ext, 0) + 1
        ranked = sorted(counts.items(), key=lambda item: -item[1])
        return [NameCount(name=ext, count=count) for ext, count in ranked]

    # -- file operations --------------------------------------------------

    def _require_dir(self, op: str) -> None:
        if not self.is_dir:
            exc = NotADirectoryError(errno.ENOTDIR, f"{op} needs a directory", str(self.path))
            logger.warning("%s: %s", op, exc)
            raise exc

    def new_file(self, name: str) -> FileNode | None:
        """Create an empty file ``name`` in this directory and return its node."""
        self._require_dir("new_file")
        target = self.path / name
        try:
            target.touch(exist_ok=True)
        except OSError as exc:
            logger.error("new_file: could not make new file at %s: %s", target, exc)
            raise
        root = self.root
        root.update_new_file(target)
        return root.find_file(target)

    def new_folder(self, name: str) -> FileNode | None:
        """Create directory ``name`` in this directory and return its node."""
        self._require_dir("new_folder")
        target = self.path / name
        try:
            target.mkdir(mode=DEFAULT_DIR_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("new_folder: could not make folder at %s: %s", target, exc)
            raise
        root = self.root
        root.update_new_file(self.path)
        return root.find_file(target)

    def _retarget(self, path: Path) -> None:
        old = self.path
        self.path = path
        if self.buffer is not None and self.buffer.path == old:
            self.buffer.path = path
        for child in self.children:
            child._retarget(path / child.name)

    def rename_file(self, new_path: str | os.PathLike[str]) -> FileNode | None:
        """Rename the backing file.

        Relative paths resolve against this file's directory. A bare name
        renames in place and updates this node. A path into another directory
        detaches this node and picks the entry up at its destination; the
        returned node is the one now representing the file (or ``None`` if
        the destination is not in the tree, in which case an open buffer is
        closed).
        """
        new = Path(new_path)
        if not new.is_absolute():
            new = self.path.parent / new
        new = _abspath(new)
        old = self.path
        try:
            os.rename(old, new)
        except OSError as exc:
            logger.error("rename_file: %s -> %s: %s", old, new, exc)
            raise

        root = self.root
        if self.is_dir:
            root._rename_open_dirs(old, new)
        parent = self.parent
        if parent is not None and new.parent != parent.path:
            buffer = self.buffer
            self.buffer = None
            parent._remove_child(self)
            root.update_new_file(new)
            moved = root.find_file(new)
            if buffer is not None:
                if moved is not None and moved.buffer is None:
                    if buffer.path == old:
                        buffer.path = new
                    moved.buffer = buffer
                    moved.is_open = True
                else:
                    buffer.close()
            return moved

        self.name = new.name
        self._retarget(new)
        try:
            self.info = stat_file_info(new)
        except OSError as exc:
            logger.warning("rename_file: could not stat %s: %s", new, exc)
        if parent is not None:
            parent._sort_children()
        root.notify(parent if parent is not None else self)
        return self

    def delete_file(self, confirmed: bool = True) -> bool:
        """Delete the backing file (directories recursively) and drop this node.

        Returns ``False`` without touching anything when not ``confirmed``.
        """
        if not confirmed:
            logger.info("delete_file: %s not confirmed, skipping", self.path)
            return False
        parent = self.parent
        if parent is None:
            raise FileTreeError(f"refusing to delete tree root {self.path}")
        try:
            remove_path(self.path)
        except OSError as exc:
            logger.error("delete_file: %s: %s", self.path, exc)
            raise
        if self.is_dir:
            self.root._forget_open_dirs(self.path)
        parent._remove_child(self)
        return True

    def _mode(self) -> int | None:
        return self.info.mode if self.info is not None else None

    def duplicate_file(self) -> Path:
        """Copy this file to a fresh ``_Copy`` sibling; returns the new path."""
        if self.is_dir:
            exc = IsADirectoryError(errno.EISDIR, "can only duplicate regular files", str(self.path))
            logger.warning("duplicate_file: %s", exc)
            raise exc
        dst = duplicate_path(self.path)
        try:
            copy_file(dst, self.path, self._mode())
        except OSError as exc:
            logger.error("duplicate_file: %s -> %s: %s", self.path, dst, exc)
            raise
        parent = self.parent
        if parent is not None:
            parent.update_node()
        return dst

    def copy_file_to_dir(self, src: str | os.PathLike[str], confirmed: bool = False) -> bool:
        """Copy ``src`` into this directory under its own name.

        Overwriting an existing entry requires ``confirmed``; returns whether
        the copy happened.
        """
        self._require_dir("copy_file_to_dir")
        src = Path(src)
        target = self.path / src.name
        if (target.exists() or target.is_symlink()) and not confirmed:
            logger.info("copy_file_to_dir: %s exists, overwrite not confirmed", target)
            return False
        try:
            copy_file(target, src, stat_file_info(src).mode)
        except OSError as exc:
            logger.error("copy_file_to_dir: %s -> %s: %s", src, target, exc)
            raise
        self.update_node()
        return True

    def copy_file_to_file(self, src: str | os.PathLike[str], confirmed: bool = False) -> bool:
        """Overwrite this file with the bytes of ``src`` once ``confirmed``."""
        if self.is_dir:
            exc = IsADirectoryError(errno.EISDIR, "copy target is a directory", str(self.path))
            logger.warning("copy_file_to_file: %s", exc)
            raise exc
        if not confirmed:
            logger.info("copy_file_to_file: overwrite of %s not confirmed", self.path)
            return False
        src = Path(src)
        try:
            copy_file(self.path, src, stat_file_info(src).mode)
        except OSError as exc:
            logger.error("copy_file_to_file: %s -> %s: %s", src, self.path, exc)
            raise
        self.update_node()
        return True

    # -- search -----------------------------------------------------------

    def search_content(
        self,
        find: bytes | str,
        ignore_case: bool = False,
        context: int = DEFAULT_SEARCH_CONTEXT,
    ) -> tuple[int, list[SearchMatch] | None]:
        return search_file(self.path, find, ignore_case, context)


__all__ = ["FileNode"]
