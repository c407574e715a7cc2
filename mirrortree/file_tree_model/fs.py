"""Filesystem helpers backing the mirrored tree: stat, listing, copy, delete."""

from __future__ import annotations

import mimetypes
import os
import shutil
import stat
from pathlib import Path

from .types import DirectoryChild, FileInfo, FileKind

DEFAULT_DIR_MODE = 0o775


def _icon_hint(name: str, kind: FileKind, is_exec: bool) -> str:
    """Pick a display-icon hint from kind, exec bit, then mimetype."""
    if kind is FileKind.DIR:
        return "folder"
    if is_exec:
        return "exec"
    mime, _encoding = mimetypes.guess_type(name, strict=False)
    if mime:
        return mime.split("/", 1)[0]
    return "file"


def stat_file_info(path: Path) -> FileInfo:
    """Stat ``path`` and return its metadata.

    Symlinks are followed, so the info describes the target; ``is_symlink``
    records that the entry itself was a link. Raises ``OSError`` when the path
    (or a symlink target) cannot be stat'ed.
    """
    path = Path(path)
    is_symlink = path.is_symlink()
    st = path.stat()
    if stat.S_ISDIR(st.st_mode):
        kind = FileKind.DIR
    elif stat.S_ISREG(st.st_mode):
        kind = FileKind.FILE
    else:
        kind = FileKind.OTHER
    is_exec = kind is FileKind.FILE and bool(st.st_mode & 0o111)
    return FileInfo(
        name=path.name,
        path=path,
        kind=kind,
        mode=stat.S_IMODE(st.st_mode),
        size=0 if kind is FileKind.DIR else int(st.st_size),
        mtime_ns=int(st.st_mtime_ns),
        is_exec=is_exec,
        is_symlink=is_symlink,
        icon=_icon_hint(path.name, kind, is_exec),
    )


def list_directory_entries(directory: Path, dirs_on_top: bool) -> list[DirectoryChild]:
    """List immediate children of ``directory`` in tree order.

    With ``dirs_on_top`` directories precede files; within each group (or
    across all entries otherwise) names sort lexically. Enumeration errors
    propagate as ``OSError``.
    """
    dirs: list[DirectoryChild] = []
    files: list[DirectoryChild] = []
    with os.scandir(directory) as entries:
        for entry in entries:
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            child = DirectoryChild(name=entry.name, path=Path(entry.path), is_dir=is_dir)
            if dirs_on_top and not is_dir:
                files.append(child)
            else:
                dirs.append(child)

    if not dirs_on_top:
        return sorted(dirs, key=lambda item: item.name)
    dirs.sort(key=lambda item: item.name)
    files.sort(key=lambda item: item.name)
    return dirs + files


def duplicate_path(path: Path) -> Path:
    """Return the first free ``<stem>_Copy[N]<ext>`` sibling of ``path``."""
    path = Path(path)
    candidate = path.with_name(f"{path.stem}_Copy{path.suffix}")
    count = 0
    while candidate.exists() or candidate.is_symlink():
        count += 1
        candidate = path.with_name(f"{path.stem}_Copy{count}{path.suffix}")
    return candidate


def copy_file(dst: Path, src: Path, mode: int | None = None) -> None:
    """Copy bytes of ``src`` onto ``dst`` (overwriting) and apply ``mode``."""
    shutil.copyfile(src, dst)
    if mode is not None:
        os.chmod(dst, mode)


def remove_path(path: Path) -> None:
    """Delete a file, symlink, or (recursively) a directory."""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


__all__ = [
    "DEFAULT_DIR_MODE",
    "stat_file_info",
    "list_directory_entries",
    "duplicate_path",
    "copy_file",
    "remove_path",
]
