"""Domain datatypes for filesystem-backed file tree entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class FileKind(Enum):
    """Coarse entry kind observed from ``stat`` (symlinks report their target)."""

    FILE = "file"
    DIR = "dir"
    OTHER = "other"


@dataclass(frozen=True)
class FileInfo:
    """Cached stat-derived metadata for one filesystem entry."""

    name: str
    path: Path
    kind: FileKind
    mode: int = 0o644
    size: int = 0
    mtime_ns: int | None = None
    is_exec: bool = False
    is_symlink: bool = False
    icon: str = "file"

    @property
    def is_dir(self) -> bool:
        return self.kind is FileKind.DIR

    @property
    def ext(self) -> str:
        return Path(self.name).suffix.lower()


@dataclass(frozen=True)
class DirectoryChild:
    """One immediate directory entry as returned by enumeration."""

    name: str
    path: Path
    is_dir: bool


@dataclass(frozen=True)
class NameCount:
    """Histogram row used by extension counts."""

    name: str
    count: int


__all__ = [
    "FileKind",
    "FileInfo",
    "DirectoryChild",
    "NameCount",
]
