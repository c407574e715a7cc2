"""Exception types raised by the mirrored file tree.

Filesystem failures are not wrapped: they surface as the builtin ``OSError``
subclasses so callers can match on ``FileNotFoundError`` and friends.
"""

from __future__ import annotations

from pathlib import Path


class FileTreeError(Exception):
    """Base class for tree-level (non-I/O) failures."""


class PathError(FileTreeError, ValueError):
    """Path cannot be made absolute or lies outside the tree root."""


class StructuralError(FileTreeError):
    """A non-terminal path component resolved to a file, not a directory."""


class NodeNotFoundError(FileTreeError, LookupError):
    """No node corresponds to the requested path or name."""


class TransferError(FileTreeError):
    """A paste/move request violates its preconditions."""


class MoveIncompleteError(TransferError):
    """Source was copied but could not be deleted afterwards.

    The copy at ``copied_to`` is left in place; ``source`` still exists.
    """

    def __init__(self, source: Path, copied_to: Path, cause: OSError) -> None:
        super().__init__(f"copied {source} to {copied_to} but could not delete source: {cause}")
        self.source = source
        self.copied_to = copied_to
        self.cause = cause


__all__ = [
    "FileTreeError",
    "PathError",
    "StructuralError",
    "NodeNotFoundError",
    "TransferError",
    "MoveIncompleteError",
]
