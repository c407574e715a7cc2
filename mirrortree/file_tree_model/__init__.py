"""Domain model for a filesystem-mirroring file tree.

This package contains non-UI tree primitives:
- stat metadata and one-level directory listing
- the persisted open-directory map (mark-and-sweep liveness)
- file nodes with reconciliation, path lookup and file operations
- the tree root holding shared view policy
- paste/move transfers and the action enum front ends dispatch through
"""

from __future__ import annotations

from .types import DirectoryChild, FileInfo, FileKind, NameCount
from .fs import copy_file, duplicate_path, list_directory_entries, remove_path, stat_file_info
from .open_dirs import OpenDirMap
from .buffer import EditableBuffer, TextBuffer
from .node import FileNode
from .tree import FileTree, TreeObserver
from .transfer import ConfirmOverwrite, move_paths, paste_paths
from .actions import ACTION_ARGS, FileAction, action_enabled, apply_action

__all__ = [
    "DirectoryChild",
    "FileInfo",
    "FileKind",
    "NameCount",
    "stat_file_info",
    "list_directory_entries",
    "duplicate_path",
    "copy_file",
    "remove_path",
    "OpenDirMap",
    "EditableBuffer",
    "TextBuffer",
    "FileNode",
    "FileTree",
    "TreeObserver",
    "ConfirmOverwrite",
    "paste_paths",
    "move_paths",
    "FileAction",
    "ACTION_ARGS",
    "action_enabled",
    "apply_action",
]
