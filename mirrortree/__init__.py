"""Public package surface for mirrortree.

Re-exports the tree model and content search; ``main`` is the CLI
entrypoint, imported lazily to keep package imports lightweight.
"""

from __future__ import annotations

from .file_tree_model import FileNode, FileTree, OpenDirMap
from .search import search_file, search_stream, search_tree


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "FileNode",
    "FileTree",
    "OpenDirMap",
    "search_file",
    "search_stream",
    "search_tree",
    "main",
]
