"""Search package exports: literal content search over files and trees."""

from __future__ import annotations

from .content import (
    DEFAULT_SEARCH_CONTEXT,
    MARK_END,
    MARK_START,
    NodeMatches,
    SearchMatch,
    TextRegion,
    search_file,
    search_stream,
    search_tree,
)

__all__ = [
    "DEFAULT_SEARCH_CONTEXT",
    "MARK_START",
    "MARK_END",
    "TextRegion",
    "SearchMatch",
    "NodeMatches",
    "search_stream",
    "search_file",
    "search_tree",
]
