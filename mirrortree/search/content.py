"""Literal substring search over byte streams, files, and tree nodes.

Matches are reported per line with byte-offset columns and a snippet holding
up to ``context`` bytes on either side of the hit (never crossing the line),
with the matched span wrapped in ``MARK_START``/``MARK_END``.
"""

from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..file_tree_model.node import FileNode

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_CONTEXT = 30
MARK_START = b"<mark>"
MARK_END = b"</mark>"


@dataclass(frozen=True)
class TextRegion:
    """Half-open span; lines are 0-based, columns are byte offsets."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int


@dataclass(frozen=True)
class SearchMatch:
    region: TextRegion
    text: bytes


@dataclass(frozen=True)
class NodeMatches:
    """All hits within one file node."""

    node: FileNode
    count: int
    matches: list[SearchMatch]


def _as_bytes(find: bytes | str) -> bytes:
    return find.encode("utf-8") if isinstance(find, str) else bytes(find)


def _iter_lines(stream: Iterable[bytes]) -> Iterable[bytes]:
    """Yield lines without their terminator (``\\n`` or ``\\r\\n``)."""
    for raw in stream:
        line = raw[:-1] if raw.endswith(b"\n") else raw
        if line.endswith(b"\r"):
            line = line[:-1]
        yield line


def search_stream(
    stream: Iterable[bytes] | bytes,
    find: bytes | str,
    ignore_case: bool = False,
    context: int = DEFAULT_SEARCH_CONTEXT,
) -> tuple[int, list[SearchMatch] | None]:
    """Find every non-overlapping occurrence of ``find`` in ``stream``.

    ``stream`` is anything yielding byte lines (a binary file object, for
    instance) or a ``bytes`` blob. Case folding is ASCII-only so the folded
    line keeps the byte offsets of the original; regions and snippets always
    reference the original bytes. An empty pattern yields ``(0, None)``:
    there is nothing to look for, as opposed to a search that found nothing.
    """
    needle = _as_bytes(find)
    size = len(needle)
    if size == 0:
        return 0, None
    if isinstance(stream, (bytes, bytearray)):
        stream = io.BytesIO(stream)
    if ignore_case:
        needle = needle.lower()
    context = max(0, context)

    matches: list[SearchMatch] = []
    for line_no, original in enumerate(_iter_lines(stream)):
        haystack = original.lower() if ignore_case else original
        line_len = len(haystack)
        cursor = 0
        while cursor < line_len:
            start = haystack.find(needle, cursor)
            if start < 0:
                break
            end = start + size
            cursor = end
            ctx_start = max(start - context, 0)
            ctx_end = min(end + context, line_len)
            snippet = b"".join(
                (
                    original[ctx_start:start],
                    MARK_START,
                    original[start:end],
                    MARK_END,
                    original[end:ctx_end],
                )
            )
            matches.append(SearchMatch(TextRegion(line_no, start, line_no, end), snippet))
    return len(matches), matches


def search_file(
    path: Path,
    find: bytes | str,
    ignore_case: bool = False,
    context: int = DEFAULT_SEARCH_CONTEXT,
) -> tuple[int, list[SearchMatch] | None]:
    """Search a file on disk; raises ``OSError`` if it cannot be opened."""
    try:
        handle = open(path, "rb")
    except OSError as exc:
        logger.warning("search: cannot open %s: %s", path, exc)
        raise
    with handle:
        return search_stream(handle, find, ignore_case, context)


def search_tree(
    node: FileNode,
    find: bytes | str,
    ignore_case: bool = False,
    context: int = DEFAULT_SEARCH_CONTEXT,
) -> tuple[list[NodeMatches], list[tuple[Path, OSError]]]:
    """Search every file node already enumerated under ``node``.

    Returns ``(results, errors)``: results only list files with at least one
    hit, in depth-first pre-order; files that failed to read are reported in
    ``errors`` and contribute no matches.
    """
    results: list[NodeMatches] = []
    errors: list[tuple[Path, OSError]] = []
    if not _as_bytes(find):
        return results, errors
    for item in node.walk():
        if item.is_dir:
            continue
        try:
            count, matches = search_file(item.path, find, ignore_case, context)
        except OSError as exc:
            errors.append((item.path, exc))
            continue
        if count:
            results.append(NodeMatches(node=item, count=count, matches=matches))
    return results, errors


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
