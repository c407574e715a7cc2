"""Text loading and Pygments-backed highlighting for editable buffers.

Style names are validated once against Pygments and cached; unknown names
fall back to ``DEFAULT_STYLE``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"

_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()
_FORMATTERS: dict[str, Terminal256Formatter] = {}


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def normalize_style(style: str | None) -> str:
    """Validate/canonicalize requested style name with cache-backed checks."""
    if not style:
        return DEFAULT_STYLE
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE

    try:
        get_style_by_name(style)
    except ClassNotFound:
        logger.warning("unknown highlight style %r, using %r", style, DEFAULT_STYLE)
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def highlight_text(text: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Render ``text`` as ANSI-highlighted terminal output.

    The lexer is chosen from the file name; unknown types render as plain text.
    """
    style = normalize_style(style)
    try:
        lexer = get_lexer_for_filename(Path(path).name, text)
    except ClassNotFound:
        lexer = TextLexer()
    return pygments_highlight(text, lexer, _formatter_for_style(style))


__all__ = ["DEFAULT_STYLE", "read_text", "normalize_style", "highlight_text"]
