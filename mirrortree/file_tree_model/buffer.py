"""Editable-buffer contract used by file nodes, plus a plain-text default.

The tree never looks inside a buffer: it only opens, closes, and asks
whether there are unsaved changes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from ..highlight import DEFAULT_STYLE, highlight_text, normalize_style, read_text


@runtime_checkable
class EditableBuffer(Protocol):
    """Capability set a node needs from its buffer collaborator."""

    path: Path | None
    style: str

    def open(self, path: Path) -> None: ...

    def close(self) -> None: ...

    def is_changed(self) -> bool: ...


class TextBuffer:
    """In-memory text buffer with save and highlighting support."""

    def __init__(self, style: str = DEFAULT_STYLE) -> None:
        self.path: Path | None = None
        self.style = normalize_style(style)
        self.text = ""
        self._changed = False

    def open(self, path: Path) -> None:
        """Load ``path``; raises ``OSError`` when it cannot be read."""
        path = Path(path)
        self.text = read_text(path)
        self.path = path
        self._changed = False

    def close(self) -> None:
        self.path = None
        self.text = ""
        self._changed = False

    def is_changed(self) -> bool:
        return self._changed

    def set_text(self, text: str) -> None:
        if text != self.text:
            self.text = text
            self._changed = True

    def save(self) -> None:
        if self.path is None:
            raise ValueError("buffer has no file to save to")
        self.path.write_text(self.text, encoding="utf-8")
        self._changed = False

    def highlighted(self) -> str:
        return highlight_text(self.text, self.path or Path("untitled.txt"), self.style)


__all__ = ["EditableBuffer", "TextBuffer"]
