"""Tests for opening/closing editable buffers on file nodes."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from mirrortree.file_tree_model import EditableBuffer, FileTree, TextBuffer


class RecordingBuffer:
    def __init__(self) -> None:
        self.path: Path | None = None
        self.style = ""
        self.events: list[str] = []

    def open(self, path: Path) -> None:
        self.path = path
        self.events.append("open")

    def close(self) -> None:
        self.path = None
        self.events.append("close")

    def is_changed(self) -> bool:
        return False


class BufferTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "main.py").write_text("x = 1\n", encoding="utf-8")
        (self.root / "pkg").mkdir()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_open_buffer_once_then_reports_already_open(self) -> None:
        tree = FileTree()
        tree.open_path(self.root)
        node = tree.child_by_name("main.py")

        self.assertTrue(node.open_buffer())
        self.assertFalse(node.open_buffer())
        self.assertTrue(node.is_open)
        self.assertIsInstance(node.buffer, TextBuffer)
        self.assertEqual(node.buffer.text, "x = 1\n")

    def test_style_is_threaded_through_and_normalized(self) -> None:
        tree = FileTree()
        tree.open_path(self.root)
        node = tree.child_by_name("main.py")

        node.open_buffer(style="friendly")
        self.assertEqual(node.buffer.style, "friendly")
        node.close_buffer()

        node.open_buffer(style="no-such-style")
        self.assertEqual(node.buffer.style, "monokai")

    def test_is_changed_follows_buffer_edits_and_save(self) -> None:
        tree = FileTree()
        tree.open_path(self.root)
        node = tree.child_by_name("main.py")
        node.open_buffer()

        node.buffer.set_text("x = 2\n")
        self.assertTrue(node.is_changed)
        node.buffer.save()
        self.assertFalse(node.is_changed)
        self.assertEqual((self.root / "main.py").read_text(encoding="utf-8"), "x = 2\n")

    def test_close_buffer(self) -> None:
        tree = FileTree(buffer_factory=RecordingBuffer)
        tree.open_path(self.root)
        node = tree.child_by_name("main.py")

        self.assertFalse(node.close_buffer())
        node.open_buffer()
        buffer = node.buffer
        self.assertIsInstance(buffer, EditableBuffer)
        self.assertTrue(node.close_buffer())

        self.assertIsNone(node.buffer)
        self.assertFalse(node.is_open)
        self.assertEqual(buffer.events, ["open", "close"])

    def test_open_buffer_on_directory_raises(self) -> None:
        tree = FileTree()
        tree.open_path(self.root)
        with self.assertRaises(IsADirectoryError):
            tree.child_by_name("pkg").open_buffer()

    def test_failed_open_drops_new_buffer(self) -> None:
        tree = FileTree()
        tree.open_path(self.root)
        node = tree.child_by_name("main.py")
        (self.root / "main.py").unlink()

        with self.assertRaises(FileNotFoundError):
            node.open_buffer()
        self.assertIsNone(node.buffer)

    def test_highlighted_renders_ansi(self) -> None:
        buffer = TextBuffer(style="monokai")
        buffer.open(self.root / "main.py")
        self.assertIn("\x1b[", buffer.highlighted())


if __name__ == "__main__":
    unittest.main()
