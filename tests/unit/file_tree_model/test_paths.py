"""Tests for path resolution, suffix lookup, and name/extension queries."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from mirrortree.errors import PathError, StructuralError
from mirrortree.file_tree_model import FileTree, NameCount, OpenDirMap


class PathResolutionTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        for rel in ("a/x.go", "b/x.go", "b/deep/y.GO", "notes.txt", "Makefile"):
            target = self.root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(rel + "\n", encoding="utf-8")
        self.tree = FileTree()
        self.tree.open_path(self.root)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_rel_path_is_relative_to_node(self) -> None:
        self.assertEqual(self.tree.rel_path(self.root / "b" / "deep"), "b/deep")
        self.assertEqual(self.tree.rel_path(self.root), ".")

    def test_open_dirs_to_opens_intermediate_directories(self) -> None:
        node = self.tree.open_dirs_to(self.root / "b" / "deep" / "y.GO")

        self.assertEqual(node.path, self.root / "b" / "deep" / "y.GO")
        self.assertTrue(self.tree.child_by_name("b").is_open)
        self.assertIn("b", self.tree.open_dirs)
        self.assertIn("b/deep", self.tree.open_dirs)

    def test_open_dirs_to_returns_deepest_ancestor_for_missing_terminal(self) -> None:
        node = self.tree.open_dirs_to(self.root / "a" / "not-yet.go")
        self.assertEqual(node.path, self.root / "a")

    def test_open_dirs_to_rejects_paths_outside_tree(self) -> None:
        with self.assertRaises(PathError):
            self.tree.open_dirs_to(self.root.parent)

    def test_open_dirs_to_rejects_descending_through_a_file(self) -> None:
        with self.assertRaises(StructuralError):
            self.tree.open_dirs_to(self.root / "notes.txt" / "inner")

    def test_open_dirs_to_self_returns_self(self) -> None:
        self.assertIs(self.tree.open_dirs_to(self.root), self.tree)

    def test_find_file_round_trips_every_node(self) -> None:
        self.tree.open_all_dirs()
        for node in self.tree.walk():
            self.assertIs(self.tree.find_file(node.path), node)

    def test_find_file_suffix_returns_first_depth_first_match(self) -> None:
        self.tree.open_all_dirs()
        first = self.tree.find_file("x.go")
        again = self.tree.find_file("x.go")

        self.assertEqual(first.path, self.root / "a" / "x.go")
        self.assertIs(first, again)
        self.assertEqual(self.tree.find_file("b/x.go").path, self.root / "b" / "x.go")

    def test_find_file_full_path_opens_unopened_directories(self) -> None:
        node = self.tree.find_file(str(self.root / "b" / "deep" / "y.GO"))
        self.assertIsNotNone(node)
        self.assertEqual(node.name, "y.GO")

    def test_find_file_strips_leading_parent_segments(self) -> None:
        self.tree.open_all_dirs()
        node = self.tree.find_file("../../b/deep/y.GO")
        self.assertEqual(node.path, self.root / "b" / "deep" / "y.GO")

    def test_find_file_misses(self) -> None:
        self.assertIsNone(self.tree.find_file(""))
        self.assertIsNone(self.tree.find_file("nothing-here.rs"))
        self.assertIsNone(self.tree.find_file(str(self.root / "a" / "missing.go")))

    def test_files_matching_by_name_with_optional_case_folding(self) -> None:
        self.tree.open_all_dirs()

        sensitive = [node.path for node in self.tree.files_matching(".go")]
        folded = [node.path for node in self.tree.files_matching(".GO", ignore_case=True)]

        self.assertEqual(sensitive, [self.root / "a" / "x.go", self.root / "b" / "x.go"])
        self.assertEqual(
            folded,
            [self.root / "a" / "x.go", self.root / "b" / "deep" / "y.GO", self.root / "b" / "x.go"],
        )

    def test_file_ext_counts_sorted_by_count(self) -> None:
        self.tree.open_all_dirs()

        counts = self.tree.file_ext_counts()

        self.assertEqual(counts[0], NameCount(name="", count=5))
        self.assertEqual(counts[1], NameCount(name=".go", count=3))
        self.assertEqual(counts[2], NameCount(name=".txt", count=1))

    def test_update_new_file_picks_up_externally_created_file(self) -> None:
        target = self.root / "a" / "fresh.go"
        target.write_text("package a\n", encoding="utf-8")

        node = self.tree.update_new_file(target)

        self.assertIsNotNone(node)
        self.assertIsNotNone(self.tree.find_file(target))
        self.assertTrue(self.tree.child_by_name("a").is_open)

    def test_update_new_file_outside_tree_returns_none(self) -> None:
        with tempfile.TemporaryDirectory() as other:
            self.assertIsNone(self.tree.update_new_file(Path(other) / "x.txt"))

    def test_restored_open_dirs_resolve_without_reopening(self) -> None:
        tree = FileTree(open_dirs=OpenDirMap({"b": True, "b/deep": True}))
        tree.open_path(self.root)

        deep = tree.child_by_name("b").child_by_name("deep")
        self.assertTrue(deep.is_open)
        self.assertEqual([child.name for child in deep.children], ["y.GO"])


if __name__ == "__main__":
    unittest.main()
