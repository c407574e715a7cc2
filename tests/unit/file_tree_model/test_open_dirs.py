"""Tests for the open-directory map and its mark-and-sweep liveness."""

from __future__ import annotations

import unittest

from mirrortree.file_tree_model import OpenDirMap


class OpenDirMapTests(unittest.TestCase):
    def test_mark_and_sweep_keeps_only_visited_entries(self) -> None:
        dm = OpenDirMap()
        for key in ("A", "B", "C"):
            dm.set_open(key)

        dm.clear_flags()
        self.assertTrue(dm.is_open("A"))
        self.assertTrue(dm.is_open("C"))
        dm.remove_stale()

        self.assertEqual(set(dm), {"A", "C"})

    def test_is_open_does_not_add_missing_entries(self) -> None:
        dm = OpenDirMap()
        self.assertFalse(dm.is_open("missing"))
        self.assertNotIn("missing", dm)

    def test_set_closed_removes_entry_and_tolerates_missing(self) -> None:
        dm = OpenDirMap({"docs": True})
        dm.set_closed("docs")
        dm.set_closed("docs")
        self.assertEqual(dm, {})

    def test_clear_flags_marks_everything_stale(self) -> None:
        dm = OpenDirMap({"a": True, "b": True})
        dm.clear_flags()
        dm.remove_stale()
        self.assertEqual(dm.open_paths(), [])

    def test_from_json_drops_malformed_entries(self) -> None:
        dm = OpenDirMap.from_json({"src": True, 3: True, "lib": 1})
        self.assertEqual(dm.to_json(), {"src": True, "lib": True})
        self.assertEqual(OpenDirMap.from_json(["not", "a", "map"]), {})


if __name__ == "__main__":
    unittest.main()
