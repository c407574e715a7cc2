"""Persistent record of which tree directories the user has expanded.

Keys are paths relative to the tree root. The boolean value is a liveness
mark for mark-and-sweep: ``clear_flags`` before a full reconciliation pass,
``is_open`` marks every entry it is asked about, and ``remove_stale`` drops
whatever was never visited.
"""

from __future__ import annotations

from collections.abc import Mapping


class OpenDirMap(dict[str, bool]):
    """Relative directory path -> liveness mark."""

    def is_open(self, path: str) -> bool:
        """Return whether ``path`` is recorded open, marking it live if so."""
        if path in self:
            self[path] = True
            return True
        return False

    def set_open(self, path: str) -> None:
        self[path] = True

    def set_closed(self, path: str) -> None:
        self.pop(path, None)

    def clear_flags(self) -> None:
        """Reset every mark to ``False`` ahead of a traversal."""
        for key in self:
            self[key] = False

    def remove_stale(self) -> None:
        """Drop entries not marked since the last ``clear_flags``."""
        for key in [key for key, live in self.items() if not live]:
            del self[key]

    def open_paths(self) -> list[str]:
        return sorted(self)

    def to_json(self) -> dict[str, bool]:
        return {key: bool(value) for key, value in self.items()}

    @classmethod
    def from_json(cls, data: object) -> OpenDirMap:
        """Build a map from decoded JSON, skipping malformed entries."""
        dm = cls()
        if not isinstance(data, Mapping):
            return dm
        for key, value in data.items():
            if not isinstance(key, str):
                continue
            dm[key] = bool(value)
        return dm


__all__ = ["OpenDirMap"]
