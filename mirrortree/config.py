"""Persistent JSON config helpers.

Stores tree ordering, search context width, highlight style, and per-root
open-directory maps. All access is defensive: malformed or missing config
falls back safely.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

from .file_tree_model.open_dirs import OpenDirMap
from .highlight import DEFAULT_STYLE
from .search.content import DEFAULT_SEARCH_CONTEXT

logger = logging.getLogger(__name__)

APP_NAME = "mirrortree"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are logged, not raised, so a read-only config directory
    never breaks tree operations.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as exc:
        logger.warning("could not save config %s: %s", CONFIG_PATH, exc)


def load_dirs_on_top() -> bool:
    """Return persisted directory-ordering preference (default ``True``).

    Only explicit boolean values are accepted.
    """
    value = load_config().get("dirs_on_top")
    return value if isinstance(value, bool) else True


def save_dirs_on_top(dirs_on_top: bool) -> None:
    config = load_config()
    config["dirs_on_top"] = bool(dirs_on_top)
    save_config(config)


def load_search_context() -> int:
    """Bytes of context shown around search hits; non-negative ints only."""
    value = load_config().get("search_context")
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return DEFAULT_SEARCH_CONTEXT
    return value


def load_highlight_style() -> str:
    value = load_config().get("highlight_style")
    return value if isinstance(value, str) and value else DEFAULT_STYLE


def _root_key(root: Path) -> str:
    return os.path.abspath(root)


def load_open_dirs(root: Path) -> OpenDirMap:
    """Return the saved open-directory map for tree ``root`` (empty if none)."""
    value = load_config().get("open_dirs")
    if not isinstance(value, dict):
        return OpenDirMap()
    return OpenDirMap.from_json(value.get(_root_key(root)))


def save_open_dirs(root: Path, open_dirs: OpenDirMap) -> None:
    """Persist ``open_dirs`` for tree ``root``; an empty map removes the entry."""
    config = load_config()
    all_roots = config.get("open_dirs")
    if not isinstance(all_roots, dict):
        all_roots = {}
    key = _root_key(root)
    if open_dirs:
        all_roots[key] = open_dirs.to_json()
    else:
        all_roots.pop(key, None)
    config["open_dirs"] = all_roots
    save_config(config)


__all__ = [
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_dirs_on_top",
    "save_dirs_on_top",
    "load_search_context",
    "load_highlight_style",
    "load_open_dirs",
    "save_open_dirs",
]
