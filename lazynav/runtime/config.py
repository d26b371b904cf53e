"""Persistent JSON config helpers.

Stores the navigation options (sorting, hidden files, search flags, previewer).
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from ..options import DEFAULT_OPTIONS, SORT_KEYS, NavOptions

APP_NAME = "lazynav"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME

_BOOL_KEYS = (
    "reverse",
    "dir_first",
    "hidden",
    "ignorecase",
    "smartcase",
    "globsearch",
    "wrapscan",
    "highlight",
)


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except Exception:
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Any filesystem/serialization error is ignored to keep runtime behavior
    non-fatal when config cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception:
        pass


def _coerce_nonnegative_int(value: object, default: int) -> int:
    """Booleans and non-integers are treated as invalid."""
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return max(0, value)


def _coerce_optional_str(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def load_nav_options(defaults: NavOptions = DEFAULT_OPTIONS) -> NavOptions:
    """Build ``NavOptions`` from config, keeping ``defaults`` for invalid keys."""
    data = load_config()
    changes: dict[str, object] = {}

    sort_by = data.get("sort_by")
    if isinstance(sort_by, str) and sort_by in SORT_KEYS:
        changes["sort_by"] = sort_by

    for key in _BOOL_KEYS:
        value = data.get(key)
        if isinstance(value, bool):
            changes[key] = value

    if "scrolloff" in data:
        changes["scrolloff"] = _coerce_nonnegative_int(data["scrolloff"], defaults.scrolloff)

    if "previewer" in data:
        changes["previewer"] = _coerce_optional_str(data["previewer"])

    style = _coerce_optional_str(data.get("style"))
    if style is not None:
        changes["style"] = style

    return defaults.with_changes(**changes)


def save_nav_options(options: NavOptions) -> None:
    """Persist every navigation option, preserving unrelated config keys."""
    config = load_config()
    config["sort_by"] = options.sort_by
    for key in _BOOL_KEYS:
        config[key] = bool(getattr(options, key))
    config["scrolloff"] = max(0, int(options.scrolloff))
    config["previewer"] = options.previewer
    config["style"] = options.style
    save_config(config)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "load_config",
    "save_config",
    "load_nav_options",
    "save_nav_options",
]
