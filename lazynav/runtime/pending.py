"""File-backed store for the pending copy/move operation.

The record is shared by every lazynav process of the user, so independently
started sessions can yank in one and put in another.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_state_dir

from .config import APP_NAME

PENDING_FILENAME = "pending.json"
DEFAULT_PENDING_PATH = Path(user_state_dir(APP_NAME, appauthor=False)) / PENDING_FILENAME


class PendingOperationStore:
    """Persist ``(paths, copy)`` as ``{"mode": ..., "paths": [...]}`` JSON."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = DEFAULT_PENDING_PATH if path is None else path

    def save(self, paths: list[Path], copy: bool) -> None:
        """Overwrite the record. Raises ``OSError`` when it cannot be written."""
        payload = {
            "mode": "copy" if copy else "move",
            "paths": [str(path) for path in paths],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")

    def load(self) -> tuple[list[Path], bool]:
        """Return the stored record; missing or malformed data reads as empty."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return [], False
        if not isinstance(data, dict):
            return [], False

        raw_paths = data.get("paths")
        if not isinstance(raw_paths, list):
            return [], False
        paths = [Path(raw) for raw in raw_paths if isinstance(raw, str) and raw]
        return paths, data.get("mode") == "copy"

    def clear(self) -> None:
        self.save([], False)


__all__ = [
    "DEFAULT_PENDING_PATH",
    "PendingOperationStore",
]
