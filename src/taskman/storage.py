"""Durable key/value storage.

Each named entry is one file under the storage directory holding the
serialized value verbatim. Values are strings, so callers decide the
encoding (the task store writes a JSON array).
"""

from __future__ import annotations

import contextlib
import re
from pathlib import Path

from taskman.errors import StorageError

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class LocalStorage:
    """String values stored by key in a directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        """Get the file backing a key."""
        if not _KEY_RE.match(key) or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> str | None:
        """Read the value stored under key, or None if there is none."""
        path = self.path_for(key)
        if not path.exists():
            return None

        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        path = self.path_for(key)
        tmp_path = path.with_suffix(".json.tmp")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Could not write {path}: {e}") from e
