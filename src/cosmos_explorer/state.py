"""Process-wide key/value state persisted as a single JSON file.

The registry stores its descriptor list here as one string blob. The file
is read once on first access; every update rewrites it atomically.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any

from cosmos_explorer.exceptions import StateError


def _atomic_write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp-{os.getpid()}")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    finally:
        try:
            if tmp_path.exists():
                tmp_path.unlink()
        except OSError:
            pass


class JsonStateStore:
    """Memento-style state: synchronous reads, awaited writes."""

    def __init__(self, path: str | Path):
        self._path = Path(path).expanduser()
        self._values: dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if self._values is not None:
            return self._values
        if not self._path.exists():
            self._values = {}
            return self._values
        try:
            text = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise StateError(f"Cannot read state file {self._path}: {e}") from e
        if not text.strip():
            self._values = {}
            return self._values
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise StateError(f"Invalid JSON in state file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StateError(f"State file {self._path} must contain a JSON object.")
        self._values = data
        return self._values

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def keys(self) -> list[str]:
        return list(self._load())

    async def update(self, key: str, value: Any) -> None:
        """Set ``key`` to ``value`` and flush to disk. ``None`` removes the key."""
        values = dict(self._load())
        if value is None:
            values.pop(key, None)
        else:
            values[key] = value
        content = json.dumps(values, indent=2, sort_keys=True)
        try:
            await asyncio.to_thread(_atomic_write_text, self._path, content)
        except OSError as e:
            raise StateError(f"Cannot write state file {self._path}: {e}") from e
        self._values = values
