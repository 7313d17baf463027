"""JSON file storage for the persisted session."""

import json
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """KeyValueStorage kept in a single JSON object on disk.

    Every write replaces the whole file atomically, so slots written
    together are never observed half-written after a crash.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None."""
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_items(self, items: Mapping[str, str]) -> None:
        """Write several slots in one step."""
        data = self._read()
        data.update(items)
        self._write(data)

    def remove(self, *keys: str) -> None:
        """Remove slots; missing keys are ignored."""
        data = self._read()
        if not any(key in data for key in keys):
            return
        for key in keys:
            data.pop(key, None)
        self._write(data)

    def _read(self) -> dict:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning(f"Ignoring unreadable session file {self._path}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        # Private from creation; it holds the bearer token
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(data, ensure_ascii=False))
        os.replace(tmp, self._path)
        try:
            os.chmod(self._path, 0o600)
        except OSError:
            # Not supported on every filesystem
            pass
