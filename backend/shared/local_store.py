"""
Local key/value persistence.

A JSON file in the state directory plays the role that browser local
storage plays for a web client: small values (the signed-in session, the
daily trend marker) that must survive restarts.

Everything here is best effort. Read failures are treated as "absent" and
write failures are logged, never raised.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


class LocalStore:
    """
    JSON-file backed key/value store.

    Each call reads the file fresh, so multiple stores pointing at the
    same path observe each other's writes.
    """

    def __init__(self, path: Path) -> None:
        """
        Args:
            path: Location of the JSON file. Parent directories are
                  created on first write.
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under key, or None."""
        try:
            return self._read().get(key)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read local state from {self._path}: {e}")
            return None

    def set(self, key: str, value: Any) -> bool:
        """Store a JSON-serializable value. Returns False if the write failed."""
        try:
            data = self._read_or_empty()
            data[key] = value
            self._write(data)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Could not write local state key '{key}': {e}")
            return False

    def remove(self, key: str) -> bool:
        """Remove a key. Removing a missing key is not an error."""
        try:
            data = self._read_or_empty()
            if key in data:
                del data[key]
                self._write(data)
            return True
        except (OSError, ValueError) as e:
            logger.error(f"Could not remove local state key '{key}': {e}")
            return False

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError("local state file does not contain an object")
        return data

    def _read_or_empty(self) -> dict[str, Any]:
        # A corrupted file is replaced rather than blocking new writes
        try:
            return self._read()
        except ValueError:
            logger.warning(f"Discarding unreadable local state file {self._path}")
            return {}

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp_path.replace(self._path)
