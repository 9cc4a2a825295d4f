"""
Persisted ignore lists for actions and routes.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import List, Union
import json
import logging

logger = logging.getLogger(__name__)

IGNORE_LIST_VERSION = "1.0.0"


class IgnoreList:
    """A set of logical keys hidden from the default views."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._keys: List[str] = []

    def load(self) -> "IgnoreList":
        """Read the list from disk, starting fresh if it is missing or corrupt."""
        self._keys = []
        if not self.path.exists():
            return self

        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load ignore list {self.path}, starting fresh: {e}")
            return self

        # Older route lists were stored as a bare array
        if isinstance(data, list):
            keys = data
        elif isinstance(data, dict):
            keys = data.get("ignored") or []
        else:
            logger.warning(f"Unexpected ignore list format in {self.path}, starting fresh")
            keys = []

        for key in keys:
            if isinstance(key, str) and key not in self._keys:
                self._keys.append(key)
        return self

    def save(self):
        """Atomic write"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = self.path.with_suffix(".tmp")
        data = {
            "ignored": list(self._keys),
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
            "version": IGNORE_LIST_VERSION,
        }
        try:
            temp_file.write_text(json.dumps(data, indent=2))
            temp_file.replace(self.path)
        except Exception as e:
            logger.error(f"Error writing ignore list {self.path}: {e}")
            if temp_file.exists():
                temp_file.unlink()
            raise

    def is_ignored(self, key: str) -> bool:
        return key in self._keys

    def add(self, key: str):
        if key not in self._keys:
            self._keys.append(key)
            self.save()

    def remove(self, key: str):
        if key in self._keys:
            self._keys.remove(key)
            self.save()

    def keys(self) -> List[str]:
        return list(self._keys)

    def __len__(self) -> int:
        return len(self._keys)
