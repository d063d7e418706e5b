"""
JSON file backing store.

All entries live in a single JSON object on disk:

    {"User.Username": "alice", "Ui.IsDarkMode": true, "Window.Width": 1200.0}

The file is rewritten atomically (temp file + os.replace) on every mutation,
so a crash never leaves a half-written document behind. A file that cannot
be parsed is backed up next to the original and the store starts empty.
"""

import json
import logging
import os
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from ..errors import StorageError
from ..utils.paths import get_config_dir
from .base import ABSENT, BackingStore

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "settings.json"


class JsonFileBackingStore(BackingStore):
    """
    Backing store persisted as a JSON document.

    Path:
        Linux/macOS: ~/.config/prefstore/settings.json
        Windows: %APPDATA%\\prefstore\\settings.json

    Timestamps are written as ISO-8601 text; JSON has no native type for
    them.
    """

    name = "json"

    def __init__(self, path: Optional[Path] = None):
        super().__init__()
        self.path = Path(path) if path else get_config_dir() / DEFAULT_FILENAME
        self._values: Dict[str, Any] = {}
        self.load()

    def load(self):
        """
        Load entries from file.

        If the file doesn't exist the store is empty. If it is invalid, a
        backup copy is made and the store starts empty.
        """
        with self._lock:
            if not self.path.exists():
                logger.info(f"No settings file at {self.path}, starting empty")
                self._values = {}
                return

            try:
                data = json.loads(self.path.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    raise ValueError("settings root is not an object")
                self._values = data
                logger.info(f"Loaded {len(data)} settings from {self.path}")

            except (OSError, ValueError) as e:
                logger.error(f"Failed to load settings from {self.path}: {e}")
                self._backup_corrupt_file()
                self._values = {}

    def keys(self) -> list:
        with self._lock:
            return list(self._values)

    def _do_set(self, key: str, value: Any):
        if isinstance(value, datetime):
            value = value.isoformat()
        updated = dict(self._values)
        updated[key] = value
        self._write(updated)

    def _do_get(self, key: str) -> Any:
        return self._values.get(key, ABSENT)

    def _do_remove(self, key: str) -> bool:
        if key not in self._values:
            return False
        updated = dict(self._values)
        del updated[key]
        self._write(updated)
        return True

    def _do_clear(self):
        self._write({})

    def _write(self, values: Dict[str, Any]):
        """Persist ``values`` atomically, then make them current."""
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(values, indent=2, sort_keys=True)
            tmp.write_text(payload, encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            try:
                tmp.unlink()
            except OSError:
                pass  # never created
            raise StorageError(f"Failed to save settings to {self.path}: {e}") from e

        self._values = values

    def _backup_corrupt_file(self):
        ts = time.strftime("%Y%m%d_%H%M%S")
        backup = self.path.with_name(f"{self.path.name}.bak.{ts}")
        try:
            backup.write_bytes(self.path.read_bytes())
            logger.warning(f"Backed up unreadable settings file to {backup}")
        except OSError as e:
            logger.error(f"Could not back up settings file: {e}")
