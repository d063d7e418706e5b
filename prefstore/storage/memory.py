"""
In-memory backing store.

Values live in a dict for the lifetime of the instance. Used by the test
suite and for sessions that must not touch the user's real settings.
"""

from typing import Any, Dict

from .base import ABSENT, BackingStore


class MemoryBackingStore(BackingStore):
    """Backing store held entirely in process memory."""

    name = "memory"

    def __init__(self, initial: Dict[str, Any] = None):
        super().__init__()
        self._values: Dict[str, Any] = dict(initial or {})

    def keys(self) -> list:
        with self._lock:
            return list(self._values)

    def _do_set(self, key: str, value: Any):
        self._values[key] = value

    def _do_get(self, key: str) -> Any:
        return self._values.get(key, ABSENT)

    def _do_remove(self, key: str) -> bool:
        if key not in self._values:
            return False
        del self._values[key]
        return True

    def _do_clear(self):
        self._values.clear()
