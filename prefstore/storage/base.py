"""
Backing store interface.

A backing store is a persistent, process-local key-value container with
string keys and loosely typed scalar values. It knows nothing about types
or encryption; the typed layer above recovers both at the call site.
"""

import threading
from abc import ABC, abstractmethod
from typing import Any

from ..errors import InvalidKeyError


class _Absent:
    """Sentinel for a key that was never set or has been removed."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


def validate_key(key: str) -> str:
    """
    Check that a settings key is usable.

    Args:
        key: Settings key, e.g. "User.Username"

    Returns:
        The key, unchanged

    Raises:
        InvalidKeyError: If key is not a string, empty or whitespace-only
    """
    if not isinstance(key, str) or not key.strip():
        raise InvalidKeyError("Key cannot be null or empty")
    return key


def is_valid_key(key: str) -> bool:
    """Return True if ``key`` would pass validate_key()."""
    return isinstance(key, str) and bool(key.strip())


class BackingStore(ABC):
    """
    Persistent key-value container.

    Subclasses implement the _do_* hooks; the public methods validate keys
    and hold a single lock so concurrent callers never observe a partial
    update. Every mutation must be persisted before it returns.
    """

    name = "abstract"

    def __init__(self):
        self._lock = threading.RLock()

    def set_raw(self, key: str, value: Any):
        """
        Insert or overwrite a value.

        Raises:
            InvalidKeyError: If key is empty or whitespace-only
            StorageError: If the value could not be persisted
        """
        validate_key(key)
        with self._lock:
            self._do_set(key, value)

    def get_raw(self, key: str) -> Any:
        """
        Return the stored value, or ABSENT if the key is not present.

        Raises:
            InvalidKeyError: If key is empty or whitespace-only
            StorageError: If the store could not be read
        """
        validate_key(key)
        with self._lock:
            return self._do_get(key)

    def contains(self, key: str) -> bool:
        """Return True if a value is stored under ``key``."""
        if not is_valid_key(key):
            return False
        return self.get_raw(key) is not ABSENT

    def remove(self, key: str) -> bool:
        """
        Remove a single entry.

        Returns:
            True if an entry existed and was removed, False if the key was
            empty or absent

        Raises:
            StorageError: If the removal could not be persisted
        """
        if not is_valid_key(key):
            return False
        with self._lock:
            return self._do_remove(key)

    def clear(self) -> bool:
        """
        Remove all entries.

        Returns:
            True on success

        Raises:
            StorageError: If the store could not be cleared
        """
        with self._lock:
            self._do_clear()
        return True

    @abstractmethod
    def keys(self) -> list:
        """Return the stored keys."""

    @abstractmethod
    def _do_set(self, key: str, value: Any):
        """Store ``value`` under ``key`` and persist it."""

    @abstractmethod
    def _do_get(self, key: str) -> Any:
        """Return the value for ``key`` or ABSENT."""

    @abstractmethod
    def _do_remove(self, key: str) -> bool:
        """Remove ``key``; return False if it was not present."""

    @abstractmethod
    def _do_clear(self):
        """Remove every entry and persist the empty store."""
