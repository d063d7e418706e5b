"""
Persistent key-value backing stores for prefstore.

- MemoryBackingStore: dict in process memory
- JsonFileBackingStore: single JSON document in the user's config directory
- QtSettingsBackingStore: Qt's per-user QSettings container
"""

from .base import ABSENT, BackingStore, is_valid_key, validate_key
from .json_file import JsonFileBackingStore
from .memory import MemoryBackingStore
from .qt_settings import QtSettingsBackingStore

__all__ = [
    "ABSENT",
    "BackingStore",
    "is_valid_key",
    "validate_key",
    "JsonFileBackingStore",
    "MemoryBackingStore",
    "QtSettingsBackingStore",
]
