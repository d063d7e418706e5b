"""
Configuration management for prefstore.

This module provides the typed settings store, the application settings
facade and the functions that assemble them.
"""

from .defaults import DEFAULT_CONFIG
from .facade import KEYS, ApplicationSettings, SettingsKeys
from .registry import (
    SettingsContext,
    create_backing_store,
    create_settings,
    get_settings,
    reset_settings,
)
from .settings_store import ReadStatus, SettingResult, TypedSettingsStore
from .values import ValueKind, coerce, kind_of, to_text

__all__ = [
    "DEFAULT_CONFIG",
    "KEYS",
    "ApplicationSettings",
    "SettingsKeys",
    "SettingsContext",
    "create_backing_store",
    "create_settings",
    "get_settings",
    "reset_settings",
    "ReadStatus",
    "SettingResult",
    "TypedSettingsStore",
    "ValueKind",
    "coerce",
    "kind_of",
    "to_text",
]
