"""
Construction of the settings stack.

create_settings() builds a BackingStore, a TypedSettingsStore and the
ApplicationSettings facade and hands them back as one SettingsContext.
The application owns that context and passes it to the UI explicitly.

get_settings() is the process-wide variant: the context is built lazily on
first call, exactly once even if several threads race for it, and every
later call returns the same instance.
"""

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ..security.crypto_box import CryptoBox, default_protector
from ..storage.base import BackingStore
from ..storage.json_file import JsonFileBackingStore
from ..storage.memory import MemoryBackingStore
from ..storage.qt_settings import QtSettingsBackingStore
from ..utils.paths import get_config_dir
from .defaults import DEFAULT_CONFIG
from .facade import ApplicationSettings
from .settings_store import TypedSettingsStore

logger = logging.getLogger(__name__)

BACKENDS = ("qsettings", "json", "memory")


@dataclass
class SettingsContext:
    """The settings stack of one application instance."""
    store: TypedSettingsStore
    settings: ApplicationSettings

    @property
    def backing(self) -> BackingStore:
        return self.store.backing


def create_backing_store(
    backend: Optional[str] = None,
    path: Optional[Path] = None,
    config: Optional[Dict[str, Any]] = None,
) -> BackingStore:
    """
    Create a backing store by name.

    Args:
        backend: "qsettings", "json" or "memory" (default from config)
        path: File to store settings in; the platform location when omitted
        config: Overrides for DEFAULT_CONFIG

    Returns:
        New BackingStore

    Raises:
        ValueError: If the backend name is unknown
    """
    cfg = dict(DEFAULT_CONFIG)
    cfg.update(config or {})
    backend = (backend or cfg["backend"]).lower()

    if backend == "qsettings":
        return QtSettingsBackingStore(cfg["organization"], cfg["application"], path=path)
    if backend == "json":
        return JsonFileBackingStore(path or get_config_dir() / cfg["json_filename"])
    if backend == "memory":
        return MemoryBackingStore()

    raise ValueError(f"Unknown settings backend '{backend}' (expected one of {', '.join(BACKENDS)})")


def create_settings(
    backend: Optional[str] = None,
    path: Optional[Path] = None,
    backing: Optional[BackingStore] = None,
    crypto: Optional[CryptoBox] = None,
    config: Optional[Dict[str, Any]] = None,
) -> SettingsContext:
    """
    Build a complete settings stack.

    Args:
        backend: Backend name, ignored when ``backing`` is given
        path: Settings file for the "json" and "qsettings" backends
        backing: Ready-made backing store to use
        crypto: CryptoBox for encrypted keys; keyed to the current user by default
        config: Overrides for DEFAULT_CONFIG

    Returns:
        SettingsContext holding the typed store and the facade
    """
    cfg = dict(DEFAULT_CONFIG)
    cfg.update(config or {})

    if backing is None:
        backing = create_backing_store(backend, path, cfg)

    if crypto is None:
        key_dir = Path(path).parent if path else get_config_dir()
        crypto = CryptoBox(default_protector(key_dir / cfg["key_filename"]))

    store = TypedSettingsStore(backing, crypto)
    logger.info(f"Settings backed by {backing.name} store")
    return SettingsContext(store=store, settings=ApplicationSettings(store))


_instance: Optional[SettingsContext] = None
_instance_lock = threading.Lock()


def get_settings() -> SettingsContext:
    """
    Return the process-wide settings context, building it on first use.
    """
    global _instance

    if _instance is None:
        with _instance_lock:
            if _instance is None:
                _instance = create_settings()
    return _instance


def reset_settings():
    """Drop the process-wide context so the next get_settings() rebuilds it."""
    global _instance

    with _instance_lock:
        _instance = None
