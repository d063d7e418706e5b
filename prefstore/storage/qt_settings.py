"""
QSettings backing store.

Uses Qt's per-user settings container, which maps to the platform's native
location:
- Windows: Registry (HKEY_CURRENT_USER\\Software\\<org>\\<app>)
- macOS: ~/Library/Preferences/
- Linux: ~/.config/<org>/<app>.conf

The INI based formats hand booleans and numbers back as text; the typed
layer converts them.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from PySide6.QtCore import QSettings

from ..errors import StorageError
from .base import ABSENT, BackingStore

logger = logging.getLogger(__name__)


class QtSettingsBackingStore(BackingStore):
    """
    Backing store on top of QSettings.

    Every mutation is followed by sync() so values reach the medium before
    the call returns.
    """

    name = "qsettings"

    def __init__(
        self,
        organization: str = "prefstore",
        application: str = "prefstore",
        path: Optional[Path] = None,
    ):
        """
        Args:
            organization: Organization name for QSettings
            application: Application name for QSettings
            path: If given, store in this INI file instead of the native location
        """
        super().__init__()
        if path is not None:
            self._qs = QSettings(str(path), QSettings.Format.IniFormat)
        else:
            self._qs = QSettings(
                QSettings.Format.NativeFormat,
                QSettings.Scope.UserScope,
                organization,
                application,
            )
        logger.debug(f"QSettings backing store at {self._qs.fileName()}")

    @property
    def location(self) -> str:
        """File name or registry path used by QSettings."""
        return self._qs.fileName()

    def keys(self) -> list:
        with self._lock:
            return list(self._qs.allKeys())

    def _do_set(self, key: str, value: Any):
        if isinstance(value, datetime):
            value = value.isoformat()
        self._qs.setValue(key, value)
        self._sync(f"set '{key}'")

    def _do_get(self, key: str) -> Any:
        if not self._qs.contains(key):
            return ABSENT
        return self._qs.value(key)

    def _do_remove(self, key: str) -> bool:
        if not self._qs.contains(key):
            return False
        self._qs.remove(key)
        self._sync(f"remove '{key}'")
        return True

    def _do_clear(self):
        self._qs.clear()
        self._sync("clear")

    def _sync(self, operation: str):
        self._qs.sync()
        status = self._qs.status()
        if status != QSettings.Status.NoError:
            raise StorageError(f"QSettings could not {operation}: {status}")
