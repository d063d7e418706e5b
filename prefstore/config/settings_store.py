"""
Typed settings store.

TypedSettingsStore layers typed get/set on top of an untyped BackingStore:
- default-value fallback for missing keys
- optional per-call encryption through CryptoBox
- explicit conversion of raw stored values to the requested ValueKind

Reads never raise for a bad stored value: the error is logged and the
caller's default comes back, so a settings glitch cannot break a render
path. Writes always raise, so a save action can report failure. Use
read() instead of get() to tell "absent" apart from "present but
unreadable".
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from ..errors import ConversionError, SettingsError, StorageError
from ..security.crypto_box import CryptoBox
from ..storage.base import ABSENT, BackingStore, is_valid_key, validate_key
from .values import ValueKind, coerce, kind_of, normalize, to_text

logger = logging.getLogger(__name__)


class ReadStatus(Enum):
    """How a read produced its value."""
    FOUND = "found"
    ABSENT = "absent"
    DEGRADED = "degraded"  # default returned because of an error


@dataclass
class SettingResult:
    """Outcome of TypedSettingsStore.read()."""
    value: Any
    status: ReadStatus
    error: Optional[Exception] = None

    @property
    def found(self) -> bool:
        return self.status is ReadStatus.FOUND

    @property
    def degraded(self) -> bool:
        return self.status is ReadStatus.DEGRADED


class TypedSettingsStore:
    """
    Typed get/set over a BackingStore.

    The encryption flag is not stored with the value. A key written with
    encrypted=True must be read with encrypted=True; reading it without
    the flag returns the ciphertext text.

    Example:
        >>> store = TypedSettingsStore(MemoryBackingStore())
        >>> store.set("Ui.IsDarkMode", True)
        >>> store.get("Ui.IsDarkMode", False)
        True
    """

    def __init__(self, backing: BackingStore, crypto: Optional[CryptoBox] = None):
        self.backing = backing
        self._crypto = crypto

    @property
    def crypto(self) -> CryptoBox:
        """CryptoBox used for encrypted keys, created on first use."""
        if self._crypto is None:
            self._crypto = CryptoBox()
        return self._crypto

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any, encrypted: bool = False):
        """
        Store a value.

        Setting None removes the entry, so the next read returns the default.

        Args:
            key: Settings key, e.g. "User.Email"
            value: str, bool, int, float or datetime
            encrypted: If True, store the value's text encrypted

        Raises:
            InvalidKeyError: If key is empty or whitespace-only
            ConversionError: If the value's type is not supported
            CryptoError: If encryption fails
            StorageError: If the backing store rejects the write
        """
        self._set(key, value, encrypted)

    def set_text(self, key: str, value: Optional[str], encrypted: bool = False):
        self._set(key, value, encrypted, ValueKind.TEXT)

    def set_bool(self, key: str, value: bool, encrypted: bool = False):
        self._set(key, value, encrypted, ValueKind.BOOL)

    def set_number(self, key: str, value: float, encrypted: bool = False):
        self._set(key, value, encrypted, ValueKind.NUMBER)

    def set_timestamp(self, key: str, value: datetime, encrypted: bool = False):
        self._set(key, value, encrypted, ValueKind.TIMESTAMP)

    def _set(self, key: str, value: Any, encrypted: bool, expected: Optional[ValueKind] = None):
        validate_key(key)

        try:
            if value is None:
                self.backing.remove(key)
                logger.debug(f"Cleared setting '{key}'")
                return

            kind = kind_of(value)
            if expected is not None and kind is not expected:
                raise ConversionError(
                    f"Expected a {expected.value} value for '{key}', got {kind.value}"
                )

            stored = self.crypto.encrypt(to_text(value)) if encrypted else normalize(value)
            self.backing.set_raw(key, stored)
            logger.debug(f"Stored setting '{key}' (encrypted={encrypted})")

        except (SettingsError, OSError) as e:
            logger.error(f"Error setting value for key '{key}': {e}")
            raise

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def read(
        self,
        key: str,
        default: Any = None,
        encrypted: bool = False,
        kind: Optional[ValueKind] = None,
    ) -> SettingResult:
        """
        Look up a value and report how it was obtained.

        A default of an unsupported type, with no explicit kind, degrades:
        the default comes back with a DEGRADED status.

        Args:
            key: Settings key
            default: Value returned when the key is absent or unreadable
            encrypted: If True, decrypt the stored text before converting
            kind: Requested kind; inferred from default when omitted
                (TEXT when default is None)

        Returns:
            SettingResult with the value and a FOUND, ABSENT or DEGRADED status

        Raises:
            InvalidKeyError: If key is empty or whitespace-only
        """
        validate_key(key)

        try:
            kind = self._resolve_kind(kind, default)
            raw = self.backing.get_raw(key)
            if raw is ABSENT:
                return SettingResult(default, ReadStatus.ABSENT)

            if encrypted:
                raw = self.crypto.decrypt(raw)

            return SettingResult(coerce(raw, kind), ReadStatus.FOUND)

        except (SettingsError, OSError) as e:
            logger.warning(f"Error getting value for key '{key}': {e}")
            return SettingResult(default, ReadStatus.DEGRADED, e)

    def get(
        self,
        key: str,
        default: Any = None,
        encrypted: bool = False,
        kind: Optional[ValueKind] = None,
    ) -> Any:
        """
        Return the stored value, or ``default`` if it is absent or unreadable.

        Raises:
            InvalidKeyError: If key is empty or whitespace-only
        """
        return self.read(key, default, encrypted, kind).value

    def get_text(self, key: str, default: Optional[str] = None, encrypted: bool = False) -> Optional[str]:
        return self.get(key, default, encrypted, ValueKind.TEXT)

    def get_bool(self, key: str, default: bool = False, encrypted: bool = False) -> bool:
        return self.get(key, default, encrypted, ValueKind.BOOL)

    def get_number(self, key: str, default: float = 0.0, encrypted: bool = False) -> float:
        return self.get(key, default, encrypted, ValueKind.NUMBER)

    def get_timestamp(
        self, key: str, default: Optional[datetime] = None, encrypted: bool = False
    ) -> Optional[datetime]:
        return self.get(key, default, encrypted, ValueKind.TIMESTAMP)

    @staticmethod
    def _resolve_kind(kind: Optional[ValueKind], default: Any) -> ValueKind:
        if kind is not None:
            return kind
        if default is None:
            return ValueKind.TEXT
        return kind_of(default)

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def remove(self, key: str) -> bool:
        """
        Remove a single setting.

        Returns:
            True if the entry existed, False if the key was empty or absent

        Raises:
            StorageError: If the removal could not be persisted
        """
        if not is_valid_key(key):
            return False

        try:
            return self.backing.remove(key)
        except StorageError as e:
            logger.error(f"Error removing key '{key}': {e}")
            raise

    def clear(self) -> bool:
        """
        Remove every setting.

        Returns:
            True on success, False if the backing store failed
        """
        try:
            return self.backing.clear()
        except (StorageError, OSError) as e:
            logger.error(f"Error clearing settings: {e}")
            return False
