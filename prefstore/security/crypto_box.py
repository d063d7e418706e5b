"""
At-rest encryption for individual settings values.

CryptoBox turns UTF-8 text into Base64 text protected with a secret that
belongs to the current user, and back:

- Windows: DPAPI in CurrentUser scope (DpapiProtector)
- Linux/macOS: Fernet with a key file in the user's config directory,
  readable only by its owner (FernetProtector)

Values protected by one user cannot be read by another; that case raises
CryptoError like any other corrupt input.
"""

import base64
import binascii
import logging
import os
import sys
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from ..errors import CryptoError
from ..utils.paths import get_config_dir

logger = logging.getLogger(__name__)

DEFAULT_KEY_FILENAME = "user.key"


class Protector(ABC):
    """Applies and removes user-scoped protection on raw bytes."""

    name = "unknown"

    @abstractmethod
    def protect(self, data: bytes) -> bytes:
        """Return the protected form of ``data``."""

    @abstractmethod
    def unprotect(self, data: bytes) -> bytes:
        """Return the original bytes of protected ``data``."""


class FernetProtector(Protector):
    """
    Protector backed by a symmetric Fernet key stored on disk.

    The key file is created on first use with mode 0600, so the key is
    scoped to the user that owns the config directory.
    """

    name = "fernet"

    def __init__(self, key_path: Optional[Path] = None):
        self.key_path = Path(key_path) if key_path else get_config_dir() / DEFAULT_KEY_FILENAME
        self._fernet: Optional[Fernet] = None
        self._lock = threading.Lock()

    def protect(self, data: bytes) -> bytes:
        token = self._get_fernet().encrypt(data)
        # Fernet tokens are urlsafe Base64; keep the raw bytes so the
        # outer encoding is applied exactly once.
        return base64.urlsafe_b64decode(token)

    def unprotect(self, data: bytes) -> bytes:
        return self._get_fernet().decrypt(base64.urlsafe_b64encode(data))

    def _get_fernet(self) -> Fernet:
        with self._lock:
            if self._fernet is None:
                self._fernet = Fernet(self._load_or_create_key())
            return self._fernet

    def _load_or_create_key(self) -> bytes:
        path = self.key_path
        try:
            if path.exists():
                return path.read_bytes().strip()

            path.parent.mkdir(parents=True, exist_ok=True)
            return self._create_key(path)
        except OSError as e:
            raise CryptoError(f"Cannot access user key file {path}: {e}") from e

    @staticmethod
    def _create_key(path: Path) -> bytes:
        """
        Write a new key to ``path`` unless another writer got there first.

        The key is written to a private temp file and hard-linked into place,
        which fails if the key file already exists. The loser reads the
        winner's key, so every caller ends up with the same one.
        """
        key = Fernet.generate_key()
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=path.name + ".", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(key)
            if os.name != "nt":
                os.chmod(tmp_name, 0o600)
            try:
                os.link(tmp_name, path)
            except FileExistsError:
                return path.read_bytes().strip()
        finally:
            os.unlink(tmp_name)

        logger.info(f"Created user key file {path}")
        return key


class DpapiProtector(Protector):
    """Protector backed by the Windows Data Protection API (CurrentUser scope)."""

    name = "dpapi"

    _CRYPTPROTECT_UI_FORBIDDEN = 0x01

    def __init__(self):
        if not sys.platform.startswith("win"):
            raise CryptoError("DPAPI is only available on Windows")

        import ctypes
        from ctypes import wintypes

        class DATA_BLOB(ctypes.Structure):
            _fields_ = [
                ("cbData", wintypes.DWORD),
                ("pbData", ctypes.POINTER(ctypes.c_char)),
            ]

        self._ctypes = ctypes
        self._blob_type = DATA_BLOB
        self._crypt32 = ctypes.windll.crypt32
        self._kernel32 = ctypes.windll.kernel32

    def protect(self, data: bytes) -> bytes:
        return self._call(self._crypt32.CryptProtectData, data, "CryptProtectData")

    def unprotect(self, data: bytes) -> bytes:
        return self._call(self._crypt32.CryptUnprotectData, data, "CryptUnprotectData")

    def _call(self, func, data: bytes, func_name: str) -> bytes:
        ctypes = self._ctypes
        buffer = ctypes.create_string_buffer(data, len(data))
        blob_in = self._blob_type(len(data), ctypes.cast(buffer, ctypes.POINTER(ctypes.c_char)))
        blob_out = self._blob_type()

        ok = func(
            ctypes.byref(blob_in), None, None, None, None,
            self._CRYPTPROTECT_UI_FORBIDDEN, ctypes.byref(blob_out),
        )
        if not ok:
            raise OSError(f"{func_name} failed (error {ctypes.GetLastError()})")

        try:
            return ctypes.string_at(blob_out.pbData, blob_out.cbData)
        finally:
            self._kernel32.LocalFree(blob_out.pbData)


def default_protector(key_path: Optional[Path] = None) -> Protector:
    """
    Pick the user-scoped protector for this platform.

    Args:
        key_path: Key file location for the Fernet protector

    Returns:
        DpapiProtector on Windows, FernetProtector elsewhere
    """
    if sys.platform.startswith("win"):
        return DpapiProtector()
    return FernetProtector(key_path)


class CryptoBox:
    """
    Encrypts and decrypts settings text for the current user.

    Example:
        >>> box = CryptoBox()
        >>> token = box.encrypt("alice@example.com")
        >>> box.decrypt(token)
        'alice@example.com'
    """

    def __init__(self, protector: Optional[Protector] = None):
        self._protector = protector

    @property
    def protector(self) -> Protector:
        """The protector in use, created on first access."""
        if self._protector is None:
            self._protector = default_protector()
        return self._protector

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt text for the current user.

        Args:
            plaintext: Text to protect

        Returns:
            Base64 encoded ciphertext

        Raises:
            CryptoError: If the platform protection fails
        """
        if not isinstance(plaintext, str):
            raise CryptoError(f"Can only encrypt text, got {type(plaintext).__name__}")

        try:
            protected = self.protector.protect(plaintext.encode("utf-8"))
        except CryptoError:
            raise
        except (OSError, ValueError) as e:
            raise CryptoError(f"Encryption failed: {e}") from e

        return base64.b64encode(protected).decode("ascii")

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt text produced by encrypt() for the same user.

        Args:
            ciphertext: Base64 encoded ciphertext

        Returns:
            The original text

        Raises:
            CryptoError: If the input is not valid Base64, is corrupt, or was
                encrypted by a different user
        """
        if not isinstance(ciphertext, str):
            raise CryptoError(f"Can only decrypt text, got {type(ciphertext).__name__}")

        try:
            protected = base64.b64decode(ciphertext.encode("ascii"), validate=True)
        except (binascii.Error, UnicodeEncodeError) as e:
            raise CryptoError(f"Ciphertext is not valid Base64: {e}") from e

        try:
            plain = self.protector.unprotect(protected)
        except CryptoError:
            raise
        except InvalidToken as e:
            raise CryptoError("Ciphertext is corrupt or belongs to another user") from e
        except (OSError, ValueError) as e:
            raise CryptoError(f"Decryption failed: {e}") from e

        try:
            return plain.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CryptoError(f"Decrypted value is not UTF-8 text: {e}") from e
