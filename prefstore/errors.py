"""
Exception hierarchy for prefstore.

Every error raised by the settings layer derives from SettingsError so
callers can catch the whole family at one seam.
"""


class SettingsError(Exception):
    """Base class for all settings errors."""
    pass


class InvalidKeyError(SettingsError, ValueError):
    """Raised when a settings key is empty or whitespace-only."""
    pass


class CryptoError(SettingsError):
    """Raised when a value cannot be encrypted or decrypted."""
    pass


class StorageError(SettingsError):
    """Raised when the backing store rejects an operation."""
    pass


class ConversionError(SettingsError, TypeError):
    """Raised when a value cannot be converted to the requested kind."""
    pass
