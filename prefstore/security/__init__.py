"""
Security module for prefstore.

This module provides user-scoped encryption of settings values at rest.
"""

from .crypto_box import CryptoBox, DpapiProtector, FernetProtector, Protector, default_protector

__all__ = ["CryptoBox", "DpapiProtector", "FernetProtector", "Protector", "default_protector"]
