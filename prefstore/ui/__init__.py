"""User interface components for prefstore."""

from .preferences_dialog import PreferencesDialog

__all__ = ["PreferencesDialog"]
