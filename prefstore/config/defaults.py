"""
Default configuration for prefstore.

These values decide where settings live when the caller passes no
overrides to create_settings().
"""

DEFAULT_CONFIG = {
    # QSettings identity (registry path / config file name)
    "organization": "prefstore",
    "application": "prefstore",

    # One of: "qsettings", "json", "memory"
    "backend": "qsettings",

    # Files in the user's config directory
    "json_filename": "settings.json",
    "key_filename": "user.key",
}
