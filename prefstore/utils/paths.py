"""
Platform-specific directories for prefstore.
"""

import os
from pathlib import Path

APP_DIR_NAME = "prefstore"


def get_config_dir(create: bool = True) -> Path:
    """
    Get platform-specific configuration directory.

    Path:
        Linux/macOS: $XDG_CONFIG_HOME/prefstore (default ~/.config/prefstore)
        Windows: %APPDATA%\\prefstore

    Args:
        create: If True, create the directory when it doesn't exist

    Returns:
        Path to configuration directory
    """
    if os.name == 'nt':  # Windows
        base = os.environ.get('APPDATA', os.path.expanduser('~'))
    else:  # Linux/macOS
        base = os.environ.get('XDG_CONFIG_HOME', os.path.expanduser('~/.config'))

    config_dir = Path(base) / APP_DIR_NAME

    if create:
        config_dir.mkdir(parents=True, exist_ok=True)

    return config_dir


def get_log_dir() -> Path:
    """
    Get platform-specific log directory.

    Returns:
        Path to log directory
    """
    if os.name == 'nt':  # Windows
        base = os.environ.get('LOCALAPPDATA', os.path.expanduser('~'))
    else:  # Linux/macOS
        base = os.environ.get('XDG_CACHE_HOME', os.path.expanduser('~/.cache'))

    return Path(base) / APP_DIR_NAME / 'logs'
