"""
Utility functions for prefstore.
"""

from .logger import setup_logging
from .paths import get_config_dir, get_log_dir

__all__ = ["setup_logging", "get_config_dir", "get_log_dir"]
