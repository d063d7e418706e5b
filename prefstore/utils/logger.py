"""
Logging configuration for prefstore.

Console output stays terse (``LEVEL: message``); the optional log file
records everything with timestamps and logger names. The settings layer
logs at DEBUG for every stored key, so its packages get their own levels.
"""

import logging
import sys
from datetime import datetime
from typing import Dict, Optional

from .paths import get_log_dir

# Per-package levels applied on top of the root level
DEFAULT_MODULE_LEVELS = {
    "prefstore.config": "INFO",
    "prefstore.storage": "INFO",
    "prefstore.security": "INFO",
}


def _level(name: str) -> int:
    return getattr(logging, str(name).upper(), logging.INFO)


def setup_logging(
    log_level: str = "INFO",
    log_file: bool = True,
    module_levels: Optional[Dict[str, str]] = None,
) -> logging.Logger:
    """
    Configure application logging.

    Args:
        log_level: Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: If True, also log to a timestamped file in the log directory
        module_levels: Logger name to level overrides, merged over
            DEFAULT_MODULE_LEVELS, e.g. {"prefstore.config": "DEBUG"} to trace
            every settings read and write

    Returns:
        Root logger instance
    """
    logger = logging.getLogger()
    logger.setLevel(_level(log_level))

    # Clear any existing handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    levels = dict(DEFAULT_MODULE_LEVELS)
    levels.update(module_levels or {})
    for name, level in levels.items():
        logging.getLogger(name).setLevel(_level(level))

    if log_file:
        log_dir = get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file_path = log_dir / f"prefstore_{timestamp}.log"

        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file_path}")

    return logger
