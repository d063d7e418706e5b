"""
prefstore - Main entry point.

Opens the preferences dialog against the current user's settings.
"""

import logging
import sys
from datetime import datetime

from PySide6.QtWidgets import QApplication

from . import __version__
from .config import create_settings
from .ui import PreferencesDialog
from .utils import setup_logging


def main():
    """Main entry point for prefstore."""
    setup_logging(log_level="INFO", log_file=True)
    logger = logging.getLogger(__name__)

    logger.info(f"prefstore v{__version__} starting...")

    app = QApplication(sys.argv)
    app.setApplicationName("prefstore")
    app.setOrganizationName("prefstore")

    context = create_settings()
    settings = context.settings

    if settings.is_first_run:
        logger.info("First run")
        settings.is_first_run = False
    else:
        logger.info(f"Last login: {settings.last_login_date.isoformat(timespec='seconds')}")
    settings.last_login_date = datetime.now()

    dialog = PreferencesDialog(settings)
    dialog.show()

    exit_code = app.exec()

    logger.info("prefstore exiting")
    return exit_code
