#!/usr/bin/env python3
"""
prefstore - Main entry point.

Launches the preferences dialog.
"""

import sys

from prefstore.main import main


if __name__ == "__main__":
    sys.exit(main())
