"""
prefstore - Typed, persistent settings for desktop applications.
"""

__version__ = "1.0.0"
