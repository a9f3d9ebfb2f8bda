"""Hypermail - a terminal email client for the Resend API.

This package provides a curses interface for reading, composing and
organising email through Resend, with drafts, contacts and read state
kept in a local JSON file.
"""

__version__ = "0.1.0"
__author__ = "Hypermail contributors"

from hypermail.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__", "__author__"]
