"""Curses user interface."""

from .app import HypermailApp

__all__ = ["HypermailApp"]
