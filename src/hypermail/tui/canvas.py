"""Line-oriented drawing on a curses window."""

from __future__ import annotations

import curses
from typing import Any

STYLE_NAMES = ("normal", "title", "hint", "accent", "selected", "error", "ok", "warn", "unread")


def fit(text: str, width: int) -> str:
    if width <= 0:
        return ""
    text = text.replace("\t", "    ")
    if len(text) <= width:
        return text
    if width <= 3:
        return text[:width]
    return text[: width - 3] + "..."


def pad(text: str, width: int) -> str:
    """Cut or space-pad ``text`` to exactly ``width`` characters."""
    return text[:width].ljust(width)


class Canvas:
    """Writes successive rows top-down, keeping the last row for status."""

    def __init__(self, window: Any, styles: dict[str, int] | None = None) -> None:
        self._window = window
        self._styles = styles or {}
        self.height, self.width = window.getmaxyx()
        self.row = 0

    @property
    def rows_left(self) -> int:
        return max(0, self.height - 1 - self.row)

    def write(self, text: str = "", style: str = "normal", *, indent: int = 0) -> None:
        for line in text.split("\n"):
            if self.rows_left <= 0:
                return
            self._put(self.row, indent, line, style)
            self.row += 1

    def write_parts(self, parts: list[tuple[str, str]]) -> None:
        """One row made of differently styled segments."""
        if self.rows_left <= 0:
            return
        x = 0
        for text, style in parts:
            if x >= self.width:
                break
            self._put(self.row, x, text, style)
            x += len(text)
        self.row += 1

    def skip(self, lines: int = 1) -> None:
        self.row = min(self.height - 1, self.row + lines)

    def status(self, text: str, style: str = "hint") -> None:
        self._put(self.height - 1, 0, text, style)

    def _put(self, y: int, x: int, text: str, style: str) -> None:
        if y < 0 or y >= self.height or x >= self.width:
            return
        try:
            self._window.addstr(y, x, fit(text, self.width - x), self._styles.get(style, 0))
        except curses.error:
            # Writing the bottom-right cell raises even though it succeeds.
            pass
