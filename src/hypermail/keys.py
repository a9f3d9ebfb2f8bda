"""Discrete key events delivered to screens and list models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyEvent:
    """One key press.

    ``name`` is the key's identity: a single character for printable keys
    (``"a"``, ``"/"``), or a symbolic name (``"up"``, ``"return"``,
    ``"escape"``, ``"backspace"``, ``"tab"``, ``"btab"``, ``"space"``).
    ``char`` is the text the key would insert, if any.
    """

    name: str
    char: str | None = None
    ctrl: bool = False

    @classmethod
    def printable(cls, char: str) -> KeyEvent:
        if char == " ":
            return cls("space", " ")
        return cls(char, char)

    @classmethod
    def control(cls, letter: str) -> KeyEvent:
        return cls(letter.lower(), ctrl=True)

    @property
    def is_printable(self) -> bool:
        return not self.ctrl and self.char is not None and len(self.char) == 1

    def is_any(self, *names: str) -> bool:
        return not self.ctrl and self.name in names
