"""Translate raw curses input into ``KeyEvent``s."""

from __future__ import annotations

import curses

from hypermail.keys import KeyEvent

_SPECIAL_KEYS: dict[int, str] = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_ENTER: "return",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_BTAB: "btab",
    curses.KEY_DC: "delete",
    curses.KEY_RESIZE: "resize",
}

_CONTROL_CHARS: dict[str, str] = {
    "\x1b": "escape",
    "\n": "return",
    "\r": "return",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
}


def decode_key(raw: int | str) -> KeyEvent | None:
    """Decode one ``get_wch()`` result. Returns None for keys we ignore."""

    if isinstance(raw, int):
        name = _SPECIAL_KEYS.get(raw)
        if name is not None:
            return KeyEvent(name)
        if 0 <= raw < 256:
            return decode_key(chr(raw))
        return None

    if len(raw) != 1:
        return None
    if raw in _CONTROL_CHARS:
        return KeyEvent(_CONTROL_CHARS[raw])
    code = ord(raw)
    if 1 <= code <= 26:
        # Ctrl+A .. Ctrl+Z arrive as 0x01 .. 0x1a.
        return KeyEvent.control(chr(code + 96))
    if raw.isprintable():
        return KeyEvent.printable(raw)
    return None
