"""Base class for screens and drawing helpers shared by list screens."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, TypeVar

from hypermail.keys import KeyEvent
from hypermail.lists import ListModel
from hypermail.tui.canvas import Canvas

if TYPE_CHECKING:
    from hypermail.tui.app import HypermailApp

T = TypeVar("T")


class Screen:
    """One view of the application.

    A screen turns key events into state changes and draws that state. It
    reaches storage, the remote client and view switching through ``app``.
    """

    def __init__(self, app: HypermailApp) -> None:
        self.app = app

    def on_enter(self) -> None:
        """Called each time the screen becomes the active one."""

    def handle_key(self, key: KeyEvent) -> None:
        raise NotImplementedError

    def draw(self, canvas: Canvas) -> None:
        raise NotImplementedError


def draw_header(canvas: Canvas, title: str, hint: str, *, title_style: str = "title") -> None:
    canvas.write(title, title_style)
    if hint:
        canvas.write(hint, "hint")
    canvas.skip()


def draw_search(canvas: Canvas, model: ListModel) -> None:
    if not (model.searching or model.query):
        return
    cursor = "_" if model.searching else ""
    canvas.write_parts([("Search: ", "selected"), (model.query + cursor, "normal")])
    canvas.skip()


def draw_rows(
    canvas: Canvas,
    model: ListModel[T],
    render: Callable[[T, bool], list[tuple[str, str]]],
) -> None:
    """Draw the visible window; ``render(item, selected)`` returns segments."""

    for index, item in enumerate(model.visible):
        selected = index == model.selection
        marker = ("> " if selected else "  ", "selected" if selected else "normal")
        canvas.write_parts([marker, *render(item, selected)])


def draw_count(canvas: Canvas, model: ListModel, noun: str, extra: str = "") -> None:
    shown = len(model.filtered)
    total = len(model.items)
    text = f"{shown}{f' of {total}' if model.query else ''} {noun}{'' if shown == 1 else 's'}"
    text += extra
    if model.page_count > 1:
        text += f" | Page {model.page + 1}/{model.page_count}"
    canvas.skip()
    canvas.write(text, "hint")


def draw_confirm(canvas: Canvas, title: str, lines: list[str], note: str = "") -> None:
    canvas.write(title, "error")
    canvas.skip()
    for line in lines:
        canvas.write(line)
    if note:
        canvas.skip()
        canvas.write(note, "warn")
    canvas.skip()
    canvas.write_parts(
        [("Press ", "normal"), ("y", "ok"), (" to confirm or ", "normal"), ("n", "error"), (" to cancel", "normal")]
    )


def edit_text(value: str, key: KeyEvent, *, multiline: bool = False) -> str | None:
    """Apply an editing key to ``value``. Returns None if ``key`` is not an edit."""

    if key.is_any("backspace"):
        return value[:-1]
    if multiline and key.is_any("return"):
        return value + "\n"
    if key.is_printable:
        return value + (key.char or "")
    return None
