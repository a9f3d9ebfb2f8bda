"""Drafts screen."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hypermail.exceptions import StoreError
from hypermail.keys import KeyEvent
from hypermail.lists import CommandKind, ListModel, draft_matches
from hypermail.models import Draft
from hypermail.tui.canvas import Canvas, pad
from hypermail.tui.compose import ComposeScreen
from hypermail.tui.screen import Screen, draw_confirm, draw_count, draw_header, draw_rows, draw_search

if TYPE_CHECKING:
    from hypermail.tui.app import HypermailApp


class DraftsScreen(Screen):
    def __init__(self, app: HypermailApp) -> None:
        super().__init__(app)
        self.model: ListModel[Draft] = ListModel(draft_matches)
        self.error = ""

    def on_enter(self) -> None:
        self.model.set_items(self.app.store.list_drafts())

    def handle_key(self, key: KeyEvent) -> None:
        command = self.model.handle_key(key)
        if command is None:
            return
        if command.kind is CommandKind.OPEN and command.item is not None:
            self.app.show(ComposeScreen(self.app, draft=command.item))
        elif command.kind is CommandKind.DELETE_CONFIRMED and command.item is not None:
            self.delete(command.item)
        elif command.kind is CommandKind.LEAVE:
            self.app.back()

    def delete(self, draft: Draft) -> None:
        try:
            self.app.store.delete_draft(draft.id)
        except StoreError as exc:
            self.error = str(exc)
            return
        self.error = ""
        self.model.set_items(self.app.store.list_drafts())

    def draw(self, canvas: Canvas) -> None:
        pending = self.model.pending_delete
        if pending is not None:
            draw_confirm(
                canvas,
                "Delete Draft?",
                [f"To: {pending.to or '(no recipient)'}", f"Subject: {pending.subject or '(no subject)'}"],
            )
            return

        draw_header(canvas, "Drafts", "j/k: navigate | n/p: page | /: search | Enter: edit | d: delete | Esc: back")
        draw_search(canvas, self.model)
        if not self.model.items:
            canvas.write("No drafts saved.", "warn")
        elif not self.model.filtered:
            canvas.write(f'No drafts match "{self.model.query}"', "warn")
        else:
            draw_rows(canvas, self.model, self._render_row)
            draw_count(canvas, self.model, "draft")

        if self.error:
            canvas.skip()
            canvas.write(self.error, "error")

    @staticmethod
    def _render_row(draft: Draft, selected: bool) -> list[tuple[str, str]]:
        return [
            (pad(draft.to or "(no recipient)", 20), "ok"),
            (" | ", "hint"),
            ((draft.subject or "(no subject)")[:35], "selected" if selected else "normal"),
        ]
