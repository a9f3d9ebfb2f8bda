"""Inbox and sent-mail screens.

Both fetch from Resend in the background and share list/detail handling.
The inbox adds local read tracking and local archiving, since the API has
neither.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from hypermail.compose import ComposeContext
from hypermail.exceptions import HypermailError, StoreError
from hypermail.keys import KeyEvent
from hypermail.lists import CommandKind, ListCommand, ListModel, message_matches
from hypermail.models import RemoteMessage
from hypermail.tui.canvas import Canvas, pad
from hypermail.tui.compose import ComposeScreen
from hypermail.tui.screen import Screen, draw_confirm, draw_count, draw_header, draw_rows, draw_search

if TYPE_CHECKING:
    from hypermail.tui.app import HypermailApp

logger = structlog.get_logger()


class MessageListScreen(Screen):
    """List of remote messages with a detail view."""

    title = "Messages"
    list_hint = "j/k: navigate | n/p: page | /: search | Enter: view | r: refresh | Esc: back"
    detail_hint = "Esc: back"
    empty_text = "No emails yet."
    allow_delete = False

    def __init__(self, app: HypermailApp) -> None:
        super().__init__(app)
        self.model: ListModel[RemoteMessage] = ListModel(
            message_matches, allow_delete=self.allow_delete
        )
        self.detail: RemoteMessage | None = None
        self.loading_detail = False
        self.error = ""

    async def load(self) -> list[RemoteMessage]:
        raise NotImplementedError

    async def fetch(self, email_id: str) -> RemoteMessage:
        raise NotImplementedError

    def on_enter(self) -> None:
        if not self.model.items:
            self.refresh()

    def refresh(self) -> None:
        self.error = ""
        self.app.spawn(self.model.refresh(self.load))

    def open(self, item: RemoteMessage) -> None:
        self.loading_detail = True
        self.error = ""
        self.app.spawn(self.open_detail(item))

    async def open_detail(self, item: RemoteMessage) -> None:
        try:
            message = await self.fetch(item.id)
        except HypermailError as exc:
            self.error = str(exc)
            return
        finally:
            self.loading_detail = False
        self.detail = message
        self.on_opened(message)

    def on_opened(self, message: RemoteMessage) -> None:
        pass

    def delete(self, item: RemoteMessage) -> None:
        pass

    def handle_key(self, key: KeyEvent) -> None:
        if self.model.pending_delete is not None:
            self._dispatch(self.model.handle_key(key))
        elif self.detail is not None:
            self.handle_detail_key(key)
        else:
            self._dispatch(self.model.handle_key(key))

    def _dispatch(self, command: ListCommand[RemoteMessage] | None) -> None:
        if command is None:
            return
        if command.kind is CommandKind.OPEN and command.item is not None:
            self.open(command.item)
        elif command.kind is CommandKind.DELETE_CONFIRMED and command.item is not None:
            self.delete(command.item)
        elif command.kind is CommandKind.LEAVE:
            self.app.back()
        elif command.kind is CommandKind.KEY and command.key is not None:
            self.handle_list_key(command.key)

    def handle_list_key(self, key: KeyEvent) -> None:
        if key.is_any("r"):
            self.refresh()

    def handle_detail_key(self, key: KeyEvent) -> None:
        if key.is_any("escape", "q", "backspace"):
            self.detail = None

    def is_unread(self, message: RemoteMessage) -> bool:
        return False

    # Drawing

    def draw(self, canvas: Canvas) -> None:
        if self.model.pending_delete is not None:
            self.draw_confirm(canvas, self.model.pending_delete)
        elif self.detail is not None:
            self.draw_detail(canvas, self.detail)
        else:
            self.draw_list(canvas)

        if self.error:
            canvas.skip()
            canvas.write(self.error, "error")

    def draw_confirm(self, canvas: Canvas, message: RemoteMessage) -> None:
        draw_confirm(canvas, "Delete Email?", [f"From: {message.sender}", f"Subject: {message.subject}"])

    def draw_detail(self, canvas: Canvas, message: RemoteMessage) -> None:
        draw_header(canvas, "Email Detail", self.detail_hint)
        canvas.write_parts([("From: ", "hint"), (message.sender, "normal")])
        canvas.write_parts([("To: ", "hint"), (", ".join(message.to), "normal")])
        canvas.write_parts([("Subject: ", "hint"), (message.subject, "selected")])
        canvas.write_parts([("Date: ", "hint"), (message.created_display, "normal")])
        canvas.skip()
        canvas.write("--- Body ---", "hint")
        canvas.skip()
        canvas.write(message.body or "(No text content)")

    def draw_list(self, canvas: Canvas) -> None:
        draw_header(canvas, self.title, self.list_hint)
        draw_search(canvas, self.model)

        if self.model.error:
            canvas.write(self.model.error, "error")
            canvas.skip()

        if self.model.loading and not self.model.items:
            canvas.write("Loading emails...", "warn")
            return

        if not self.model.items:
            canvas.write(self.empty_text, "warn")
        elif not self.model.filtered:
            canvas.write(f'No emails match "{self.model.query}"', "warn")
        else:
            draw_rows(canvas, self.model, self._render_row)
            draw_count(canvas, self.model, "email", self.count_suffix())

        if self.model.loading:
            canvas.skip()
            canvas.write("Refreshing...", "warn")
        if self.loading_detail:
            canvas.skip()
            canvas.write("Loading email...", "warn")

    def count_suffix(self) -> str:
        return ""

    def _render_row(self, message: RemoteMessage, selected: bool) -> list[tuple[str, str]]:
        unread = self.is_unread(message)
        emphasis = "selected" if selected else ("unread" if unread else "normal")
        return [
            ("* " if unread else "  ", "unread"),
            (pad(self.row_party(message), 18), "accent"),
            (" | ", "hint"),
            (message.subject[:40], emphasis),
        ]

    def row_party(self, message: RemoteMessage) -> str:
        return message.sender


class InboxScreen(MessageListScreen):
    title = "Inbox"
    list_hint = (
        "j/k: navigate | n/p: page | /: search | Enter: view | d: delete | "
        "a: mark all read | r: refresh | Esc: back"
    )
    detail_hint = "r: reply | f: forward | d: delete | Esc: back"
    empty_text = "No emails received yet. Configure a receiving domain at resend.com"
    allow_delete = True

    def __init__(self, app: HypermailApp) -> None:
        super().__init__(app)
        self.read_ids: set[str] = app.store.read_ids()

    async def load(self) -> list[RemoteMessage]:
        messages = await self.app.client().list_received_emails()
        archived = self.app.store.archived_ids()
        return [m for m in messages if m.id not in archived]

    async def fetch(self, email_id: str) -> RemoteMessage:
        return await self.app.client().get_received_email(email_id)

    def is_unread(self, message: RemoteMessage) -> bool:
        return message.id not in self.read_ids

    def on_opened(self, message: RemoteMessage) -> None:
        if message.id in self.read_ids:
            return
        try:
            self.app.store.mark_read(message.id)
        except StoreError as exc:
            logger.warning("mark_read_failed", email_id=message.id, error=str(exc))
            self.error = str(exc)
            return
        self.read_ids.add(message.id)

    def mark_all_read(self) -> None:
        ids = [m.id for m in self.model.filtered]
        try:
            self.app.store.mark_all_read(ids)
        except StoreError as exc:
            self.error = str(exc)
            return
        self.read_ids.update(ids)

    def delete(self, item: RemoteMessage) -> None:
        try:
            self.app.store.archive(item.id)
        except StoreError as exc:
            self.error = str(exc)
            return
        self.model.remove(item)
        self.detail = None

    def handle_list_key(self, key: KeyEvent) -> None:
        if key.is_any("a"):
            self.mark_all_read()
        else:
            super().handle_list_key(key)

    def handle_detail_key(self, key: KeyEvent) -> None:
        detail = self.detail
        if detail is None:
            return
        if key.is_any("r"):
            self.app.show(ComposeScreen(self.app, context=ComposeContext.reply_to(detail)))
        elif key.is_any("f"):
            self.app.show(ComposeScreen(self.app, context=ComposeContext.forward(detail)))
        elif key.is_any("d"):
            listed = next((m for m in self.model.items if m.id == detail.id), detail)
            self.model.request_delete(listed)
        else:
            super().handle_detail_key(key)

    def draw_confirm(self, canvas: Canvas, message: RemoteMessage) -> None:
        draw_confirm(
            canvas,
            "Delete Email?",
            [f"From: {message.sender}", f"Subject: {message.subject}"],
            note="This will archive the email locally (Resend API doesn't support deletion).",
        )

    def count_suffix(self) -> str:
        unread = sum(1 for m in self.model.filtered if self.is_unread(m))
        return f" ({unread} unread)" if unread else ""


class SentScreen(MessageListScreen):
    title = "Sent"
    empty_text = "No emails sent yet."

    async def load(self) -> list[RemoteMessage]:
        return await self.app.client().list_sent_emails()

    async def fetch(self, email_id: str) -> RemoteMessage:
        return await self.app.client().get_sent_email(email_id)

    def row_party(self, message: RemoteMessage) -> str:
        return ", ".join(message.to)
