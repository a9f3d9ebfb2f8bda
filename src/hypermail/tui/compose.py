"""Compose screen for new messages, replies, forwards and drafts."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from hypermail.compose import (
    FIELD_ORDER,
    ComposeContext,
    ComposeField,
    ComposeForm,
    ComposeMode,
    split_recipients,
)
from hypermail.exceptions import HypermailError, StoreError, ValidationError
from hypermail.keys import KeyEvent
from hypermail.models import Contact, Draft, OutgoingEmail
from hypermail.tui.canvas import Canvas
from hypermail.tui.contacts import ContactsScreen
from hypermail.tui.screen import Screen, draw_header, edit_text

if TYPE_CHECKING:
    from hypermail.tui.app import HypermailApp

logger = structlog.get_logger()

FIELD_LABELS: dict[ComposeField, str] = {
    ComposeField.FROM: "From",
    ComposeField.TO: "To  ",
    ComposeField.SUBJECT: "Subj",
}

TITLES: dict[ComposeMode, str] = {
    ComposeMode.NEW: "Compose Email",
    ComposeMode.REPLY: "Reply to Email",
    ComposeMode.FORWARD: "Forward Email",
}

SENT_MESSAGES: dict[ComposeMode, str] = {
    ComposeMode.NEW: "Email sent successfully!",
    ComposeMode.REPLY: "Reply sent successfully!",
    ComposeMode.FORWARD: "Email forwarded successfully!",
}


class SendStatus(str, Enum):
    COMPOSING = "composing"
    SENDING = "sending"
    SENT = "sent"
    ERROR = "error"


class ComposeScreen(Screen):
    def __init__(
        self,
        app: HypermailApp,
        *,
        context: ComposeContext | None = None,
        draft: Draft | None = None,
    ) -> None:
        super().__init__(app)
        doc = app.store.load()
        if draft is not None:
            self.form = ComposeForm.from_draft(draft, default_from=doc.default_from)
        else:
            self.form = ComposeForm.new(
                default_from=doc.default_from, signature=doc.signature, context=context
            )
        self.field = self.form.initial_field
        self.status = SendStatus.COMPOSING
        self.error = ""
        self.notice = ""

    def handle_key(self, key: KeyEvent) -> None:
        if self.status is SendStatus.SENDING:
            return
        if self.status is SendStatus.SENT:
            if key.is_any("escape", "q"):
                self.app.back()
            return
        if self.status is SendStatus.ERROR:
            if key.is_any("escape", "q"):
                self.app.back()
            elif key.is_any("return"):
                self.status = SendStatus.COMPOSING
            return

        self.notice = ""
        if key.is_any("escape"):
            self.app.back()
        elif key.is_any("tab", "down"):
            self._move(1)
        elif key.is_any("btab", "up"):
            self._move(-1)
        elif key.ctrl and key.name == "s":
            self.send()
        elif key.ctrl and key.name == "d":
            self.save_draft()
        elif key.ctrl and key.name == "o":
            self.pick_contact()
        elif key.is_any("return") and self.field is not ComposeField.BODY:
            self._move(1)
        else:
            multiline = self.field is ComposeField.BODY
            edited = edit_text(self.form.get(self.field), key, multiline=multiline)
            if edited is not None:
                self.form.set(self.field, edited)

    def _move(self, delta: int) -> None:
        index = FIELD_ORDER.index(self.field)
        self.field = FIELD_ORDER[(index + delta) % len(FIELD_ORDER)]

    def send(self) -> None:
        try:
            email = self.form.to_email()
        except ValidationError as exc:
            self.error = str(exc)
            return
        self.error = ""
        self.status = SendStatus.SENDING
        self.app.spawn(self.deliver(email))

    async def deliver(self, email: OutgoingEmail) -> None:
        try:
            await self.app.client().send_email(email)
        except HypermailError as exc:
            self.error = str(exc)
            self.status = SendStatus.ERROR
            return

        self.status = SendStatus.SENT
        if self.form.draft_id is not None:
            try:
                self.app.store.delete_draft(self.form.draft_id)
            except StoreError as exc:
                logger.warning("sent_draft_not_removed", draft_id=self.form.draft_id, error=str(exc))
                self.error = f"Sent, but could not remove draft: {exc}"

    def save_draft(self) -> None:
        store = self.app.store
        fields = {"to": self.form.to, "subject": self.form.subject, "body": self.form.body}
        try:
            draft = None
            if self.form.draft_id is not None:
                draft = store.update_draft(self.form.draft_id, **fields)
            if draft is None:
                draft = store.save_draft(**fields)
        except StoreError as exc:
            self.error = f"Could not save draft: {exc}"
            return
        self.form.draft_id = draft.id
        self.error = ""
        self.notice = "Draft saved"

    def pick_contact(self) -> None:
        self.app.show(
            ContactsScreen(self.app, on_select=self.add_recipient, on_back=lambda: self.app.show(self))
        )

    def add_recipient(self, contact: Contact) -> None:
        recipients = split_recipients(self.form.to)
        if contact.email not in recipients:
            recipients.append(contact.email)
        self.form.to = ", ".join(recipients)
        self.app.show(self)

    def draw(self, canvas: Canvas) -> None:
        if self.status is SendStatus.SENT:
            canvas.write(SENT_MESSAGES[self.form.mode], "ok")
            if self.error:
                canvas.write(self.error, "error")
            canvas.skip()
            canvas.write("Press Esc or Q to go back", "hint")
            return
        if self.status is SendStatus.ERROR:
            canvas.write("Failed to send email", "error")
            canvas.write(self.error, "error")
            canvas.skip()
            canvas.write("Press Enter to keep editing, or Esc to discard", "hint")
            return

        draw_header(
            canvas,
            TITLES[self.form.mode],
            "Tab/Arrows: navigate | Ctrl+S: send | Ctrl+D: save draft | Ctrl+O: contacts | Esc: back",
        )
        for field, label in FIELD_LABELS.items():
            active = field is self.field
            canvas.write_parts(
                [
                    (f"{label}: ", "selected" if active else "normal"),
                    (self.form.get(field), "normal"),
                    ("_" if active else "", "hint"),
                ]
            )
        canvas.skip()

        body_active = self.field is ComposeField.BODY
        canvas.write("Body:", "selected" if body_active else "normal")
        canvas.write(self.form.body + ("_" if body_active else ""), indent=2)

        if self.error:
            canvas.skip()
            canvas.write(self.error, "error")
        if self.notice:
            canvas.skip()
            canvas.write(self.notice, "ok")
        if self.status is SendStatus.SENDING:
            canvas.skip()
            canvas.write("Sending...", "warn")
