"""Building new, reply and forward messages.

The compose screen edits a ``ComposeForm``; this module decides what the
form starts with and turns it into an ``OutgoingEmail``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import ValidationError as PydanticValidationError

from hypermail.exceptions import ValidationError
from hypermail.models import Draft, OutgoingEmail, RemoteMessage


class ComposeMode(str, Enum):
    NEW = "new"
    REPLY = "reply"
    FORWARD = "forward"


class ComposeField(str, Enum):
    FROM = "from"
    TO = "to"
    SUBJECT = "subject"
    BODY = "body"


FIELD_ORDER: tuple[ComposeField, ...] = (
    ComposeField.FROM,
    ComposeField.TO,
    ComposeField.SUBJECT,
    ComposeField.BODY,
)


@dataclass(frozen=True)
class ComposeContext:
    """What a reply or forward is based on."""

    mode: ComposeMode
    subject: str
    to: str | None = None
    original_body: str | None = None
    original_from: str | None = None
    original_to: str | None = None
    original_date: str | None = None

    @classmethod
    def reply_to(cls, message: RemoteMessage) -> ComposeContext:
        return cls(
            mode=ComposeMode.REPLY,
            to=message.sender,
            subject=message.subject,
            original_body=message.body,
            original_from=message.sender,
            original_date=message.created_display,
        )

    @classmethod
    def forward(cls, message: RemoteMessage) -> ComposeContext:
        return cls(
            mode=ComposeMode.FORWARD,
            subject=message.subject,
            original_body=message.body,
            original_from=message.sender,
            original_to=", ".join(message.to),
            original_date=message.created_display,
        )


def format_subject(context: ComposeContext) -> str:
    subject = context.subject
    if context.mode is ComposeMode.REPLY:
        return subject if subject.startswith("Re: ") else f"Re: {subject}"
    if context.mode is ComposeMode.FORWARD:
        return subject if subject.startswith("Fwd: ") else f"Fwd: {subject}"
    return subject


def _reply_block(context: ComposeContext) -> str:
    parts = ["\n\n---\n"]
    if context.original_from:
        parts.append(f"On {context.original_date or 'unknown date'}, {context.original_from} wrote:\n")
    if context.original_body:
        parts.append("\n".join(f"> {line}" for line in context.original_body.split("\n")))
    return "".join(parts)


def _forward_block(context: ComposeContext) -> str:
    parts = ["\n\n---------- Forwarded message ----------\n"]
    if context.original_from:
        parts.append(f"From: {context.original_from}\n")
    if context.original_to:
        parts.append(f"To: {context.original_to}\n")
    if context.original_date:
        parts.append(f"Date: {context.original_date}\n")
    parts.append(f"Subject: {context.subject}\n\n")
    if context.original_body:
        parts.append(context.original_body)
    return "".join(parts)


def format_body(context: ComposeContext | None, signature: str | None = None) -> str:
    """Initial body: signature block, then any quoted original."""

    body = f"\n\n--\n{signature}" if signature else ""
    if context is None:
        return body
    if context.mode is ComposeMode.REPLY:
        return body + _reply_block(context)
    if context.mode is ComposeMode.FORWARD:
        return body + _forward_block(context)
    return body


def split_recipients(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class ComposeForm:
    """Editable state of one message being written."""

    sender: str = ""
    to: str = ""
    subject: str = ""
    body: str = ""
    mode: ComposeMode = ComposeMode.NEW
    draft_id: str | None = None

    @classmethod
    def new(
        cls,
        *,
        default_from: str | None = None,
        signature: str | None = None,
        context: ComposeContext | None = None,
    ) -> ComposeForm:
        return cls(
            sender=default_from or "",
            to=(context.to if context else None) or "",
            subject=format_subject(context) if context else "",
            body=format_body(context, signature),
            mode=context.mode if context else ComposeMode.NEW,
        )

    @classmethod
    def from_draft(cls, draft: Draft, *, default_from: str | None = None) -> ComposeForm:
        return cls(
            sender=default_from or "",
            to=draft.to,
            subject=draft.subject,
            body=draft.body,
            draft_id=draft.id,
        )

    @property
    def initial_field(self) -> ComposeField:
        # Forwards have no recipient yet; everything else starts in the body.
        return ComposeField.TO if self.mode is ComposeMode.FORWARD else ComposeField.BODY

    def get(self, field: ComposeField) -> str:
        return getattr(self, _FORM_ATTRS[field])

    def set(self, field: ComposeField, value: str) -> None:
        setattr(self, _FORM_ATTRS[field], value)

    def to_email(self) -> OutgoingEmail:
        """Validate the form and build the message to send.

        Raises:
            ValidationError: If from, to or subject is missing.
        """

        if not self.sender or not split_recipients(self.to) or not self.subject:
            raise ValidationError("From, To, and Subject are required")
        try:
            return OutgoingEmail(
                sender=self.sender,
                to=split_recipients(self.to),
                subject=self.subject,
                text=self.body,
            )
        except PydanticValidationError as exc:
            raise ValidationError(str(exc)) from exc


_FORM_ATTRS: dict[ComposeField, str] = {
    ComposeField.FROM: "sender",
    ComposeField.TO: "to",
    ComposeField.SUBJECT: "subject",
    ComposeField.BODY: "body",
}
