"""Messages exchanged with the Resend API.

Remote messages are never persisted; the local store only keeps their IDs.
"""

from __future__ import annotations

import html.parser
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _HTMLTextExtractor(html.parser.HTMLParser):
    """Simple HTML tag stripper."""

    def __init__(self) -> None:
        super().__init__()
        self._parts: list[str] = []

    def handle_data(self, data: str) -> None:
        self._parts.append(data)

    def get_text(self) -> str:
        return "".join(self._parts)


def strip_html(html_text: str) -> str:
    """Strip HTML tags and return plain text."""
    extractor = _HTMLTextExtractor()
    extractor.feed(html_text)
    return extractor.get_text()


class RemoteMessage(BaseModel):
    """A sent or received message as returned by Resend.

    List endpoints omit the body; detail endpoints include ``text`` and/or
    ``html``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(description="Resend message ID")
    sender: str = Field(default="", alias="from", description="From header")
    to: list[str] = Field(default_factory=list, description="Recipient addresses")
    subject: str = Field(default="", description="Subject header")
    text: str | None = Field(default=None, description="Plain text body")
    html: str | None = Field(default=None, description="HTML body")
    created_at: str = Field(default="", description="Creation timestamp as sent by the API")

    @field_validator("to", mode="before")
    @classmethod
    def _coerce_recipients(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("sender", "subject", "created_at", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def body(self) -> str:
        """Best-effort plain text body."""
        if self.text:
            return self.text
        if self.html:
            return strip_html(self.html).strip()
        return ""

    @property
    def created_display(self) -> str:
        """Creation time in local time, or the raw value if unparseable."""
        if not self.created_at:
            return ""
        raw = self.created_at.replace(" ", "T", 1)
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(raw)
        except ValueError:
            return self.created_at
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone()
        return parsed.strftime("%Y-%m-%d %H:%M")


class OutgoingEmail(BaseModel):
    """Payload for ``POST /emails``."""

    model_config = ConfigDict(populate_by_name=True)

    sender: str = Field(alias="from", min_length=1)
    to: list[str] = Field(min_length=1)
    subject: str = Field(min_length=1)
    text: str | None = None
    html: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
