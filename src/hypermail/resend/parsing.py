"""Helpers for parsing Resend API responses into internal models."""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from hypermail.exceptions import ResendAPIError
from hypermail.models import RemoteMessage

logger = structlog.get_logger()


def message_from_payload(payload: dict[str, Any]) -> RemoteMessage:
    """Convert a single-message response to RemoteMessage.

    Raises:
        ResendAPIError: If the payload lacks an ID or has the wrong shape.
    """

    try:
        return RemoteMessage.model_validate(payload)
    except ValidationError as exc:
        raise ResendAPIError(f"Malformed message from Resend: {exc}") from exc


def messages_from_list_payload(payload: dict[str, Any]) -> list[RemoteMessage]:
    """Convert a ``{"object": "list", "data": [...]}`` response.

    Entries that cannot be parsed are skipped rather than failing the list.
    """

    entries = payload.get("data") or []
    if not isinstance(entries, list):
        return []

    messages: list[RemoteMessage] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            messages.append(RemoteMessage.model_validate(entry))
        except ValidationError as exc:
            logger.warning("skipping_malformed_message", id=entry.get("id"), error=str(exc))
    return messages
