"""Shared list behavior: search, pagination, selection and key handling."""

from .filters import contact_matches, draft_matches, message_matches
from .model import PAGE_SIZE, CommandKind, ListCommand, ListMode, ListModel

__all__ = [
    "PAGE_SIZE",
    "CommandKind",
    "ListCommand",
    "ListMode",
    "ListModel",
    "contact_matches",
    "draft_matches",
    "message_matches",
]
