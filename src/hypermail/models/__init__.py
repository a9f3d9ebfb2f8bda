"""Data models for Hypermail.

This module contains Pydantic models for data validation and serialization.
"""

from hypermail.models.document import ConfigDocument, Contact, Draft, SettingField
from hypermail.models.message import OutgoingEmail, RemoteMessage

__all__ = [
    "ConfigDocument",
    "Contact",
    "Draft",
    "OutgoingEmail",
    "RemoteMessage",
    "SettingField",
]
