"""The persisted configuration/state document.

Field aliases match the on-disk JSON keys, so files written by earlier
Hypermail releases keep loading. Unknown keys are kept as model extras and
written back unchanged.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SettingField(str, Enum):
    """User-editable scalar settings stored in the document."""

    API_KEY = "api_key"
    DEFAULT_FROM = "default_from"
    SIGNATURE = "signature"


class Draft(BaseModel):
    """A locally composed, unsent message."""

    id: str = Field(description="Unique draft ID")
    to: str = Field(default="", description="Comma-separated recipients as typed")
    subject: str = Field(default="", description="Subject line")
    body: str = Field(default="", description="Message body")
    created_at: str = Field(description="Creation time, ISO 8601")


class Contact(BaseModel):
    """An address book entry."""

    id: str = Field(description="Unique contact ID")
    name: str = Field(description="Display name")
    email: str = Field(description="Email address")


_SCALAR_FIELDS = ("api_key", "default_from", "signature")


class ConfigDocument(BaseModel):
    """Everything Hypermail persists between runs."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    api_key: str | None = Field(default=None, alias="apiKey")
    default_from: str | None = Field(default=None, alias="defaultFrom")
    signature: str | None = Field(default=None)

    # The provider has no delete and no read flag, so both are shadowed here.
    archived_email_ids: list[str] = Field(default_factory=list, alias="archivedEmails")
    read_email_ids: list[str] = Field(default_factory=list, alias="readEmails")

    drafts: list[Draft] = Field(default_factory=list)
    contacts: list[Contact] = Field(default_factory=list)

    @field_validator("archived_email_ids", "read_email_ids")
    @classmethod
    def _dedupe(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    def to_json_dict(self) -> dict:
        """Serialize with on-disk key names, dropping unset scalars.

        Extra keys are written back as loaded, ``null`` values included.
        """
        unset = {name for name in _SCALAR_FIELDS if getattr(self, name) is None}
        return self.model_dump(mode="json", by_alias=True, exclude=unset)
