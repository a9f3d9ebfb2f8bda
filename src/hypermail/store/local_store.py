"""JSON-backed store for Hypermail's local state.

Every operation re-reads the whole document, applies one change and writes
the whole document back. There is no in-memory cache and no locking; a
single running client is the only expected writer.
"""

from __future__ import annotations

import json
import os
import tempfile
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path

import structlog
from pydantic import ValidationError

from hypermail.exceptions import StoreError
from hypermail.models import ConfigDocument, Contact, Draft, SettingField

logger = structlog.get_logger()


_FieldGetter = Callable[[ConfigDocument], str | None]
_FieldSetter = Callable[[ConfigDocument, str | None], None]


def _set_api_key(doc: ConfigDocument, value: str | None) -> None:
    doc.api_key = value


def _set_default_from(doc: ConfigDocument, value: str | None) -> None:
    doc.default_from = value


def _set_signature(doc: ConfigDocument, value: str | None) -> None:
    doc.signature = value


_FIELD_ACCESSORS: dict[SettingField, tuple[_FieldGetter, _FieldSetter]] = {
    SettingField.API_KEY: (lambda doc: doc.api_key, _set_api_key),
    SettingField.DEFAULT_FROM: (lambda doc: doc.default_from, _set_default_from),
    SettingField.SIGNATURE: (lambda doc: doc.signature, _set_signature),
}


def _new_id(taken: Iterable[str]) -> str:
    """Millisecond timestamp, bumped until it does not collide."""
    used = set(taken)
    candidate = int(time.time() * 1000)
    while str(candidate) in used:
        candidate += 1
    return str(candidate)


class LocalStore:
    """Load/mutate/save access to the config document."""

    def __init__(self, path: Path) -> None:
        """Create a store.

        Args:
            path: Path to the JSON document. It need not exist yet.
        """

        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Location of the JSON document."""
        return self._path

    def load(self) -> ConfigDocument:
        """Read the document, treating a missing or corrupt file as empty."""

        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return ConfigDocument()
        except OSError as exc:
            logger.warning("config_read_failed", path=str(self._path), error=str(exc))
            return ConfigDocument()

        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
            return ConfigDocument.model_validate(data)
        except (ValueError, ValidationError) as exc:
            # json.JSONDecodeError is a ValueError subclass.
            logger.warning("config_corrupt_ignored", path=str(self._path), error=str(exc))
            return ConfigDocument()

    def save(self, doc: ConfigDocument) -> None:
        """Replace the document on disk.

        Raises:
            StoreError: If the directory or file cannot be written.
        """

        content = json.dumps(doc.to_json_dict(), indent=2)
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                fp.write(content)
            os.replace(tmp_name, self._path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("config_save_failed", path=str(self._path), error=str(exc))
            raise StoreError(f"Could not save {self._path}: {exc}") from exc

        logger.debug("config_saved", path=str(self._path))

    # Scalar settings

    def get_field(self, field: SettingField) -> str | None:
        """Return one scalar setting.

        Args:
            field: Which setting to read.

        Returns:
            The stored value, or None if it was never set.
        """
        getter, _ = _FIELD_ACCESSORS[field]
        return getter(self.load())

    def set_field(self, field: SettingField, value: str | None) -> None:
        """Store one scalar setting.

        Args:
            field: Which setting to write.
            value: New value; None clears it.

        Raises:
            StoreError: If the document cannot be saved.
        """
        _, setter = _FIELD_ACCESSORS[field]
        doc = self.load()
        setter(doc, value)
        self.save(doc)
        logger.info("setting_updated", field=field.value)

    def has_api_key(self) -> bool:
        """Whether an API key has been configured."""
        return bool(self.get_field(SettingField.API_KEY))

    # Archived / read ID sets

    def archived_ids(self) -> set[str]:
        """IDs of received messages hidden locally."""
        return set(self.load().archived_email_ids)

    def is_archived(self, email_id: str) -> bool:
        """Whether ``email_id`` has been archived."""
        return email_id in self.load().archived_email_ids

    def archive(self, email_id: str) -> None:
        """Hide a remote message locally. Repeated calls are no-ops."""

        doc = self.load()
        if email_id in doc.archived_email_ids:
            return
        doc.archived_email_ids.append(email_id)
        self.save(doc)
        logger.info("email_archived", email_id=email_id)

    def read_ids(self) -> set[str]:
        """IDs of received messages the user has opened."""
        return set(self.load().read_email_ids)

    def is_read(self, email_id: str) -> bool:
        """Whether ``email_id`` has been marked read."""
        return email_id in self.load().read_email_ids

    def mark_read(self, email_id: str) -> None:
        """Mark one message read. Already-read IDs are no-ops."""
        self.mark_all_read([email_id])

    def mark_all_read(self, email_ids: Iterable[str]) -> None:
        """Mark several messages read.

        The file is only rewritten when at least one ID is new.

        Args:
            email_ids: IDs to mark, in display order.

        Raises:
            StoreError: If the document cannot be saved.
        """
        doc = self.load()
        known = set(doc.read_email_ids)
        added = [i for i in dict.fromkeys(email_ids) if i not in known]
        if not added:
            return
        doc.read_email_ids.extend(added)
        self.save(doc)
        logger.info("emails_marked_read", count=len(added))

    # Drafts

    def list_drafts(self) -> list[Draft]:
        """Return all drafts, oldest first."""
        return self.load().drafts

    def get_draft(self, draft_id: str) -> Draft | None:
        """Return the draft with ``draft_id``, or None."""
        return next((d for d in self.load().drafts if d.id == draft_id), None)

    def save_draft(self, *, to: str = "", subject: str = "", body: str = "") -> Draft:
        """Create a new draft and return it."""

        doc = self.load()
        draft = Draft(
            id=_new_id(d.id for d in doc.drafts),
            to=to,
            subject=subject,
            body=body,
            created_at=datetime.now(timezone.utc).isoformat(),
        )
        doc.drafts.append(draft)
        self.save(doc)
        logger.info("draft_saved", draft_id=draft.id)
        return draft

    def update_draft(
        self,
        draft_id: str,
        *,
        to: str | None = None,
        subject: str | None = None,
        body: str | None = None,
    ) -> Draft | None:
        """Update a draft in place. Returns None if the ID is unknown."""

        doc = self.load()
        for index, draft in enumerate(doc.drafts):
            if draft.id != draft_id:
                continue
            changes = {
                k: v for k, v in {"to": to, "subject": subject, "body": body}.items() if v is not None
            }
            updated = draft.model_copy(update=changes)
            doc.drafts[index] = updated
            self.save(doc)
            logger.info("draft_updated", draft_id=draft_id)
            return updated

        logger.debug("draft_update_missing", draft_id=draft_id)
        return None

    def delete_draft(self, draft_id: str) -> None:
        """Remove a draft. Unknown IDs are ignored."""
        doc = self.load()
        remaining = [d for d in doc.drafts if d.id != draft_id]
        if len(remaining) == len(doc.drafts):
            return
        doc.drafts = remaining
        self.save(doc)
        logger.info("draft_deleted", draft_id=draft_id)

    # Contacts

    def list_contacts(self) -> list[Contact]:
        """Return the address book in insertion order."""
        return self.load().contacts

    def add_contact(self, *, name: str, email: str) -> Contact:
        """Add an address book entry.

        Args:
            name: Display name.
            email: Email address.

        Returns:
            The stored contact with its new ID.

        Raises:
            StoreError: If the document cannot be saved.
        """
        doc = self.load()
        contact = Contact(id=_new_id(c.id for c in doc.contacts), name=name, email=email)
        doc.contacts.append(contact)
        self.save(doc)
        logger.info("contact_added", contact_id=contact.id)
        return contact

    def delete_contact(self, contact_id: str) -> None:
        """Remove a contact. Unknown IDs are ignored."""
        doc = self.load()
        remaining = [c for c in doc.contacts if c.id != contact_id]
        if len(remaining) == len(doc.contacts):
            return
        doc.contacts = remaining
        self.save(doc)
        logger.info("contact_deleted", contact_id=contact_id)
