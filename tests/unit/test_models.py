"""Unit tests for data models."""

import pytest
from pydantic import ValidationError

from hypermail.models import ConfigDocument, Contact, Draft, OutgoingEmail, RemoteMessage
from hypermail.models.message import strip_html


class TestConfigDocument:
    """Test suite for ConfigDocument model."""

    def test_empty_document_defaults(self) -> None:
        doc = ConfigDocument()

        assert doc.api_key is None
        assert doc.archived_email_ids == []
        assert doc.read_email_ids == []
        assert doc.drafts == []
        assert doc.contacts == []

    def test_populates_by_field_name_or_alias(self) -> None:
        by_name = ConfigDocument(api_key="re_1", default_from="me@example.com")
        by_alias = ConfigDocument.model_validate({"apiKey": "re_1", "defaultFrom": "me@example.com"})

        assert by_name == by_alias

    def test_nested_records(self) -> None:
        doc = ConfigDocument.model_validate(
            {
                "drafts": [{"id": "1", "subject": "Hi", "created_at": "2024-01-01T00:00:00+00:00"}],
                "contacts": [{"id": "2", "name": "Bob", "email": "bob@example.com"}],
            }
        )

        assert doc.drafts == [
            Draft(id="1", subject="Hi", created_at="2024-01-01T00:00:00+00:00")
        ]
        assert doc.contacts == [Contact(id="2", name="Bob", email="bob@example.com")]

    def test_extra_keys_are_written_back(self) -> None:
        doc = ConfigDocument.model_validate({"apiKey": "re_1", "lastView": "inbox"})

        assert doc.to_json_dict()["lastView"] == "inbox"

    def test_wrong_type_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ConfigDocument.model_validate({"readEmails": "m1"})


class TestRemoteMessage:
    """Test suite for RemoteMessage model."""

    def test_from_api_payload(self, sample_message_payload: dict) -> None:
        message = RemoteMessage.model_validate(sample_message_payload)

        assert message.id == "m1"
        assert message.sender == "alice@example.com"
        assert message.to == ["me@example.com"]
        assert message.body == "Are you free at noon?\nThe usual place."

    def test_loose_fields_are_normalized(self) -> None:
        message = RemoteMessage.model_validate(
            {"id": "x", "from": None, "to": "bob@example.com", "subject": None}
        )

        assert message.sender == ""
        assert message.to == ["bob@example.com"]
        assert message.subject == ""
        assert message.body == ""

    def test_body_falls_back_to_stripped_html(self) -> None:
        message = RemoteMessage(id="x", html="<p>Hello <b>there</b></p>")

        assert message.body == "Hello there"

    def test_created_display_parses_iso(self) -> None:
        message = RemoteMessage(id="x", created_at="2024-03-01 10:00:00.123456")

        assert message.created_display == "2024-03-01 10:00"

    def test_created_display_keeps_unparseable_value(self) -> None:
        message = RemoteMessage(id="x", created_at="yesterday")

        assert message.created_display == "yesterday"

    def test_id_is_required(self) -> None:
        with pytest.raises(ValidationError):
            RemoteMessage.model_validate({"subject": "no id"})


class TestOutgoingEmail:
    """Test suite for OutgoingEmail model."""

    def test_payload_uses_api_field_names(self) -> None:
        email = OutgoingEmail(sender="me@example.com", to=["a@example.com"], subject="Hi", text="Body")

        assert email.to_payload() == {
            "from": "me@example.com",
            "to": ["a@example.com"],
            "subject": "Hi",
            "text": "Body",
        }

    @pytest.mark.parametrize(
        "fields",
        [
            {"sender": "", "to": ["a@example.com"], "subject": "Hi"},
            {"sender": "me@example.com", "to": [], "subject": "Hi"},
            {"sender": "me@example.com", "to": ["a@example.com"], "subject": ""},
        ],
    )
    def test_required_fields(self, fields: dict) -> None:
        with pytest.raises(ValidationError):
            OutgoingEmail(**fields)


def test_strip_html_keeps_text_only() -> None:
    assert strip_html("<div>One<br>Two</div>") == "OneTwo"
