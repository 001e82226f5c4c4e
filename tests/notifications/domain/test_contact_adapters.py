"""Tests for the fake contact service and the contact service registry."""

import pytest
from notifications.channel import get_contact_service, reset_contact_service, set_contact_service
from notifications.channel.contact_port import ContactServiceError
from notifications.channel.fake_contacts import FakeContactService
from notifications.channel.http_contacts import HttpContactService

INFO = {
    "name": {"first": "Maria", "last": "Silva"},
    "emails": [{"email": "maria@example.com", "tag": "WORK", "primary": True}],
}


class TestFakeContactService:
    def setup_method(self):
        self.service = FakeContactService()

    def test_create_contact(self):
        contact_id = self.service.create_or_update_contact(INFO)
        assert contact_id.startswith("contact-")
        assert self.service.contacts[contact_id] == INFO

    def test_duplicates_allowed_by_default(self):
        first = self.service.create_or_update_contact(INFO)
        second = self.service.create_or_update_contact(INFO)
        assert first != second

    def test_duplicates_rejected_when_disallowed(self):
        self.service.create_or_update_contact(INFO)
        with pytest.raises(ContactServiceError):
            self.service.create_or_update_contact(INFO, allow_duplicates=False)

    def test_send_templated_email(self):
        contact_id = self.service.create_or_update_contact(INFO)
        result = self.service.send_templated_email("ticket_delivery", contact_id, {"DOWNLOAD_URL": "u", "SITE_URL": "s"})
        assert result["status"] == "sent"
        sent = self.service.sent_emails[0]
        assert sent["to"] == "maria@example.com"
        assert "Hi Maria" in sent["body"]

    def test_send_to_unknown_contact(self):
        with pytest.raises(ContactServiceError):
            self.service.send_templated_email("ticket_delivery", "contact-missing", {})

    def test_send_failure(self):
        contact_id = self.service.create_or_update_contact(INFO)
        self.service.configure(should_succeed=False, failure_reason="Mailbox full")
        result = self.service.send_templated_email("ticket_delivery", contact_id, {})
        assert result == {"message_id": None, "status": "failed", "error": "Mailbox full"}
        assert self.service.sent_emails == []

    def test_no_contact_id(self):
        self.service.configure(return_contact_id=False)
        assert self.service.create_or_update_contact(INFO) is None

    def test_reset(self):
        self.service.create_or_update_contact(INFO)
        self.service.configure(should_succeed=False)
        self.service.reset()
        assert self.service.contacts == {}
        assert self.service.should_succeed is True


class TestRegistry:
    def test_defaults_to_fake(self, monkeypatch):
        monkeypatch.delenv("CONTACT_SERVICE_ADAPTER", raising=False)
        reset_contact_service()
        assert isinstance(get_contact_service(), FakeContactService)

    def test_http_adapter(self, monkeypatch):
        monkeypatch.setenv("CONTACT_SERVICE_ADAPTER", "http")
        reset_contact_service()
        assert isinstance(get_contact_service(), HttpContactService)

    def test_override(self):
        service = FakeContactService()
        set_contact_service(service)
        assert get_contact_service() is service

    def test_unknown_adapter(self, monkeypatch):
        monkeypatch.setenv("CONTACT_SERVICE_ADAPTER", "fax")
        reset_contact_service()
        with pytest.raises(ValueError):
            get_contact_service()
