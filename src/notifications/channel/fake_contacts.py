"""Fake contact service — records contacts and emails for testing."""

from uuid import uuid4

from notifications.channel.contact_port import ContactServiceError, ContactServicePort
from notifications.templates import get_template


class FakeContactService(ContactServicePort):
    """Contact service that keeps contacts and sent emails in memory."""

    def __init__(self):
        self.contacts: dict[str, dict] = {}
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.return_contact_id = True
        self.raise_on_contact: Exception | None = None

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Email delivery failed",
        return_contact_id: bool = True,
        raise_on_contact: Exception | None = None,
    ):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.return_contact_id = return_contact_id
        self.raise_on_contact = raise_on_contact

    def create_or_update_contact(self, info: dict, allow_duplicates: bool = True) -> str | None:
        if self.raise_on_contact is not None:
            raise self.raise_on_contact
        if not self.return_contact_id:
            return None

        email = info["emails"][0]["email"]
        if not allow_duplicates:
            for contact_id, contact in self.contacts.items():
                if contact["emails"][0]["email"] == email:
                    raise ContactServiceError(f"Contact already exists: {contact_id}")

        contact_id = f"contact-{uuid4().hex[:12]}"
        self.contacts[contact_id] = info
        return contact_id

    def send_templated_email(self, template_id: str, contact_id: str, variables: dict) -> dict:
        if not self.should_succeed:
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
            }

        contact = self.contacts.get(contact_id)
        if contact is None:
            raise ContactServiceError(f"Unknown contact: {contact_id}")

        rendered = get_template(template_id).render(
            {**variables, "CONTACT_NAME": contact["name"]["first"]}
        )
        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {
                "message_id": message_id,
                "template_id": template_id,
                "contact_id": contact_id,
                "to": contact["emails"][0]["email"],
                "variables": dict(variables),
                "subject": rendered["subject"],
                "body": rendered["body"],
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        """Clear contacts and sent emails (useful between tests)."""
        self.contacts.clear()
        self.sent_emails.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.return_contact_id = True
        self.raise_on_contact = None
