"""Contact service port — contacts and templated (triggered) emails.

Ticket emails are not composed here: the contact service owns the template
and renders it for a contact with the variables it is given.
"""

from abc import ABC, abstractmethod


class ContactServiceError(Exception):
    """The contact service could not complete the request."""


class ContactServicePort(ABC):
    """Abstract interface for contact service adapters."""

    @abstractmethod
    def create_or_update_contact(self, info: dict, allow_duplicates: bool = True) -> str | None:
        """Create a contact (or append to an existing one).

        ``info`` has the shape::

            {"name": {"first": ..., "last": ...},
             "emails": [{"email": ..., "tag": "WORK", "primary": True}]}

        Returns:
            The contact id, or None when the service returned none.
        """
        ...

    @abstractmethod
    def send_templated_email(self, template_id: str, contact_id: str, variables: dict) -> dict:
        """Send a template to a contact.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
