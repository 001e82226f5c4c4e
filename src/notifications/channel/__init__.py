"""Contact service registry.

Provides singleton access to the contact service adapter. Uses the fake
adapter by default; CONTACT_SERVICE_ADAPTER=http selects the HTTP adapter
against CONTACT_SERVICE_URL.
"""

from shared import settings
from shared.secrets import get_secret_store

from notifications.channel.contact_port import ContactServicePort

_contact_service: ContactServicePort | None = None


def get_contact_service() -> ContactServicePort:
    """Return the configured contact service (singleton)."""
    global _contact_service
    if _contact_service is None:
        adapter = settings.contact_service_adapter()
        if adapter == "fake":
            from notifications.channel.fake_contacts import FakeContactService

            _contact_service = FakeContactService()
        elif adapter == "http":
            from notifications.channel.http_contacts import HttpContactService

            _contact_service = HttpContactService(
                base_url=settings.contact_service_url(),
                api_key=get_secret_store().get_secret("contact_service_api_key"),
                timeout=settings.contact_service_timeout(),
            )
        else:
            raise ValueError(f"Unknown contact service adapter: {adapter}")
    return _contact_service


def set_contact_service(service: ContactServicePort) -> None:
    """Override the active contact service (useful for tests)."""
    global _contact_service
    _contact_service = service


def reset_contact_service() -> None:
    """Clear the cached adapter (useful in tests)."""
    global _contact_service
    _contact_service = None
