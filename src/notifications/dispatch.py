"""Ticket notification dispatch — contact creation plus templated email.

The recipient is checked before any call to the contact service. Every
failure comes back as a DispatchResult; nothing here raises.
"""

import re
from dataclasses import dataclass, field

import structlog

from shared import settings
from shared.errors import ErrorCode

from notifications.channel import get_contact_service
from notifications.channel.contact_port import ContactServicePort

logger = structlog.get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class DispatchReceipt:
    contact_id: str
    message_id: str | None = None


@dataclass(frozen=True)
class DispatchResult:
    success: bool
    receipt: DispatchReceipt | None = None
    error_code: ErrorCode | None = None
    message: str | None = None
    details: dict = field(default_factory=dict)


def split_name(name: str) -> tuple[str, str]:
    """First token, then everything after it."""
    parts = name.strip().split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def build_contact_info(name: str, email: str) -> dict:
    first, last = split_name(name)
    return {
        "name": {"first": first, "last": last},
        "emails": [{"email": email, "tag": "WORK", "primary": True}],
    }


class NotificationDispatcher:
    """Sends the ticket delivery email to a buyer."""

    def __init__(
        self,
        contact_service: ContactServicePort | None = None,
        template_id: str | None = None,
        site_url: str | None = None,
    ):
        self.contact_service = contact_service or get_contact_service()
        self.template_id = template_id or settings.ticket_email_template_id()
        self.site_url = site_url if site_url is not None else settings.site_url()

    def dispatch(self, name: str | None, email: str | None, artifact_url: str) -> DispatchResult:
        if not name or not name.strip() or not email:
            return DispatchResult(
                success=False,
                error_code=ErrorCode.INVALID_RECIPIENT,
                message="Recipient name and email are required",
            )
        if not EMAIL_PATTERN.fullmatch(email):
            return DispatchResult(
                success=False,
                error_code=ErrorCode.INVALID_RECIPIENT,
                message="Invalid email format",
                details={"email": email},
            )

        try:
            contact_id = self.contact_service.create_or_update_contact(
                build_contact_info(name, email), allow_duplicates=True
            )
            if not contact_id:
                logger.warning("Contact service returned no contact id", email=email)
                return DispatchResult(
                    success=False,
                    error_code=ErrorCode.CONTACT_CREATION_FAILED,
                    message="Failed to create contact",
                )

            result = self.contact_service.send_templated_email(
                self.template_id,
                contact_id,
                {"DOWNLOAD_URL": artifact_url, "SITE_URL": self.site_url},
            )
        except Exception as exc:
            logger.error("Ticket email dispatch failed", email=email, error=str(exc))
            return DispatchResult(
                success=False,
                error_code=ErrorCode.DISPATCH_FAILED,
                message=f"Failed to send email: {exc}",
                details={"cause": repr(exc)},
            )

        if result.get("status") != "sent":
            logger.error("Ticket email was not sent", email=email, error=result.get("error"))
            return DispatchResult(
                success=False,
                error_code=ErrorCode.DISPATCH_FAILED,
                message=f"Failed to send email: {result.get('error', 'unknown error')}",
                details={"result": result},
            )

        logger.info("Ticket email sent", contact_id=contact_id, template_id=self.template_id)
        return DispatchResult(
            success=True,
            receipt=DispatchReceipt(contact_id=contact_id, message_id=result.get("message_id")),
        )
