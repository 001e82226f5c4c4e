"""Payload validation — decides whether a webhook is actionable.

Rules run in a fixed order and stop at the first failure:

1. the event type is "payment completed"
2. the required fields are present
3. the transaction status is ``F`` (finished)
4. the amount is a positive number
"""

import math
from dataclasses import dataclass, field

from shared import settings
from shared.errors import ErrorCode

from reconciliation.webhook.payload import PaymentEvent, WebhookEnvelope

SUCCESS_STATUS = "F"


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating an inbound envelope."""

    success: bool
    event: PaymentEvent | None = None
    error_code: ErrorCode | None = None
    message: str | None = None
    details: dict = field(default_factory=dict)


def _reject(code: ErrorCode, message: str, **details) -> ValidationResult:
    return ValidationResult(success=False, error_code=code, message=message, details=details)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate(envelope: WebhookEnvelope, expected_event_type: int | None = None) -> ValidationResult:
    if expected_event_type is None:
        expected_event_type = settings.payment_completed_event_type()

    event_type_id = envelope.event_type_id
    if not _is_number(event_type_id) or event_type_id != expected_event_type:
        return _reject(
            ErrorCode.INVALID_EVENT_TYPE,
            f"Webhook event type is not Transaction Payment Created ({expected_event_type})",
            event_type_id=event_type_id,
        )

    data = envelope.event_data
    if (
        not data.order_code
        or not data.transaction_id
        or not data.status_id
        or data.amount is None
        or not data.merchant_trns
    ):
        return _reject(
            ErrorCode.MISSING_FIELDS,
            "Required fields (OrderCode, TransactionId, StatusId, Amount, MerchantTrns) are missing",
            order_code=data.order_code,
            transaction_id=data.transaction_id,
            status_id=data.status_id,
            amount=data.amount,
            merchant_trns=data.merchant_trns,
        )

    if data.status_id != SUCCESS_STATUS:
        return _reject(
            ErrorCode.TRANSACTION_NOT_SUCCESSFUL,
            f"Transaction status is {data.status_id}, expected '{SUCCESS_STATUS}' for success",
            status_id=data.status_id,
        )

    if not _is_number(data.amount) or not math.isfinite(data.amount) or data.amount <= 0:
        return _reject(ErrorCode.INVALID_AMOUNT, "Amount must be a positive number", amount=data.amount)

    return ValidationResult(success=True, event=PaymentEvent.from_envelope(envelope))
