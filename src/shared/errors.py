"""Error and response codes shared by the webhook, checkout and notification legs.

Codes are the wire contract with callers and the audit trail: values never
change once published.
"""

from enum import Enum


class ErrorCode(Enum):
    # Webhook responses
    SUCCESS = "SUCCESS"
    ACKNOWLEDGED = "ACKNOWLEDGED"
    DUPLICATE_DELIVERY = "DUPLICATE_DELIVERY"
    UNAUTHORIZED = "UNAUTHORIZED"
    WEBHOOK_KEY_UNAVAILABLE = "WEBHOOK_KEY_UNAVAILABLE"

    # Payload validation (fatal, HTTP 400)
    INVALID_EVENT_TYPE = "INVALID_EVENT_TYPE"
    MISSING_FIELDS = "MISSING_FIELDS"
    TRANSACTION_NOT_SUCCESSFUL = "TRANSACTION_NOT_SUCCESSFUL"
    INVALID_AMOUNT = "INVALID_AMOUNT"

    # Correlation (acknowledged, not retried)
    INVALID_MERCHANT_TRNS = "INVALID_MERCHANT_TRNS"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"

    # Reconciliation stages
    NO_TICKETS_IN_CONFIRMATION = "NO_TICKETS_IN_CONFIRMATION"
    NO_TICKETS_IN_ORDER = "NO_TICKETS_IN_ORDER"
    RECONCILIATION_UNAVAILABLE = "RECONCILIATION_UNAVAILABLE"
    ORDER_SERVICE_ERROR = "ORDER_SERVICE_ERROR"

    # Notification stage
    INVALID_RECIPIENT = "INVALID_RECIPIENT"
    CONTACT_CREATION_FAILED = "CONTACT_CREATION_FAILED"
    DISPATCH_FAILED = "DISPATCH_FAILED"

    # Checkout initiation
    NO_VALID_ITEMS = "NO_VALID_ITEMS"
    NO_VALID_TICKETS = "NO_VALID_TICKETS"
    MULTIPLE_EVENTS = "MULTIPLE_EVENTS"
    CHECKOUT_FAILED = "CHECKOUT_FAILED"


VALIDATION_ERRORS = frozenset(
    {
        ErrorCode.INVALID_EVENT_TYPE,
        ErrorCode.MISSING_FIELDS,
        ErrorCode.TRANSACTION_NOT_SUCCESSFUL,
        ErrorCode.INVALID_AMOUNT,
    }
)

CORRELATION_ERRORS = frozenset({ErrorCode.INVALID_MERCHANT_TRNS, ErrorCode.INVALID_EVENT_ID})


def is_fatal(code: ErrorCode) -> bool:
    """Fatal codes stop the pipeline before any external mutation."""
    return code in VALIDATION_ERRORS or code in CORRELATION_ERRORS
