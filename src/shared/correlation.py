"""Correlation token codec — the only link between checkout and webhook.

At checkout the ticket order id and the event id are joined into the
gateway's ``merchantTrns`` field; the gateway echoes it back verbatim in the
payment webhook, where it is split again. Position is fixed: order id first,
event id second.
"""

import re
from dataclasses import dataclass

from shared.errors import ErrorCode

SEPARATOR = ":"

_UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class DecodeResult:
    """Result of decoding a correlation token."""

    success: bool
    order_id: str | None = None
    event_id: str | None = None
    error_code: ErrorCode | None = None
    message: str | None = None


def is_valid_uuid(value) -> bool:
    """Canonical 8-4-4-4-12 form, version 1-5, RFC 4122 variant."""
    return isinstance(value, str) and bool(_UUID_PATTERN.fullmatch(value))


def encode(order_id: str, event_id: str) -> str:
    """Join an order id and an event id into a correlation token."""
    if not order_id or SEPARATOR in order_id:
        raise ValueError(f"Order id must be non-empty and free of {SEPARATOR!r}: {order_id!r}")
    if not is_valid_uuid(event_id):
        raise ValueError(f"Event id is not a valid UUID: {event_id!r}")
    return f"{order_id}{SEPARATOR}{event_id}"


def decode(token) -> DecodeResult:
    """Split a correlation token back into its order id and event id.

    Fails closed: an empty half is a malformed token, and an event id that
    is not a UUID is rejected even when the order id looks fine.
    """
    if not isinstance(token, str):
        return DecodeResult(
            success=False,
            error_code=ErrorCode.INVALID_MERCHANT_TRNS,
            message="Invalid merchantTrns format, expected orderId:eventId",
        )

    order_id, _, event_id = token.partition(SEPARATOR)
    if not order_id or not event_id:
        return DecodeResult(
            success=False,
            error_code=ErrorCode.INVALID_MERCHANT_TRNS,
            message="Invalid merchantTrns format, expected orderId:eventId",
        )

    if not is_valid_uuid(event_id):
        return DecodeResult(
            success=False,
            order_id=order_id,
            error_code=ErrorCode.INVALID_EVENT_ID,
            message="eventId is not a valid UUID",
        )

    return DecodeResult(success=True, order_id=order_id, event_id=event_id)
