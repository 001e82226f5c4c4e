"""Checkout initiation — builds the gateway payment request for a ticket order.

The only thing the webhook leg later relies on is ``merchantTrns``: the
order id and the event id joined by the correlation codec. Everything else
in the request is gateway presentation.
"""

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from decimal import Decimal

import structlog

from shared import settings
from shared.correlation import encode, is_valid_uuid
from shared.errors import ErrorCode

from payments.gateway import get_gateway
from payments.gateway.port import GatewayError, PaymentGateway

logger = structlog.get_logger(__name__)

DEFAULT_DESCRIPTION = "Order Payment"
DEFAULT_CUSTOMER_EMAIL = "customer@example.com"
DESCRIPTION_MAX_LENGTH = 20
COUNTRY_CODE = "pt"
REQUEST_LANG = "en-US"

_CENTS = re.compile(r"^\d+$")
_DECIMAL = re.compile(r"^\d+\.\d{1,2}$")
_HTML_TAG = re.compile(r"<[^>]+>")
_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9\s]")

TicketLookup = Callable[[list[str]], Iterable[dict]]


class CheckoutRejected(Exception):
    """The order cannot be turned into a payment request."""

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


@dataclass(frozen=True)
class CheckoutResult:
    success: bool
    redirect_url: str | None = None
    order_code: str | None = None
    error_code: ErrorCode | None = None
    message: str | None = None


def to_cents(value) -> int | None:
    """Integer strings are already cents; values with 1-2 decimals are units."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if _CENTS.match(text):
        return int(text)
    if _DECIMAL.match(text):
        return int(Decimal(text) * 100)
    return None


def clean_description(text: str | None) -> str:
    if not text:
        return DEFAULT_DESCRIPTION
    text = _HTML_TAG.sub("", str(text))
    text = _NON_ALPHANUMERIC.sub("", text)
    return text[:DESCRIPTION_MAX_LENGTH].strip()


def build_description(order: dict) -> str:
    description = order.get("description") or {}
    text = description.get("text") or description.get("title")
    if text:
        return str(text)
    names = [
        str(item["name"]) for item in description.get("items") or [] if isinstance(item, dict) and item.get("name")
    ]
    return ", ".join(names).strip() or DEFAULT_DESCRIPTION


def build_payment_request(order: dict, ticket_lookup: TicketLookup) -> dict:
    """Turn a ticket order into the gateway's payment request.

    Raises:
        CheckoutRejected: when the order has no usable amount, items or
            tickets, or when its tickets span more than one event.
    """
    description = order.get("description") or {}

    raw_total = order.get("totalAmount")
    if raw_total is None:
        raw_total = description.get("totalAmount")
    amount = to_cents(raw_total)
    if not amount:
        raise CheckoutRejected(ErrorCode.INVALID_AMOUNT, "Order total is missing or not a valid amount")

    items = [
        item
        for item in description.get("items") or []
        if isinstance(item, dict) and is_valid_uuid(item.get("_id"))
    ]
    logger.debug("Checkout items filtered", item_ids=[item["_id"] for item in items])
    if not items:
        raise CheckoutRejected(ErrorCode.NO_VALID_ITEMS, "No valid ticket items found")

    item_ids = [item["_id"] for item in items]
    tickets_by_id = {ticket["_id"]: ticket for ticket in ticket_lookup(item_ids)}
    tickets = []
    for item_id in item_ids:
        ticket = tickets_by_id.get(item_id)
        if ticket is None:
            logger.warning("No ticket definition for item", item_id=item_id)
            continue
        tickets.append(ticket)

    if not tickets:
        raise CheckoutRejected(ErrorCode.NO_VALID_TICKETS, "No valid tickets found")

    event_ids = {ticket.get("event") for ticket in tickets}
    if len(event_ids) > 1:
        raise CheckoutRejected(ErrorCode.MULTIPLE_EVENTS, "All tickets must belong to the same event")
    event_id = event_ids.pop()

    try:
        merchant_trns = encode(str(order.get("_id") or ""), event_id)
    except ValueError as exc:
        raise CheckoutRejected(ErrorCode.INVALID_MERCHANT_TRNS, str(exc)) from exc

    billing = description.get("billingAddress") or {}
    return {
        "amount": amount,
        "customerTrns": clean_description(build_description(order)),
        "customer": {
            "email": billing.get("email") or DEFAULT_CUSTOMER_EMAIL,
            "countryCode": COUNTRY_CODE,
            "requestLang": REQUEST_LANG,
        },
        "sourceCode": settings.viva_source_code(),
        "merchantTrns": merchant_trns,
    }


def initiate_checkout(
    order: dict,
    ticket_lookup: TicketLookup,
    gateway: PaymentGateway | None = None,
) -> CheckoutResult:
    """Create a hosted checkout session for a ticket order."""
    gateway = gateway or get_gateway()
    order_id = order.get("_id")

    try:
        payment_data = build_payment_request(order, ticket_lookup)
    except CheckoutRejected as exc:
        logger.warning("Checkout rejected", order_id=order_id, code=exc.code.value, reason=exc.message)
        return CheckoutResult(success=False, error_code=exc.code, message=exc.message)

    try:
        session = gateway.create_checkout_session(payment_data)
    except GatewayError as exc:
        logger.error("Checkout session creation failed", order_id=order_id, error=str(exc))
        return CheckoutResult(success=False, error_code=ErrorCode.CHECKOUT_FAILED, message=str(exc))

    if not session.success:
        logger.warning("Gateway declined checkout", order_id=order_id, reason=session.failure_reason)
        return CheckoutResult(success=False, error_code=ErrorCode.CHECKOUT_FAILED, message=session.failure_reason)

    logger.info(
        "Checkout session created",
        order_id=order_id,
        order_code=session.order_code,
        merchant_trns=payment_data["merchantTrns"],
    )
    return CheckoutResult(success=True, redirect_url=session.redirect_url, order_code=session.order_code)
