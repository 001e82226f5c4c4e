"""Faker-based data generators for Locust load test scenarios.

Each generator produces a payment webhook the pipeline accepts: a UUID
transaction id, a 16-digit order code and a merchantTrns that decodes to
an order id and an event UUID.
"""

import random
import uuid

from faker import Faker

fake = Faker()

PAYMENT_COMPLETED_EVENT_TYPE = 1796


def order_code() -> str:
    """Gateway order codes are 16-digit numbers."""
    return str(random.randint(10**15, 10**16 - 1))


def merchant_trns(order_id: str | None = None, event_id: str | None = None) -> str:
    """Correlation token in the order-id:event-id layout."""
    return f"{order_id or random.randint(10000, 99999)}:{event_id or uuid.uuid4()}"


def amount() -> float:
    return round(random.uniform(5, 250), 2)


def webhook_payload(
    transaction_id: str | None = None,
    correlation: str | None = None,
    event_type_id: int = PAYMENT_COMPLETED_EVENT_TYPE,
) -> dict:
    """A Transaction Payment Created webhook for a fresh transaction."""
    return {
        "EventTypeId": event_type_id,
        "EventData": {
            "OrderCode": order_code(),
            "TransactionId": transaction_id or str(uuid.uuid4()),
            "Amount": amount(),
            "fullName": fake.name()[:100],
            "Email": f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}",
            "MerchantTrns": correlation or merchant_trns(),
            "CurrencyCode": "978",
            "StatusId": "F",
            "MerchantId": str(uuid.uuid4()),
            "CardNumber": f"414746XXXXXX{random.randint(1000, 9999)}",
        },
    }


def malformed_webhook_payload() -> dict:
    """A webhook that fails validation or correlation, picked at random."""
    payload = webhook_payload()
    variant = random.choice(["amount", "order_code", "transaction_id", "merchant_trns", "event_id"])
    if variant == "amount":
        payload["EventData"]["Amount"] = -1
    elif variant == "order_code":
        payload["EventData"]["OrderCode"] = "12345"
    elif variant == "transaction_id":
        payload["EventData"]["TransactionId"] = "not-a-uuid"
    elif variant == "merchant_trns":
        payload["EventData"]["MerchantTrns"] = "no-separator"
    else:
        payload["EventData"]["MerchantTrns"] = "10231:not-a-uuid"
    return payload
