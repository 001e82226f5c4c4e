"""Inbound webhook payload — envelope schema and the parsed payment event.

The gateway envelope is read through an explicit pydantic schema. Field
values are kept untyped at this layer so that validation can report the
first failing rule in a fixed order instead of a schema error.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventDataSchema(BaseModel):
    """The ``EventData`` object of a Viva transaction webhook."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    order_code: Any = Field(default=None, alias="OrderCode")
    transaction_id: Any = Field(default=None, alias="TransactionId")
    status_id: Any = Field(default=None, alias="StatusId")
    amount: Any = Field(default=None, alias="Amount")
    full_name: Any = Field(default=None, alias="fullName")
    merchant_id: Any = Field(default=None, alias="MerchantId")
    email: Any = Field(default=None, alias="Email")
    customer_trns: Any = Field(default=None, alias="CustomerTrns")
    merchant_trns: Any = Field(default=None, alias="MerchantTrns")
    currency_code: Any = Field(default=None, alias="CurrencyCode")
    ins_date: Any = Field(default=None, alias="InsDate")
    card_number: Any = Field(default=None, alias="CardNumber")


class WebhookEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    event_type_id: Any = Field(default=None, alias="EventTypeId")
    event_data: EventDataSchema = Field(default_factory=EventDataSchema, alias="EventData")


def parse_envelope(raw: Any) -> WebhookEnvelope:
    """Read a decoded JSON body into an envelope. Never raises.

    Anything that is not shaped like an envelope comes back with its fields
    unset, which validation then reports as the matching error code.
    """
    if not isinstance(raw, dict):
        return WebhookEnvelope()

    event_data = raw.get("EventData")
    if not isinstance(event_data, dict):
        event_data = {}

    return WebhookEnvelope(
        event_type_id=raw.get("EventTypeId"),
        event_data=EventDataSchema.model_validate(event_data),
    )


def _optional_str(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def mask_card_number(card_number: Any) -> str:
    if not card_number:
        return "N/A"
    return f"****{str(card_number)[-4:]}"


@dataclass(frozen=True)
class PaymentEvent:
    """An actionable payment-completion notification."""

    event_type_id: int
    order_code: str
    transaction_id: str
    status_id: str
    amount: Decimal
    merchant_trns: str
    currency_code: str | None = None
    customer_email: str | None = None
    customer_name: str | None = None
    merchant_id: str | None = None
    customer_trns: str | None = None
    ins_date: str | None = None
    card_number_masked: str = "N/A"

    @classmethod
    def from_envelope(cls, envelope: WebhookEnvelope) -> "PaymentEvent":
        data = envelope.event_data
        return cls(
            event_type_id=int(envelope.event_type_id),
            order_code=str(data.order_code),
            transaction_id=str(data.transaction_id),
            status_id=str(data.status_id),
            amount=Decimal(str(data.amount)),
            merchant_trns=str(data.merchant_trns),
            currency_code=_optional_str(data.currency_code),
            customer_email=_optional_str(data.email),
            customer_name=_optional_str(data.full_name),
            merchant_id=_optional_str(data.merchant_id),
            customer_trns=_optional_str(data.customer_trns),
            ins_date=_optional_str(data.ins_date),
            card_number_masked=mask_card_number(data.card_number),
        )

    def summary(self) -> dict:
        """Log- and audit-safe projection of the event."""
        return {
            "order_code": self.order_code,
            "transaction_id": self.transaction_id,
            "amount": str(self.amount),
            "currency_code": self.currency_code,
            "customer_email": self.customer_email,
            "merchant_id": self.merchant_id,
            "customer_trns": self.customer_trns,
            "merchant_trns": self.merchant_trns,
            "ins_date": self.ins_date,
            "card_number": self.card_number_masked,
        }
