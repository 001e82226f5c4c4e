"""Domain events for the WebhookDelivery aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from reconciliation.domain import reconciliation


@reconciliation.event(part_of="WebhookDelivery")
class DeliveryClaimed:
    """A webhook delivery was claimed for processing."""

    __version__ = 1

    transaction_id: Identifier(required=True)
    order_code: String()
    attempt: Integer(required=True)
    locked_until: DateTime(required=True)
    claimed_at: DateTime(required=True)


@reconciliation.event(part_of="WebhookDelivery")
class DeliveryCompleted:
    """Processing finished and the gateway was answered."""

    __version__ = 1

    transaction_id: Identifier(required=True)
    response_code: String(required=True)
    order_confirmed: Boolean(default=False)
    tickets_retrieved: Boolean(default=False)
    notification_sent: Boolean(default=False)
    completed_at: DateTime(required=True)


@reconciliation.event(part_of="WebhookDelivery")
class DeliveryFailed:
    """Processing broke off; a redelivery may pick the delivery up again."""

    __version__ = 1

    transaction_id: Identifier(required=True)
    reason: String(required=True)
    attempt: Integer(required=True)
    failed_at: DateTime(required=True)
