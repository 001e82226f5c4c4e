"""WebhookDelivery aggregate — idempotency record for gateway deliveries.

One record per gateway transaction. A delivery is claimed before any
external call is made and holds a short processing lock; redeliveries of a
completed transaction, or of one whose lock is still held, are recognised
as duplicates.

State Machine:
    PROCESSING → COMPLETED
    PROCESSING → FAILED → (reclaim) → PROCESSING
    PROCESSING → (lock expired, reclaim) → PROCESSING
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String

from reconciliation.delivery.events import DeliveryClaimed, DeliveryCompleted, DeliveryFailed
from reconciliation.domain import reconciliation


class DeliveryStatus(Enum):
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"


_VALID_TRANSITIONS = {
    DeliveryStatus.PROCESSING: {
        DeliveryStatus.PROCESSING,  # Reclaim after lock expiry
        DeliveryStatus.COMPLETED,
        DeliveryStatus.FAILED,
    },
    DeliveryStatus.FAILED: {DeliveryStatus.PROCESSING},
    DeliveryStatus.COMPLETED: set(),  # Terminal
}


def _as_aware(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@reconciliation.aggregate
class WebhookDelivery:
    transaction_id: Identifier(identifier=True, required=True)
    order_code: String(max_length=255)
    order_id: String(max_length=255)
    event_id: String(max_length=255)

    status: String(choices=DeliveryStatus, default=DeliveryStatus.PROCESSING.value)
    attempts: Integer(default=0)
    locked_until: DateTime()

    # Outcome
    response_code: String(max_length=50)
    order_confirmed: Boolean(default=False)
    tickets_retrieved: Boolean(default=False)
    notification_sent: Boolean(default=False)
    failure_reason: String(max_length=1000)

    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def start(cls, transaction_id: str, order_code: str | None, lock_ttl_seconds: int, now=None):
        """Create the record for a first delivery, already claimed."""
        now = now or datetime.now(UTC)
        delivery = cls(
            transaction_id=transaction_id,
            order_code=order_code,
            status=DeliveryStatus.PROCESSING.value,
            attempts=0,
            created_at=now,
            updated_at=now,
        )
        delivery._claim(lock_ttl_seconds, now)
        return delivery

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: DeliveryStatus) -> None:
        current = DeliveryStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def is_locked(self, now=None) -> bool:
        """A processing delivery whose lock has not expired yet."""
        if self.status != DeliveryStatus.PROCESSING.value or self.locked_until is None:
            return False
        now = now or datetime.now(UTC)
        return _as_aware(self.locked_until) > now

    def can_claim(self, now=None) -> bool:
        if self.status == DeliveryStatus.COMPLETED.value:
            return False
        return not self.is_locked(now)

    def claim(self, lock_ttl_seconds: int, now=None) -> None:
        """Reclaim a failed delivery, or one whose lock has expired."""
        now = now or datetime.now(UTC)
        self._assert_can_transition(DeliveryStatus.PROCESSING)
        if self.is_locked(now):
            raise ValidationError({"locked_until": ["Delivery is being processed by another request"]})
        self._claim(lock_ttl_seconds, now)

    def _claim(self, lock_ttl_seconds: int, now: datetime) -> None:
        self.status = DeliveryStatus.PROCESSING.value
        self.attempts = (self.attempts or 0) + 1
        self.locked_until = now + timedelta(seconds=lock_ttl_seconds)
        self.failure_reason = None
        self.updated_at = now

        self.raise_(
            DeliveryClaimed(
                transaction_id=str(self.transaction_id),
                order_code=self.order_code,
                attempt=self.attempts,
                locked_until=self.locked_until,
                claimed_at=now,
            )
        )

    def record_correlation(self, order_id: str | None, event_id: str | None) -> None:
        self.order_id = order_id
        self.event_id = event_id
        self.updated_at = datetime.now(UTC)

    def complete(
        self,
        response_code: str,
        order_confirmed: bool = False,
        tickets_retrieved: bool = False,
        notification_sent: bool = False,
    ) -> None:
        """Close the delivery. Sub-outcome flags only ever move to True."""
        self._assert_can_transition(DeliveryStatus.COMPLETED)

        now = datetime.now(UTC)
        self.status = DeliveryStatus.COMPLETED.value
        self.response_code = response_code
        self.order_confirmed = bool(self.order_confirmed or order_confirmed)
        self.tickets_retrieved = bool(self.tickets_retrieved or tickets_retrieved)
        self.notification_sent = bool(self.notification_sent or notification_sent)
        self.locked_until = None
        self.updated_at = now

        self.raise_(
            DeliveryCompleted(
                transaction_id=str(self.transaction_id),
                response_code=response_code,
                order_confirmed=self.order_confirmed,
                tickets_retrieved=self.tickets_retrieved,
                notification_sent=self.notification_sent,
                completed_at=now,
            )
        )

    def fail(self, reason: str, notification_sent: bool = False) -> None:
        """Release the lock so that a redelivery can retry."""
        self._assert_can_transition(DeliveryStatus.FAILED)

        now = datetime.now(UTC)
        self.status = DeliveryStatus.FAILED.value
        self.failure_reason = reason[:1000]
        self.notification_sent = bool(self.notification_sent or notification_sent)
        self.locked_until = None
        self.updated_at = now

        self.raise_(
            DeliveryFailed(
                transaction_id=str(self.transaction_id),
                reason=self.failure_reason,
                attempt=self.attempts,
                failed_at=now,
            )
        )

    def to_dict(self) -> dict:
        return {
            "transaction_id": str(self.transaction_id),
            "order_code": self.order_code,
            "order_id": self.order_id,
            "event_id": self.event_id,
            "status": self.status,
            "attempts": self.attempts,
            "locked_until": self.locked_until.isoformat() if self.locked_until else None,
            "response_code": self.response_code,
            "order_confirmed": self.order_confirmed,
            "tickets_retrieved": self.tickets_retrieved,
            "notification_sent": self.notification_sent,
            "failure_reason": self.failure_reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
