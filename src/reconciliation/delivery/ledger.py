"""Delivery ledger — claim, complete and fail webhook deliveries.

The claim is a check-then-write on the WebhookDelivery repository, done
under a process-wide lock so that two concurrent redeliveries of the same
transaction cannot both acquire it.
"""

import threading
from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from shared import settings

from reconciliation.delivery.delivery import DeliveryStatus, WebhookDelivery

logger = structlog.get_logger(__name__)

_claim_lock = threading.Lock()


@dataclass(frozen=True)
class ClaimResult:
    acquired: bool
    delivery: WebhookDelivery | None = None
    reason: str | None = None  # "completed" | "in_progress" when not acquired

    @property
    def notification_already_sent(self) -> bool:
        return bool(self.delivery is not None and self.delivery.notification_sent)


class DeliveryLedger:
    def __init__(self, lock_ttl_seconds: int | None = None) -> None:
        if lock_ttl_seconds is None:
            lock_ttl_seconds = settings.webhook_lock_ttl_seconds()
        self.lock_ttl_seconds = lock_ttl_seconds

    @property
    def _repo(self):
        return current_domain.repository_for(WebhookDelivery)

    def get(self, transaction_id: str) -> WebhookDelivery | None:
        try:
            return self._repo.get(transaction_id)
        except ObjectNotFoundError:
            return None

    def claim(self, transaction_id: str, order_code: str | None = None) -> ClaimResult:
        with _claim_lock:
            delivery = self.get(transaction_id)

            if delivery is None:
                delivery = WebhookDelivery.start(transaction_id, order_code, self.lock_ttl_seconds)
                self._repo.add(delivery)
                logger.info("Delivery claimed", transaction_id=transaction_id, attempt=1)
                return ClaimResult(acquired=True, delivery=delivery)

            if not delivery.can_claim():
                reason = "completed" if delivery.status == DeliveryStatus.COMPLETED.value else "in_progress"
                logger.info("Delivery not claimable", transaction_id=transaction_id, reason=reason)
                return ClaimResult(acquired=False, delivery=delivery, reason=reason)

            delivery.claim(self.lock_ttl_seconds)
            self._repo.add(delivery)
            logger.info("Delivery reclaimed", transaction_id=transaction_id, attempt=delivery.attempts)
            return ClaimResult(acquired=True, delivery=delivery)

    def record_correlation(self, transaction_id: str, order_id: str | None, event_id: str | None) -> None:
        delivery = self._repo.get(transaction_id)
        delivery.record_correlation(order_id, event_id)
        self._repo.add(delivery)

    def complete(
        self,
        transaction_id: str,
        response_code: str,
        order_confirmed: bool = False,
        tickets_retrieved: bool = False,
        notification_sent: bool = False,
    ) -> WebhookDelivery:
        delivery = self._repo.get(transaction_id)
        delivery.complete(
            response_code,
            order_confirmed=order_confirmed,
            tickets_retrieved=tickets_retrieved,
            notification_sent=notification_sent,
        )
        self._repo.add(delivery)
        return delivery

    def fail(self, transaction_id: str, reason: str, notification_sent: bool = False) -> WebhookDelivery | None:
        delivery = self.get(transaction_id)
        if delivery is None or delivery.status != DeliveryStatus.PROCESSING.value:
            return delivery
        delivery.fail(reason, notification_sent=notification_sent)
        self._repo.add(delivery)
        return delivery
