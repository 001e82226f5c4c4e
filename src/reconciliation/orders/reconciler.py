"""Order reconciliation against the ticketing order service.

Both operations run with elevated authority: the webhook caller is the
payment gateway, not the ticket buyer. Every failure is returned as a
ReconcileResult and never raised, so the pipeline can carry on to the next
stage.
"""

from dataclasses import dataclass, field
from typing import Any

import structlog

from shared.errors import ErrorCode

from reconciliation.orders.port import (
    OrderServiceError,
    OrderServicePort,
    OrderServiceUnavailable,
)
from reconciliation.orders.tickets import (
    TicketArtifact,
    tickets_from_confirmation,
    tickets_from_order,
)

logger = structlog.get_logger(__name__)

DEFAULT_FIELDSET = ("TICKETS", "DETAILS")


@dataclass(frozen=True)
class OrderConfirmation:
    tickets: list[TicketArtifact]
    order_number: str
    event_id: str
    status: str | None = None
    tickets_quantity: int | None = None


@dataclass(frozen=True)
class ReconcileResult:
    """Tagged result of a reconciliation call."""

    success: bool
    value: Any = None
    error_code: ErrorCode | None = None
    message: str | None = None
    details: dict = field(default_factory=dict)


def _failure_from(exc: OrderServiceError, operation: str) -> ReconcileResult:
    if isinstance(exc, OrderServiceUnavailable):
        code = ErrorCode.RECONCILIATION_UNAVAILABLE
    else:
        code = ErrorCode.ORDER_SERVICE_ERROR
    return ReconcileResult(
        success=False,
        error_code=code,
        message=f"{operation} failed: {exc}",
        details=dict(exc.details),
    )


class OrderReconciler:
    def __init__(self, order_service: OrderServicePort) -> None:
        self.order_service = order_service

    def confirm(self, event_id: str, order_number: str) -> ReconcileResult:
        """Confirm a single pending order and return its tickets."""
        try:
            response = self.order_service.confirm_order(event_id, [order_number], elevated=True)
        except OrderServiceError as exc:
            logger.warning(
                "Order confirmation failed",
                event_id=event_id,
                order_number=order_number,
                error=str(exc),
            )
            return _failure_from(exc, "Order confirmation")

        tickets = tickets_from_confirmation(response)
        if not tickets:
            logger.warning(
                "Order confirmation returned no tickets",
                event_id=event_id,
                order_number=order_number,
            )
            return ReconcileResult(
                success=False,
                error_code=ErrorCode.NO_TICKETS_IN_CONFIRMATION,
                message="No tickets found in order confirmation response",
            )

        order = response["orders"][0]
        confirmation = OrderConfirmation(
            tickets=tickets,
            order_number=order_number,
            event_id=event_id,
            status=order.get("status"),
            tickets_quantity=order.get("ticketsQuantity"),
        )
        logger.info(
            "Order confirmed",
            event_id=event_id,
            order_number=order_number,
            ticket_count=len(tickets),
        )
        return ReconcileResult(success=True, value=confirmation)

    def fetch(
        self,
        event_id: str,
        order_number: str,
        fieldset: tuple[str, ...] = DEFAULT_FIELDSET,
    ) -> ReconcileResult:
        """Fetch an order and return its tickets."""
        identifiers = {"eventId": event_id, "orderNumber": order_number}
        try:
            response = self.order_service.get_order(identifiers, list(fieldset), elevated=True)
        except OrderServiceError as exc:
            logger.warning(
                "Order fetch failed",
                event_id=event_id,
                order_number=order_number,
                error=str(exc),
            )
            return _failure_from(exc, "Order fetch")

        tickets = tickets_from_order(response)
        if not tickets:
            logger.warning("Order has no tickets", event_id=event_id, order_number=order_number)
            return ReconcileResult(
                success=False,
                error_code=ErrorCode.NO_TICKETS_IN_ORDER,
                message="No tickets found in order",
            )

        logger.info(
            "Order tickets retrieved",
            event_id=event_id,
            order_number=order_number,
            ticket_count=len(tickets),
        )
        return ReconcileResult(success=True, value=tickets)
