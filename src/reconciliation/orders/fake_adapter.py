"""Configurable fake order service for development and testing.

Holds orders in memory keyed by ``(event_id, order_number)``. Failures can
be injected per operation to exercise the pipeline's recovery paths.
"""

import copy

from reconciliation.orders.port import OrderServiceError, OrderServicePort


class FakeOrderService(OrderServicePort):
    """In-memory order service with call recording."""

    def __init__(self) -> None:
        self.orders: dict[tuple[str, str], dict] = {}
        self.calls: list[dict] = []
        self.confirm_failure: Exception | None = None
        self.fetch_failure: Exception | None = None

    def configure(
        self,
        confirm_failure: Exception | None = None,
        fetch_failure: Exception | None = None,
    ) -> None:
        """Make the next calls raise the given exceptions (None clears)."""
        self.confirm_failure = confirm_failure
        self.fetch_failure = fetch_failure

    def add_order(
        self,
        event_id: str,
        order_number: str,
        tickets: list[dict],
        status: str = "PENDING",
    ) -> dict:
        order = {
            "orderNumber": order_number,
            "eventId": event_id,
            "status": status,
            "ticketsQuantity": len(tickets),
            "tickets": list(tickets),
        }
        self.orders[(event_id, order_number)] = order
        return order

    def confirm_order(self, event_id: str, order_numbers: list[str], elevated: bool = False) -> dict:
        self.calls.append(
            {
                "method": "confirm_order",
                "event_id": event_id,
                "order_numbers": list(order_numbers),
                "elevated": elevated,
            }
        )
        if self.confirm_failure is not None:
            raise self.confirm_failure

        confirmed = []
        for order_number in order_numbers:
            order = self.orders.get((event_id, order_number))
            if order is None:
                raise OrderServiceError(
                    f"Order {order_number} not found for event {event_id}",
                    details={"event_id": event_id, "order_number": order_number},
                )
            order["status"] = "CONFIRMED"
            confirmed.append(copy.deepcopy(order))
        return {"orders": confirmed}

    def get_order(self, identifiers: dict, fieldset: list[str], elevated: bool = False) -> dict:
        self.calls.append(
            {
                "method": "get_order",
                "identifiers": dict(identifiers),
                "fieldset": list(fieldset),
                "elevated": elevated,
            }
        )
        if self.fetch_failure is not None:
            raise self.fetch_failure

        key = (identifiers.get("eventId"), identifiers.get("orderNumber"))
        order = self.orders.get(key)
        if order is None:
            raise OrderServiceError(
                f"Order {key[1]} not found for event {key[0]}",
                details={"identifiers": dict(identifiers)},
            )

        result = copy.deepcopy(order)
        if "TICKETS" not in fieldset:
            result.pop("tickets", None)
        return result

    def reset(self) -> None:
        self.orders.clear()
        self.calls.clear()
        self.confirm_failure = None
        self.fetch_failure = None
