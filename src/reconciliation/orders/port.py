"""Order service port (abstract interface).

Defines the contract the ticketing order system must satisfy. Reconciliation
code programs against this port; FakeOrderService backs development and
tests, HttpOrderService talks to the deployed order service.
"""

from abc import ABC, abstractmethod


class OrderServiceError(Exception):
    """The order service rejected the request."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class OrderServiceUnavailable(OrderServiceError):
    """The order service could not be reached (network, auth or timeout)."""


class OrderServicePort(ABC):
    """Abstract order service interface."""

    @abstractmethod
    def confirm_order(self, event_id: str, order_numbers: list[str], elevated: bool = False) -> dict:
        """Confirm pending orders for an event.

        ``elevated`` runs the call with system authority instead of the
        caller's identity.

        Returns:
            dict with key ``orders``: list of orders, each carrying
            ``orderNumber``, ``eventId``, ``status``, ``ticketsQuantity`` and
            ``tickets``.
        """
        ...

    @abstractmethod
    def get_order(self, identifiers: dict, fieldset: list[str], elevated: bool = False) -> dict:
        """Fetch one order by ``{"eventId", "orderNumber"}``.

        Returns:
            dict with keys ``orderNumber``, ``eventId``, ``status``,
            ``ticketsQuantity`` and, when ``TICKETS`` is in the fieldset,
            ``tickets``.
        """
        ...
