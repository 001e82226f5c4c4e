"""Payment gateway port (abstract interface).

Defines the contract that payment gateway adapters must implement. This
enables swapping between FakeGateway (dev/test) and VivaGateway
(production) without changing checkout or webhook code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class GatewayError(Exception):
    """The gateway rejected a request or could not be reached."""


@dataclass(frozen=True)
class CheckoutSession:
    """Result of creating a hosted checkout session."""

    success: bool
    order_code: str | None = None
    redirect_url: str | None = None
    gateway_response: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_checkout_session(self, payment_data: dict) -> CheckoutSession:
        """Create a hosted checkout session for a payment request.

        ``payment_data`` carries ``amount`` (integer cents), ``customerTrns``,
        ``customer``, ``sourceCode`` and ``merchantTrns``.
        """
        ...

    @abstractmethod
    def fetch_webhook_key(self) -> str:
        """Return the key the gateway expects back during webhook verification."""
        ...
