"""Configurable fake payment gateway for development and testing.

Simulates hosted checkout creation and the webhook verification handshake
without any external calls. It can be configured at runtime to succeed or
fail, making it useful for:
- Automated tests with predictable outcomes
- Development without real gateway credentials
"""

from random import randint

from payments.gateway.port import CheckoutSession, GatewayError, PaymentGateway


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Checkout rejected"
        self.webhook_key: str = "fake-webhook-key"
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Checkout rejected",
        webhook_key: str = "fake-webhook-key",
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.webhook_key = webhook_key

    def create_checkout_session(self, payment_data: dict) -> CheckoutSession:
        self.calls.append({"method": "create_checkout_session", "payment_data": dict(payment_data)})

        if self.should_succeed:
            order_code = str(randint(10**15, 10**16 - 1))
            return CheckoutSession(
                success=True,
                order_code=order_code,
                redirect_url=f"https://fake-gateway.local/web/checkout?ref={order_code}",
                gateway_response="Checkout session created",
            )
        return CheckoutSession(success=False, failure_reason=self.failure_reason)

    def fetch_webhook_key(self) -> str:
        self.calls.append({"method": "fetch_webhook_key"})
        if not self.should_succeed:
            raise GatewayError(self.failure_reason)
        return self.webhook_key

    def reset(self) -> None:
        self.should_succeed = True
        self.failure_reason = "Checkout rejected"
        self.webhook_key = "fake-webhook-key"
        self.calls.clear()
