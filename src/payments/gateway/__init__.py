"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing (default)
- VivaGateway for production (PAYMENT_GATEWAY_ADAPTER=viva)
"""

from shared import settings
from shared.secrets import get_secret_store

from payments.gateway.fake_adapter import FakeGateway
from payments.gateway.port import PaymentGateway

_current_gateway: PaymentGateway | None = None


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway. Defaults to FakeGateway."""
    global _current_gateway
    if _current_gateway is None:
        adapter = settings.payment_gateway_adapter()
        if adapter == "fake":
            _current_gateway = FakeGateway()
        elif adapter == "viva":
            from payments.gateway.viva_adapter import VivaGateway

            secrets = get_secret_store()
            _current_gateway = VivaGateway(
                client_id=secrets.get_secret("viva_client_id"),
                client_secret=secrets.get_secret("viva_client_secret"),
                merchant_id=secrets.get_secret("viva_merchant_id"),
                api_key=secrets.get_secret("viva_api_key"),
                environment=settings.viva_environment(),
                timeout=settings.gateway_timeout(),
            )
        else:
            raise ValueError(f"Unknown payment gateway adapter: {adapter}")
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
