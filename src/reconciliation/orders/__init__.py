"""Order service adapter factory.

Provides get_order_service() / set_order_service() to swap implementations.
ORDER_SERVICE_ADAPTER selects the default:
- "fake" → FakeOrderService (development and testing)
- "http" → HttpOrderService against ORDER_SERVICE_URL
"""

from shared import settings
from shared.secrets import get_secret_store

from reconciliation.orders.port import OrderServicePort

_current_service: OrderServicePort | None = None


def get_order_service() -> OrderServicePort:
    """Return the configured order service (singleton)."""
    global _current_service
    if _current_service is None:
        adapter = settings.order_service_adapter()
        if adapter == "fake":
            from reconciliation.orders.fake_adapter import FakeOrderService

            _current_service = FakeOrderService()
        elif adapter == "http":
            from reconciliation.orders.http_adapter import HttpOrderService

            _current_service = HttpOrderService(
                base_url=settings.order_service_url(),
                system_token=get_secret_store().get_secret("order_service_token"),
                timeout=settings.order_service_timeout(),
            )
        else:
            raise ValueError(f"Unknown order service adapter: {adapter}")
    return _current_service


def set_order_service(service: OrderServicePort) -> None:
    """Override the active order service (useful for tests)."""
    global _current_service
    _current_service = service


def reset_order_service() -> None:
    """Reset to the configured default."""
    global _current_service
    _current_service = None
