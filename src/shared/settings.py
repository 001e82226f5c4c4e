"""Runtime settings read from the environment.

Each accessor reads its variable on call so tests can monkeypatch the
environment without reloading modules.
"""

import os

DEFAULT_PAYMENT_COMPLETED_EVENT_TYPE = 1796  # Viva "Transaction Payment Created"


def payment_completed_event_type() -> int:
    return int(os.environ.get("PAYMENT_COMPLETED_EVENT_TYPE", DEFAULT_PAYMENT_COMPLETED_EVENT_TYPE))


def webhook_secret_name() -> str:
    return os.environ.get("WEBHOOK_SECRET_NAME", "viva_webhook_secret")


def webhook_lock_ttl_seconds() -> int:
    return int(os.environ.get("WEBHOOK_LOCK_TTL_SECONDS", "120"))


def order_service_adapter() -> str:
    return os.environ.get("ORDER_SERVICE_ADAPTER", "fake")


def order_service_url() -> str:
    return os.environ.get("ORDER_SERVICE_URL", "http://localhost:8100")


def order_service_timeout() -> float:
    return float(os.environ.get("ORDER_SERVICE_TIMEOUT_SECONDS", "10"))


def payment_gateway_adapter() -> str:
    return os.environ.get("PAYMENT_GATEWAY_ADAPTER", "fake")


def viva_environment() -> str:
    return os.environ.get("VIVA_ENVIRONMENT", "demo")


def viva_source_code() -> str:
    return os.environ.get("VIVA_SOURCE_CODE", "9393")


def gateway_timeout() -> float:
    return float(os.environ.get("GATEWAY_TIMEOUT_SECONDS", "10"))


def ticket_email_template_id() -> str:
    return os.environ.get("TICKET_EMAIL_TEMPLATE_ID", "ticket_delivery")


def site_url() -> str:
    return os.environ.get("SITE_URL", "https://www.live-ls.com/")


def contact_service_adapter() -> str:
    return os.environ.get("CONTACT_SERVICE_ADAPTER", "fake")


def contact_service_url() -> str:
    return os.environ.get("CONTACT_SERVICE_URL", "http://localhost:8200")


def contact_service_timeout() -> float:
    return float(os.environ.get("CONTACT_SERVICE_TIMEOUT_SECONDS", "10"))
