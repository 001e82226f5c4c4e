"""Inbound webhook authentication.

The gateway is configured with a shared secret that it presents on every
delivery. The secret itself lives in the secret store; a missing secret
rejects every request.
"""

import hmac
from collections.abc import Mapping

import structlog

from shared import settings
from shared.secrets import get_secret_store
from shared.secrets.port import SecretStore

logger = structlog.get_logger(__name__)

_CREDENTIAL_HEADERS = ("authorization", "x-api-key", "x-viva-signature")
QUERY_PARAM = "auth"


def _lower_keys(mapping: Mapping | None) -> dict:
    return {str(k).lower(): v for k, v in (mapping or {}).items()}


def extract_credential(headers: Mapping | None, query: Mapping | None) -> str | None:
    """First credential found, in header order, then the ``auth`` query param."""
    headers = _lower_keys(headers)
    for name in _CREDENTIAL_HEADERS:
        value = headers.get(name)
        if not value:
            continue
        value = str(value).strip()
        if name == "authorization" and value.lower().startswith("bearer "):
            value = value[7:].strip()
        if value:
            return value

    value = (query or {}).get(QUERY_PARAM)
    if value:
        return str(value).strip() or None
    return None


class WebhookAuthenticator:
    def __init__(self, secret_store: SecretStore | None = None, secret_name: str | None = None) -> None:
        self.secret_store = secret_store or get_secret_store()
        self.secret_name = secret_name or settings.webhook_secret_name()

    def is_permitted(self, headers: Mapping | None, query: Mapping | None = None) -> bool:
        credential = extract_credential(headers, query)
        if not credential:
            logger.warning("Webhook rejected: no credential presented")
            return False

        secret = self.secret_store.get_secret(self.secret_name)
        if not secret:
            logger.error("Webhook rejected: shared secret is not configured", secret_name=self.secret_name)
            return False

        if not hmac.compare_digest(credential.encode("utf-8"), secret.encode("utf-8")):
            logger.warning("Webhook rejected: credential mismatch")
            return False
        return True
