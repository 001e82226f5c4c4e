"""Environment-backed secret store.

Secret ``viva_webhook_secret`` is read from ``VIVA_WEBHOOK_SECRET``.
"""

import os

from shared.secrets.port import SecretStore


class EnvSecretStore(SecretStore):
    def get_secret(self, name: str) -> str | None:
        value = os.environ.get(name.upper(), "").strip()
        return value or None
