"""Secret store factory.

Provides get_secret_store() / set_secret_store() to swap implementations:
- EnvSecretStore reads secrets from environment variables (default)
- FakeSecretStore keeps secrets in memory for tests
"""

from shared.secrets.env_adapter import EnvSecretStore
from shared.secrets.port import SecretStore

_current_store: SecretStore | None = None


def get_secret_store() -> SecretStore:
    """Return the current secret store. Defaults to EnvSecretStore."""
    global _current_store
    if _current_store is None:
        _current_store = EnvSecretStore()
    return _current_store


def set_secret_store(store: SecretStore) -> None:
    """Override the active secret store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_secret_store() -> None:
    """Reset to default secret store."""
    global _current_store
    _current_store = None
