"""Secret store port — abstract access to named secrets."""

from abc import ABC, abstractmethod


class SecretStore(ABC):
    """Abstract interface for secret retrieval adapters."""

    @abstractmethod
    def get_secret(self, name: str) -> str | None:
        """Return the secret value, or None when it is not configured."""
        ...
