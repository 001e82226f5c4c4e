"""In-memory secret store for development and testing."""

from shared.secrets.port import SecretStore


class FakeSecretStore(SecretStore):
    """Secret store backed by a dict, with lookup recording."""

    def __init__(self, secrets: dict[str, str] | None = None) -> None:
        self.secrets: dict[str, str] = dict(secrets or {})
        self.lookups: list[str] = []

    def set_secret(self, name: str, value: str) -> None:
        self.secrets[name] = value

    def get_secret(self, name: str) -> str | None:
        self.lookups.append(name)
        return self.secrets.get(name)

    def reset(self) -> None:
        self.secrets.clear()
        self.lookups.clear()
