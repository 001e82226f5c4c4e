"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state, no cross-user sharing.
State tracks the transaction a simulated gateway is delivering so
redeliveries and status lookups can reference it.
"""

from dataclasses import dataclass, field


@dataclass
class DeliveryState:
    """Tracks one transaction as the gateway (re)delivers its webhook."""

    transaction_id: str | None = None
    payload: dict | None = None
    deliveries: int = 0
    response_codes: list[str] = field(default_factory=list)
