"""Ticket normalisation.

The order service returns tickets in two shapes: nested under
``orders[0].tickets`` in a confirmation response and directly under
``tickets`` in an order fetch. Both are normalised into TicketArtifact
values with fixed defaults so downstream stages never see a missing key.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class TicketArtifact:
    id: str
    display_name: str
    formatted_price: str
    artifact_url: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "formatted_price": self.formatted_price,
            "artifact_url": self.artifact_url,
        }


def _format_price(price) -> str:
    if not isinstance(price, dict):
        return "N/A"
    currency = price.get("currency")
    amount = price.get("amount")
    if currency and amount:
        return f"{currency} {amount}"
    return "N/A"


def normalize_ticket(raw) -> TicketArtifact:
    """Build a TicketArtifact from one raw ticket, defaulting missing fields."""
    if not isinstance(raw, dict):
        raw = {}
    return TicketArtifact(
        id=str(raw.get("ticketNumber") or ""),
        display_name=str(raw.get("name") or "Unknown"),
        formatted_price=_format_price(raw.get("price")),
        artifact_url=str(raw.get("ticketPdfUrl") or ""),
    )


def _normalize_all(raw_tickets) -> list[TicketArtifact] | None:
    if not isinstance(raw_tickets, list) or not raw_tickets:
        return None
    return [normalize_ticket(raw) for raw in raw_tickets]


def tickets_from_confirmation(response) -> list[TicketArtifact] | None:
    """Tickets of the first confirmed order, or None when there are none."""
    if not isinstance(response, dict):
        return None
    orders = response.get("orders")
    if not isinstance(orders, list) or not orders or not isinstance(orders[0], dict):
        return None
    return _normalize_all(orders[0].get("tickets"))


def tickets_from_order(response) -> list[TicketArtifact] | None:
    """Tickets of a fetched order, or None when there are none."""
    if not isinstance(response, dict):
        return None
    return _normalize_all(response.get("tickets"))
