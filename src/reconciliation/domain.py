"""Reconciliation bounded context — payment webhooks to delivered tickets.

Receives payment-completion webhooks from the gateway, confirms the matching
ticket order, fetches the ticket documents and hands them to the
notifications channel. Keeps an idempotency ledger of deliveries and an
append-only audit trail of every pipeline transition.
"""

from protean.domain import Domain

from reconciliation.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

reconciliation = Domain(name="reconciliation")
