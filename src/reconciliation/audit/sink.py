"""Audit sinks — where pipeline transitions are written.

A sink never raises: an audit write that fails is logged and dropped so
that it cannot change the outcome of the webhook it describes.
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from reconciliation.audit.entry import AuditEntry

logger = structlog.get_logger(__name__)


class AuditSink(ABC):
    @abstractmethod
    def write(self, phase: str, data: dict, transaction_id: str | None = None) -> None:
        """Append one audit record. Must not raise."""
        ...


class RepositoryAuditSink(AuditSink):
    """Persists AuditEntry aggregates through the domain repository."""

    def write(self, phase: str, data: dict, transaction_id: str | None = None) -> None:
        try:
            entry = AuditEntry.record(phase, data, transaction_id=transaction_id)
            current_domain.repository_for(AuditEntry).add(entry)
        except Exception as exc:
            logger.error("Audit write failed", phase=phase, transaction_id=transaction_id, error=str(exc))

    def entries_for(self, transaction_id: str) -> list[AuditEntry]:
        repo = current_domain.repository_for(AuditEntry)
        entries = repo._dao.query.filter(transaction_id=transaction_id).all().items
        return sorted(entries, key=lambda e: e.ts)


class InMemoryAuditSink(AuditSink):
    """Collects ``{phase, data, ts}`` records in a list."""

    def __init__(self) -> None:
        self.records: list[dict] = []

    def write(self, phase: str, data: dict, transaction_id: str | None = None) -> None:
        self.records.append(
            {
                "phase": phase,
                "data": dict(data),
                "ts": datetime.now(UTC).isoformat(),
                "transaction_id": transaction_id,
            }
        )

    @property
    def phases(self) -> list[str]:
        return [record["phase"] for record in self.records]

    def reset(self) -> None:
        self.records.clear()
