"""AuditEntry aggregate — one row per pipeline state transition.

Entries are append-only: they are created through ``record`` and never
updated. ``data`` holds the JSON-encoded context of the transition.
"""

import json
from datetime import UTC, datetime

from protean.fields import DateTime, String, Text

from reconciliation.domain import reconciliation


@reconciliation.aggregate
class AuditEntry:
    phase: String(max_length=100, required=True)
    data: Text()  # JSON
    ts: DateTime(required=True)
    transaction_id: String(max_length=255)

    @classmethod
    def record(cls, phase: str, data: dict | None = None, transaction_id: str | None = None, ts=None):
        return cls(
            phase=phase,
            data=json.dumps(data or {}, default=str),
            ts=ts or datetime.now(UTC),
            transaction_id=transaction_id,
        )

    @property
    def payload(self) -> dict:
        return json.loads(self.data) if self.data else {}

    def to_record(self) -> dict:
        """The ``{phase, data, ts}`` shape written to external audit stores."""
        return {"phase": self.phase, "data": self.payload, "ts": self.ts.isoformat()}
