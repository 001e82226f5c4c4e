"""Tests for the AuditEntry aggregate."""

from datetime import UTC, datetime

from reconciliation.audit.entry import AuditEntry


class TestAuditEntry:
    def test_record_encodes_data_as_json(self):
        entry = AuditEntry.record("webhook_received", {"event_type_id": 1796}, transaction_id="txn-1")
        assert entry.phase == "webhook_received"
        assert entry.payload == {"event_type_id": 1796}
        assert entry.transaction_id == "txn-1"

    def test_non_json_values_are_stringified(self):
        ts = datetime(2026, 6, 1, 10, 0, tzinfo=UTC)
        entry = AuditEntry.record("responded", {"at": ts})
        assert entry.payload == {"at": str(ts)}

    def test_empty_data(self):
        entry = AuditEntry.record("webhook_received")
        assert entry.payload == {}

    def test_to_record_shape(self):
        ts = datetime(2026, 6, 1, 10, 0, tzinfo=UTC)
        entry = AuditEntry.record("responded", {"code": "SUCCESS"}, ts=ts)
        assert entry.to_record() == {
            "phase": "responded",
            "data": {"code": "SUCCESS"},
            "ts": ts.isoformat(),
        }
