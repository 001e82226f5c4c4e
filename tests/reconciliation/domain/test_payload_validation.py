"""Tests for the ordered webhook validation rules."""

import pytest
from reconciliation.webhook.payload import parse_envelope
from reconciliation.webhook.validation import validate
from shared.errors import ErrorCode


def _validate(raw):
    return validate(parse_envelope(raw))


class TestValidPayload:
    def test_valid_payload_yields_payment_event(self, webhook_payload):
        result = _validate(webhook_payload())
        assert result.success is True
        assert result.event.transaction_id == "b7c1e6a2-0d6f-4a57-9b13-4f2d5c9e8a10"
        assert result.error_code is None

    def test_expected_event_type_can_be_overridden(self, webhook_payload):
        result = validate(parse_envelope(webhook_payload(event_type_id=1797)), expected_event_type=1797)
        assert result.success is True

    def test_configured_event_type(self, webhook_payload, monkeypatch):
        monkeypatch.setenv("PAYMENT_COMPLETED_EVENT_TYPE", "2000")
        assert _validate(webhook_payload()).error_code == ErrorCode.INVALID_EVENT_TYPE
        assert _validate(webhook_payload(event_type_id=2000)).success is True


class TestEventType:
    @pytest.mark.parametrize("event_type_id", [1797, 0, None, "1796", True])
    def test_wrong_event_type(self, webhook_payload, event_type_id):
        result = _validate(webhook_payload(event_type_id=event_type_id))
        assert result.success is False
        assert result.error_code == ErrorCode.INVALID_EVENT_TYPE

    def test_event_type_checked_before_fields(self):
        result = _validate({"EventTypeId": 1, "EventData": {}})
        assert result.error_code == ErrorCode.INVALID_EVENT_TYPE


class TestRequiredFields:
    @pytest.mark.parametrize("field", ["OrderCode", "TransactionId", "StatusId", "MerchantTrns"])
    @pytest.mark.parametrize("value", [None, ""])
    def test_missing_required_field(self, webhook_payload, field, value):
        result = _validate(webhook_payload(**{field: value}))
        assert result.error_code == ErrorCode.MISSING_FIELDS

    def test_null_amount_is_missing(self, webhook_payload):
        assert _validate(webhook_payload(Amount=None)).error_code == ErrorCode.MISSING_FIELDS

    def test_optional_fields_may_be_absent(self, webhook_payload):
        result = _validate(webhook_payload(Email=None, fullName=None, CardNumber=None, CurrencyCode=None))
        assert result.success is True

    def test_non_object_event_data(self):
        result = _validate({"EventTypeId": 1796, "EventData": "oops"})
        assert result.error_code == ErrorCode.MISSING_FIELDS


class TestStatus:
    @pytest.mark.parametrize("status", ["A", "E", "f", "X"])
    def test_unsuccessful_status(self, webhook_payload, status):
        result = _validate(webhook_payload(StatusId=status))
        assert result.error_code == ErrorCode.TRANSACTION_NOT_SUCCESSFUL
        assert status in result.message

    def test_status_checked_before_amount(self, webhook_payload):
        result = _validate(webhook_payload(StatusId="E", Amount=-5))
        assert result.error_code == ErrorCode.TRANSACTION_NOT_SUCCESSFUL


class TestAmount:
    @pytest.mark.parametrize("amount", [0, -1, -0.01, "25.00", True, False, float("nan"), float("inf")])
    def test_invalid_amount(self, webhook_payload, amount):
        result = _validate(webhook_payload(Amount=amount))
        assert result.error_code == ErrorCode.INVALID_AMOUNT

    @pytest.mark.parametrize("amount", [0.01, 1, 25.5, 1000])
    def test_positive_amount(self, webhook_payload, amount):
        assert _validate(webhook_payload(Amount=amount)).success is True


class TestTotality:
    @pytest.mark.parametrize(
        "raw",
        [
            None,
            "",
            "not json",
            0,
            [],
            {},
            {"EventTypeId": None},
            {"EventData": {}},
            {"EventTypeId": 1796},
            {"EventTypeId": 1796, "EventData": None},
            {"EventTypeId": 1796, "EventData": {"Amount": {"nested": True}}},
        ],
    )
    def test_never_raises_and_always_reports_a_code(self, raw):
        result = _validate(raw)
        assert result.success is False
        assert result.error_code in {
            ErrorCode.INVALID_EVENT_TYPE,
            ErrorCode.MISSING_FIELDS,
            ErrorCode.TRANSACTION_NOT_SUCCESSFUL,
            ErrorCode.INVALID_AMOUNT,
        }
