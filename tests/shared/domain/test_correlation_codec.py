"""Tests for the orderId:eventId correlation codec."""

import uuid

import pytest
from shared.correlation import decode, encode, is_valid_uuid
from shared.errors import ErrorCode

EVENT_ID = "5f0c9a3e-8d2b-4c1a-9e7f-1b2c3d4e5f60"


class TestIsValidUuid:
    @pytest.mark.parametrize("version", [1, 3, 4, 5])
    def test_generated_uuids(self, version):
        value = {
            1: uuid.uuid1,
            3: lambda: uuid.uuid3(uuid.NAMESPACE_DNS, "tickets"),
            4: uuid.uuid4,
            5: lambda: uuid.uuid5(uuid.NAMESPACE_DNS, "tickets"),
        }[version]()
        assert is_valid_uuid(str(value)) is True

    def test_case_insensitive(self):
        assert is_valid_uuid(EVENT_ID.upper()) is True

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "not-a-uuid",
            "5f0c9a3e8d2b4c1a9e7f1b2c3d4e5f60",  # no hyphens
            "5f0c9a3e-8d2b-0c1a-9e7f-1b2c3d4e5f60",  # version 0
            "5f0c9a3e-8d2b-6c1a-9e7f-1b2c3d4e5f60",  # version 6
            "5f0c9a3e-8d2b-4c1a-7e7f-1b2c3d4e5f60",  # variant 7
            "5f0c9a3e-8d2b-4c1a-ce7f-1b2c3d4e5f60",  # variant c
            "{5f0c9a3e-8d2b-4c1a-9e7f-1b2c3d4e5f60}",
            f"{EVENT_ID}\n",
            None,
            42,
        ],
    )
    def test_rejects_non_canonical(self, value):
        assert is_valid_uuid(value) is False


class TestEncode:
    def test_order_first_event_second(self):
        assert encode("10231", EVENT_ID) == f"10231:{EVENT_ID}"

    @pytest.mark.parametrize("order_id", ["", "a:b"])
    def test_rejects_bad_order_id(self, order_id):
        with pytest.raises(ValueError):
            encode(order_id, EVENT_ID)

    def test_rejects_non_uuid_event_id(self):
        with pytest.raises(ValueError):
            encode("10231", "evt-1")


class TestDecode:
    def test_valid_token(self):
        result = decode(f"10231:{EVENT_ID}")
        assert result.success is True
        assert result.order_id == "10231"
        assert result.event_id == EVENT_ID

    @pytest.mark.parametrize("token", ["", "10231", ":", f":{EVENT_ID}", "10231:", None, 10231])
    def test_malformed_token(self, token):
        result = decode(token)
        assert result.success is False
        assert result.error_code == ErrorCode.INVALID_MERCHANT_TRNS
        assert result.message == "Invalid merchantTrns format, expected orderId:eventId"

    def test_non_uuid_event_id(self):
        result = decode("10231:evt-1")
        assert result.error_code == ErrorCode.INVALID_EVENT_ID
        assert result.order_id == "10231"
        assert result.event_id is None

    def test_splits_on_first_separator_only(self):
        result = decode(f"10231:{EVENT_ID}:extra")
        assert result.success is False
        assert result.error_code == ErrorCode.INVALID_EVENT_ID

    @pytest.mark.parametrize("order_id", ["1", "10231", "ORD-2026-0001", "a b c", "ünïcode"])
    def test_round_trip(self, order_id):
        event_id = str(uuid.uuid4())
        result = decode(encode(order_id, event_id))
        assert (result.order_id, result.event_id) == (order_id, event_id)
