"""Tests for order confirmation and fetch against the order service port."""

import pytest
from reconciliation.orders.fake_adapter import FakeOrderService
from reconciliation.orders.port import OrderServiceError, OrderServiceUnavailable
from reconciliation.orders.reconciler import OrderConfirmation, OrderReconciler
from shared.errors import ErrorCode

EVENT_ID = "5f0c9a3e-8d2b-4c1a-9e7f-1b2c3d4e5f60"
TICKETS = [
    {
        "ticketNumber": "TKT-1",
        "name": "Early Bird",
        "price": {"amount": "15.00", "currency": "EUR"},
        "ticketPdfUrl": "https://tickets.example.com/pdf/TKT-1.pdf",
    }
]


@pytest.fixture()
def service():
    service = FakeOrderService()
    service.add_order(EVENT_ID, "42", TICKETS)
    return service


@pytest.fixture()
def reconciler(service):
    return OrderReconciler(service)


class TestConfirm:
    def test_confirms_with_elevated_authority(self, reconciler, service):
        result = reconciler.confirm(EVENT_ID, "42")
        assert result.success is True
        assert service.calls[0] == {
            "method": "confirm_order",
            "event_id": EVENT_ID,
            "order_numbers": ["42"],
            "elevated": True,
        }

    def test_returns_confirmation_with_tickets(self, reconciler):
        confirmation = reconciler.confirm(EVENT_ID, "42").value
        assert isinstance(confirmation, OrderConfirmation)
        assert confirmation.order_number == "42"
        assert confirmation.event_id == EVENT_ID
        assert confirmation.status == "CONFIRMED"
        assert confirmation.tickets_quantity == 1
        assert confirmation.tickets[0].formatted_price == "EUR 15.00"

    def test_zero_tickets_is_an_error(self, reconciler, service):
        service.add_order(EVENT_ID, "43", [])
        result = reconciler.confirm(EVENT_ID, "43")
        assert result.success is False
        assert result.error_code == ErrorCode.NO_TICKETS_IN_CONFIRMATION

    def test_unavailable_service(self, reconciler, service):
        service.configure(confirm_failure=OrderServiceUnavailable("timed out"))
        result = reconciler.confirm(EVENT_ID, "42")
        assert result.error_code == ErrorCode.RECONCILIATION_UNAVAILABLE
        assert "timed out" in result.message

    def test_unknown_order(self, reconciler):
        result = reconciler.confirm(EVENT_ID, "999")
        assert result.error_code == ErrorCode.ORDER_SERVICE_ERROR
        assert result.details["order_number"] == "999"


class TestFetch:
    def test_fetches_tickets_with_default_fieldset(self, reconciler, service):
        result = reconciler.fetch(EVENT_ID, "42")
        assert result.success is True
        assert result.value[0].artifact_url == "https://tickets.example.com/pdf/TKT-1.pdf"
        assert service.calls[0] == {
            "method": "get_order",
            "identifiers": {"eventId": EVENT_ID, "orderNumber": "42"},
            "fieldset": ["TICKETS", "DETAILS"],
            "elevated": True,
        }

    def test_fieldset_without_tickets_finds_none(self, reconciler):
        result = reconciler.fetch(EVENT_ID, "42", fieldset=("DETAILS",))
        assert result.error_code == ErrorCode.NO_TICKETS_IN_ORDER

    def test_empty_ticket_list(self, reconciler, service):
        service.add_order(EVENT_ID, "44", [])
        assert reconciler.fetch(EVENT_ID, "44").error_code == ErrorCode.NO_TICKETS_IN_ORDER

    def test_service_error(self, reconciler, service):
        service.configure(fetch_failure=OrderServiceError("bad request"))
        assert reconciler.fetch(EVENT_ID, "42").error_code == ErrorCode.ORDER_SERVICE_ERROR

    def test_unavailable_service(self, reconciler, service):
        service.configure(fetch_failure=OrderServiceUnavailable("401"))
        assert reconciler.fetch(EVENT_ID, "42").error_code == ErrorCode.RECONCILIATION_UNAVAILABLE

    def test_fetch_works_without_confirmation(self, reconciler, service):
        service.configure(confirm_failure=OrderServiceUnavailable("down"))
        assert reconciler.confirm(EVENT_ID, "42").success is False
        assert reconciler.fetch(EVENT_ID, "42").success is True
