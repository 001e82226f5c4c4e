"""Shared BDD fixtures and step definitions for webhook reconciliation."""

from pytest_bdd import given, parsers, then
from reconciliation.orders.port import OrderServiceUnavailable
from shared.errors import ErrorCode

EVENT_ID = "5f0c9a3e-8d2b-4c1a-9e7f-1b2c3d4e5f60"


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('an order "{order_id}" with {count:d} tickets for the event'), target_fixture="order")
def _order_with_tickets(order_service, order_id, count):
    tickets = [
        {
            "ticketNumber": f"TKT-{n:04d}",
            "name": "General Admission",
            "price": {"amount": "25.00", "currency": "EUR"},
            "ticketPdfUrl": f"https://tickets.example.com/pdf/TKT-{n:04d}.pdf",
        }
        for n in range(1, count + 1)
    ]
    return order_service.add_order(EVENT_ID, order_id, tickets)


@given("the order service cannot confirm orders")
def _confirm_outage(order_service):
    order_service.configure(confirm_failure=OrderServiceUnavailable("connection refused"))


@given("the order service cannot fetch orders")
def _fetch_outage(order_service):
    order_service.configure(fetch_failure=OrderServiceUnavailable("connection refused"))


@given("the payment webhook was already processed")
def _already_processed(pipeline, webhook_payload, order_service):
    pipeline.handle(webhook_payload())
    order_service.calls.clear()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the webhook is answered with HTTP {status:d} and "{code}"'))
def _answered_with(outcome, status, code):
    assert outcome.http_status == status
    assert outcome.code == ErrorCode(code)


def _stage(outcome, name):
    return {
        "order confirmation": outcome.order_confirmation,
        "ticket retrieval": outcome.ticket_retrieval,
        "notification": outcome.notification,
    }[name]


@then(parsers.cfparse('the {name} stage failed with "{code}"'))
def _stage_failed_with(outcome, name, code):
    stage = _stage(outcome, name)
    assert stage.status.value == "failed"
    assert stage.error_code == ErrorCode(code)


@then(parsers.cfparse('the {name} stage is "{status}"'))
def _stage_status(outcome, name, status):
    assert _stage(outcome, name).status.value == status


@then("the order service is not called")
def _order_service_not_called(order_service):
    assert order_service.calls == []


@then(parsers.cfparse('{count:d} ticket email is sent to "{email}"'))
def _emails_sent(contact_service, count, email):
    assert len(contact_service.sent_emails) == count
    assert all(sent["to"] == email for sent in contact_service.sent_emails)


@then("no ticket email is sent")
def _no_email(contact_service):
    assert contact_service.sent_emails == []
