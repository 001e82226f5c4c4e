import pytest
from notifications.channel import set_contact_service
from notifications.channel.fake_contacts import FakeContactService
from notifications.dispatch import NotificationDispatcher
from protean.integrations.pytest import DomainFixture
from reconciliation.audit.sink import InMemoryAuditSink
from reconciliation.delivery.ledger import DeliveryLedger
from reconciliation.orders import set_order_service
from reconciliation.orders.fake_adapter import FakeOrderService
from reconciliation.orders.reconciler import OrderReconciler
from reconciliation.webhook.pipeline import WebhookPipeline
from shared.secrets import set_secret_store
from shared.secrets.fake_adapter import FakeSecretStore

WEBHOOK_SECRET = "s3cr3t-webhook-key"
EVENT_ID = "5f0c9a3e-8d2b-4c1a-9e7f-1b2c3d4e5f60"
ORDER_ID = "10231"
TRANSACTION_ID = "b7c1e6a2-0d6f-4a57-9b13-4f2d5c9e8a10"
SITE_URL = "https://tickets.example.com/"

RAW_TICKETS = [
    {
        "ticketNumber": "TKT-0001",
        "name": "General Admission",
        "price": {"amount": "25.00", "currency": "EUR"},
        "ticketPdfUrl": "https://tickets.example.com/pdf/TKT-0001.pdf",
    },
    {
        "ticketNumber": "TKT-0002",
        "name": "General Admission",
        "price": {"amount": "25.00", "currency": "EUR"},
        "ticketPdfUrl": "https://tickets.example.com/pdf/TKT-0002.pdf",
    },
]


def build_webhook(event_type_id=1796, **event_data):
    data = {
        "OrderCode": "7364820394021234",
        "TransactionId": TRANSACTION_ID,
        "StatusId": "F",
        "Amount": 50.0,
        "fullName": "Maria Silva",
        "MerchantId": "merchant-1",
        "Email": "maria@example.com",
        "CustomerTrns": "Summer Fest",
        "MerchantTrns": f"{ORDER_ID}:{EVENT_ID}",
        "CurrencyCode": "978",
        "InsDate": "2026-06-01T10:00:00",
        "CardNumber": "414746XXXXXX0133",
    }
    data.update(event_data)
    return {"EventTypeId": event_type_id, "EventData": data}


@pytest.fixture(scope="session")
def reconciliation_bed():
    from reconciliation.domain import reconciliation

    bed = DomainFixture(reconciliation)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(reconciliation_bed):
    with reconciliation_bed.domain_context():
        yield


@pytest.fixture()
def webhook_payload():
    return build_webhook


@pytest.fixture()
def order_service():
    service = FakeOrderService()
    set_order_service(service)
    return service


@pytest.fixture()
def seeded_order(order_service):
    return order_service.add_order(EVENT_ID, ORDER_ID, RAW_TICKETS)


@pytest.fixture()
def contact_service():
    service = FakeContactService()
    set_contact_service(service)
    return service


@pytest.fixture()
def secret_store():
    store = FakeSecretStore({"viva_webhook_secret": WEBHOOK_SECRET})
    set_secret_store(store)
    return store


@pytest.fixture()
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture()
def ledger():
    return DeliveryLedger(lock_ttl_seconds=120)


@pytest.fixture()
def pipeline(order_service, contact_service, ledger, audit_sink):
    return WebhookPipeline(
        reconciler=OrderReconciler(order_service),
        dispatcher=NotificationDispatcher(contact_service, template_id="ticket_delivery", site_url=SITE_URL),
        ledger=ledger,
        audit_sink=audit_sink,
    )
