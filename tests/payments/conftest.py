import pytest
from payments.gateway import set_gateway
from payments.gateway.fake_adapter import FakeGateway

EVENT_ID = "5f0c9a3e-8d2b-4c1a-9e7f-1b2c3d4e5f60"
OTHER_EVENT_ID = "0d7e3b52-61aa-4f0e-8c1d-9a2b3c4d5e6f"
ITEM_ONE = "3a9f1c2e-4b5d-4e6f-8a7b-9c0d1e2f3a4b"
ITEM_TWO = "6b8e2d4c-1a3f-4c5e-9d7b-0e1f2a3b4c5d"


@pytest.fixture()
def gateway():
    fake = FakeGateway()
    set_gateway(fake)
    yield fake
    fake.reset()


@pytest.fixture()
def ticket_catalog():
    """Ticket definitions keyed by item id, each naming its event."""
    return {
        ITEM_ONE: {"_id": ITEM_ONE, "event": EVENT_ID, "name": "General Admission"},
        ITEM_TWO: {"_id": ITEM_TWO, "event": EVENT_ID, "name": "VIP"},
    }


@pytest.fixture()
def ticket_lookup(ticket_catalog):
    def lookup(item_ids):
        return [ticket_catalog[item_id] for item_id in item_ids if item_id in ticket_catalog]

    return lookup


@pytest.fixture()
def ticket_order():
    return {
        "_id": "10231",
        "totalAmount": "45.50",
        "description": {
            "title": "Summer Fest <b>2026</b>!",
            "items": [
                {"_id": ITEM_ONE, "name": "General Admission"},
                {"_id": ITEM_TWO, "name": "VIP"},
            ],
            "billingAddress": {"email": "maria@example.com"},
        },
    }
