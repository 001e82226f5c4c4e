import pytest
from notifications.channel import set_contact_service
from notifications.channel.fake_contacts import FakeContactService


@pytest.fixture()
def contacts():
    service = FakeContactService()
    set_contact_service(service)
    yield service
    service.reset()
