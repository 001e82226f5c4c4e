"""Payment webhook load test scenarios.

GatewayDeliveryUser plays the gateway: verification handshake, first
delivery, a redelivery of the same transaction and a status lookup.
RedeliveryStormUser hammers a handful of transactions concurrently to
exercise the delivery ledger's claim lock. MalformedWebhookUser sends
payloads that must be rejected or acknowledged without processing.
"""

import os
import random
import uuid

from locust import HttpUser, SequentialTaskSet, between, constant_pacing, task

from loadtests.data_generators import malformed_webhook_payload, webhook_payload
from loadtests.helpers.response import extract_error_detail, response_code
from loadtests.helpers.state import DeliveryState

WEBHOOK_PATH = "/webhooks/viva/transaction-payment-created"
WEBHOOK_SECRET = os.environ.get("VIVA_WEBHOOK_SECRET", "loadtest-webhook-secret")


def _auth_headers() -> dict:
    return {"Authorization": f"Bearer {WEBHOOK_SECRET}"}


class GatewayDeliveryJourney(SequentialTaskSet):
    """Verify -> Deliver -> Redeliver -> Lookup.

    The first delivery must be processed; the redelivery must come back as
    a duplicate without running the pipeline again.
    """

    def on_start(self):
        self.state = DeliveryState()

    @task
    def verification_handshake(self):
        with self.client.get(
            WEBHOOK_PATH,
            catch_response=True,
            name="GET /webhooks/viva (verification)",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Verification failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def first_delivery(self):
        self.state.payload = webhook_payload()
        self.state.transaction_id = self.state.payload["EventData"]["TransactionId"]
        with self.client.post(
            WEBHOOK_PATH,
            json=self.state.payload,
            headers=_auth_headers(),
            catch_response=True,
            name="POST /webhooks/viva (first delivery)",
        ) as resp:
            self.state.deliveries += 1
            self.state.response_codes.append(response_code(resp))
            if resp.status_code != 200:
                resp.failure(f"Delivery failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def redelivery(self):
        with self.client.post(
            WEBHOOK_PATH,
            json=self.state.payload,
            headers=_auth_headers(),
            catch_response=True,
            name="POST /webhooks/viva (redelivery)",
        ) as resp:
            self.state.deliveries += 1
            code = response_code(resp)
            self.state.response_codes.append(code)
            if code != "DUPLICATE_DELIVERY":
                resp.failure(f"Redelivery was processed again: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def delivery_status(self):
        with self.client.get(
            f"/webhooks/deliveries/{self.state.transaction_id}",
            catch_response=True,
            name="GET /webhooks/deliveries/{id}",
        ) as resp:
            if resp.status_code != 200 or resp.json().get("status") != "Completed":
                resp.failure(f"Delivery not completed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class GatewayDeliveryUser(HttpUser):
    tasks = [GatewayDeliveryJourney]
    wait_time = between(0.5, 2)


class RedeliveryStormUser(HttpUser):
    """Concurrent redeliveries of a small pool of transactions.

    At most one delivery per transaction may report SUCCESS; every other
    answer is DUPLICATE_DELIVERY.
    """

    wait_time = constant_pacing(0.1)
    transaction_pool = [str(uuid.uuid4()) for _ in range(5)]
    payloads = {transaction_id: webhook_payload(transaction_id) for transaction_id in transaction_pool}

    @task
    def redeliver(self):
        transaction_id = random.choice(self.transaction_pool)
        with self.client.post(
            WEBHOOK_PATH,
            json=self.payloads[transaction_id],
            headers=_auth_headers(),
            catch_response=True,
            name="[STORM] POST /webhooks/viva",
        ) as resp:
            if response_code(resp) not in ("SUCCESS", "DUPLICATE_DELIVERY"):
                resp.failure(f"Unexpected answer: {resp.status_code} {extract_error_detail(resp)}")


class MalformedWebhookUser(HttpUser):
    """Rejected and unauthenticated traffic."""

    wait_time = between(0.5, 1.5)

    @task(3)
    def malformed(self):
        with self.client.post(
            WEBHOOK_PATH,
            json=malformed_webhook_payload(),
            headers=_auth_headers(),
            catch_response=True,
            name="POST /webhooks/viva (malformed)",
        ) as resp:
            if resp.status_code in (400, 200):
                resp.success()
            else:
                resp.failure(f"Unexpected status: {resp.status_code} {extract_error_detail(resp)}")

    @task(1)
    def unauthenticated(self):
        with self.client.post(
            WEBHOOK_PATH,
            json=webhook_payload(),
            catch_response=True,
            name="POST /webhooks/viva (no credential)",
        ) as resp:
            if resp.status_code == 401:
                resp.success()
            else:
                resp.failure(f"Expected 401, got {resp.status_code}")
