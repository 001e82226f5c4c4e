"""FastAPI routes for payment webhooks.

The gateway verifies the endpoint with a GET (answered with the key it
issued) and then POSTs transaction events to the same path.
"""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from shared.errors import ErrorCode

from payments.gateway import get_gateway
from payments.gateway.port import GatewayError
from reconciliation.api.schemas import DeliveryResponse, WebhookKeyResponse, WebhookResponse
from reconciliation.delivery.ledger import DeliveryLedger
from reconciliation.domain import reconciliation
from reconciliation.webhook.authentication import WebhookAuthenticator
from reconciliation.webhook.pipeline import WebhookPipeline, create_pipeline

logger = structlog.get_logger(__name__)

WEBHOOK_PATH = "/viva/transaction-payment-created"

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def get_authenticator() -> WebhookAuthenticator:
    return WebhookAuthenticator()


def get_pipeline() -> WebhookPipeline:
    return create_pipeline()


def _handle_webhook(pipeline: WebhookPipeline, raw):
    """Run one delivery on a worker thread inside the domain context."""
    with reconciliation.domain_context():
        return pipeline.handle(raw)


def _fetch_webhook_key() -> str | None:
    try:
        return get_gateway().fetch_webhook_key()
    except GatewayError as exc:
        logger.error("Webhook key fetch failed", error=str(exc))
        return None


@router.post(WEBHOOK_PATH, response_model=WebhookResponse)
async def transaction_payment_created(
    request: Request,
    authenticator: WebhookAuthenticator = Depends(get_authenticator),
    pipeline: WebhookPipeline = Depends(get_pipeline),
):
    """Receive a "Transaction Payment Created" event from the gateway."""
    if not authenticator.is_permitted(request.headers, request.query_params):
        return JSONResponse(
            status_code=401,
            content={"code": ErrorCode.UNAUTHORIZED.value, "message": "Unauthorized"},
        )

    try:
        raw = await request.json()
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        raw = None

    outcome = await run_in_threadpool(_handle_webhook, pipeline, raw)
    return JSONResponse(status_code=outcome.http_status, content=outcome.body())


@router.get(WEBHOOK_PATH, response_model=WebhookKeyResponse)
async def webhook_verification_key():
    """Answer the gateway's endpoint verification with its webhook key."""
    key = await run_in_threadpool(_fetch_webhook_key)

    if not key:
        return JSONResponse(
            status_code=500,
            content={
                "code": ErrorCode.WEBHOOK_KEY_UNAVAILABLE.value,
                "message": "Failed to generate webhook verification key",
            },
        )
    return JSONResponse(content={"Key": key})


@router.get("/deliveries/{transaction_id}", response_model=DeliveryResponse)
async def get_delivery(transaction_id: str):
    """Look up the processing record of a webhook delivery."""
    delivery = DeliveryLedger().get(transaction_id)
    if delivery is None:
        return JSONResponse(
            status_code=404,
            content={"code": "NOT_FOUND", "message": f"No delivery for transaction {transaction_id}"},
        )
    return JSONResponse(content=delivery.to_dict())
