"""Pydantic response schemas for the webhook API.

The inbound webhook body is deliberately not declared here: it is read as
raw JSON and handed to the pipeline, which owns validation.
"""

from pydantic import BaseModel, ConfigDict, Field


class WebhookData(BaseModel):
    orderCode: str
    transactionId: str
    amount: float
    currencyCode: str | None = None
    merchantId: str | None = None
    orderId: str | None = None
    eventId: str | None = None


class WebhookResponse(BaseModel):
    code: str
    message: str
    data: WebhookData | None = None

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "code": "SUCCESS",
                    "message": "Webhook processed successfully",
                    "data": {
                        "orderCode": "7364820394021234",
                        "transactionId": "b7c1e6a2-0d6f-4a57-9b13-4f2d5c9e8a10",
                        "amount": 25.0,
                        "currencyCode": "978",
                        "merchantId": "merchant-1",
                        "orderId": "10231",
                        "eventId": "5f0c9a3e-8d2b-4c1a-9e7f-1b2c3d4e5f60",
                    },
                }
            ]
        }
    )


class WebhookKeyResponse(BaseModel):
    key: str = Field(alias="Key")

    model_config = ConfigDict(populate_by_name=True)


class DeliveryResponse(BaseModel):
    transaction_id: str
    order_code: str | None = None
    order_id: str | None = None
    event_id: str | None = None
    status: str
    attempts: int
    locked_until: str | None = None
    response_code: str | None = None
    order_confirmed: bool
    tickets_retrieved: bool
    notification_sent: bool
    failure_reason: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
