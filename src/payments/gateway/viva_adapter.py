"""Viva Wallet gateway adapter.

Checkout sessions use the OAuth client-credentials flow against the
accounts host and then ``POST /checkout/v2/orders`` on the API host. The
webhook verification key is fetched with basic auth (merchant id and API
key) from the messages endpoint.
"""

import httpx
import structlog

from payments.gateway.port import CheckoutSession, GatewayError, PaymentGateway

logger = structlog.get_logger(__name__)

ENVIRONMENTS = {
    "demo": {
        "accounts": "https://demo-accounts.vivapayments.com",
        "api": "https://demo-api.vivapayments.com",
        "web": "https://demo.vivapayments.com",
    },
    "live": {
        "accounts": "https://accounts.vivapayments.com",
        "api": "https://api.vivapayments.com",
        "web": "https://www.vivapayments.com",
    },
}


class VivaGateway(PaymentGateway):
    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        merchant_id: str | None,
        api_key: str | None,
        environment: str = "demo",
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if environment not in ENVIRONMENTS:
            raise ValueError(f"Unknown Viva environment: {environment}")
        self.client_id = client_id
        self.client_secret = client_secret
        self.merchant_id = merchant_id
        self.api_key = api_key
        self.urls = ENVIRONMENTS[environment]
        self._client = httpx.Client(timeout=timeout, transport=transport)

    def _access_token(self) -> str:
        if not self.client_id or not self.client_secret:
            raise GatewayError("Viva OAuth credentials are not configured")
        try:
            response = self._client.post(
                f"{self.urls['accounts']}/connect/token",
                data={"grant_type": "client_credentials"},
                auth=(self.client_id, self.client_secret),
            )
            response.raise_for_status()
            return response.json()["access_token"]
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            raise GatewayError(f"Could not obtain Viva access token: {exc}") from exc

    def create_checkout_session(self, payment_data: dict) -> CheckoutSession:
        token = self._access_token()
        try:
            response = self._client.post(
                f"{self.urls['api']}/checkout/v2/orders",
                json=payment_data,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise GatewayError(f"Viva checkout request failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning("Viva rejected checkout", status_code=response.status_code, body=response.text[:500])
            return CheckoutSession(
                success=False,
                gateway_response=response.text[:1000],
                failure_reason=f"Viva answered {response.status_code}",
            )

        order_code = str(response.json().get("orderCode", ""))
        if not order_code:
            return CheckoutSession(success=False, failure_reason="Viva returned no orderCode")
        return CheckoutSession(
            success=True,
            order_code=order_code,
            redirect_url=f"{self.urls['web']}/web/checkout?ref={order_code}",
            gateway_response=response.text[:1000],
        )

    def fetch_webhook_key(self) -> str:
        if not self.merchant_id or not self.api_key:
            raise GatewayError("Viva merchant credentials are not configured")
        try:
            response = self._client.get(
                f"{self.urls['web']}/api/messages/config/token",
                auth=(self.merchant_id, self.api_key),
            )
            response.raise_for_status()
            return response.json().get("Key", "")
        except (httpx.HTTPError, ValueError) as exc:
            raise GatewayError(f"Could not fetch Viva webhook key: {exc}") from exc
