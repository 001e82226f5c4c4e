"""HTTP order service adapter.

Talks to the ticketing order service over its JSON API. Every request
carries a bounded timeout; transport failures, timeouts, auth rejections and
5xx answers surface as OrderServiceUnavailable so callers can treat them as
recoverable.
"""

from urllib.parse import quote

import httpx
import structlog

from reconciliation.orders.port import (
    OrderServiceError,
    OrderServicePort,
    OrderServiceUnavailable,
)

logger = structlog.get_logger(__name__)


def _segment(value) -> str:
    """Percent-encode one path segment, slashes included."""
    encoded = quote(str(value), safe="")
    if encoded in (".", ".."):
        encoded = encoded.replace(".", "%2E")
    return encoded


class HttpOrderService(OrderServicePort):
    def __init__(
        self,
        base_url: str,
        system_token: str | None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.system_token = system_token
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def _headers(self, elevated: bool) -> dict:
        headers = {"Accept": "application/json"}
        if elevated:
            if not self.system_token:
                raise OrderServiceUnavailable("Elevated call requested but no system token is configured")
            headers["Authorization"] = f"Bearer {self.system_token}"
        return headers

    def _request(self, method: str, url: str, elevated: bool, **kwargs) -> dict:
        try:
            response = self._client.request(method, url, headers=self._headers(elevated), **kwargs)
        except httpx.TimeoutException as exc:
            raise OrderServiceUnavailable(f"Order service timed out: {exc}") from exc
        except httpx.TransportError as exc:
            raise OrderServiceUnavailable(f"Order service unreachable: {exc}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise OrderServiceError(f"Order service request failed: {exc}") from exc

        if response.status_code in (401, 403) or response.status_code >= 500:
            raise OrderServiceUnavailable(
                f"Order service answered {response.status_code}",
                details={"status_code": response.status_code, "body": response.text[:500]},
            )
        if response.status_code >= 400:
            raise OrderServiceError(
                f"Order service rejected the request with {response.status_code}",
                details={"status_code": response.status_code, "body": response.text[:500]},
            )

        try:
            return response.json()
        except ValueError as exc:
            raise OrderServiceError("Order service returned a non-JSON body") from exc

    def confirm_order(self, event_id: str, order_numbers: list[str], elevated: bool = False) -> dict:
        logger.debug("Confirming orders", event_id=event_id, order_numbers=order_numbers)
        return self._request(
            "POST",
            f"/events/{_segment(event_id)}/orders/confirm",
            elevated,
            json={"orderNumber": list(order_numbers)},
        )

    def get_order(self, identifiers: dict, fieldset: list[str], elevated: bool = False) -> dict:
        event_id = identifiers["eventId"]
        order_number = identifiers["orderNumber"]
        logger.debug("Fetching order", event_id=event_id, order_number=order_number)
        return self._request(
            "GET",
            f"/events/{_segment(event_id)}/orders/{_segment(order_number)}",
            elevated,
            params={"fieldset": list(fieldset)},
        )

    def close(self) -> None:
        self._client.close()
