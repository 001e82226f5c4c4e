"""HTTP contact service adapter."""

import httpx

from notifications.channel.contact_port import ContactServiceError, ContactServicePort


class HttpContactService(ContactServicePort):
    def __init__(
        self,
        base_url: str,
        api_key: str | None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.Client(base_url=base_url, timeout=timeout, headers=headers, transport=transport)

    def _post(self, url: str, payload: dict) -> dict:
        try:
            response = self._client.post(url, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            raise ContactServiceError(f"Contact service answered {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise ContactServiceError(f"Contact service unreachable: {exc}") from exc
        except ValueError as exc:
            raise ContactServiceError("Contact service returned a non-JSON body") from exc

    def create_or_update_contact(self, info: dict, allow_duplicates: bool = True) -> str | None:
        body = self._post("/contacts", {"info": info, "allowDuplicates": allow_duplicates})
        return body.get("contactId") or (body.get("contact") or {}).get("id")

    def send_templated_email(self, template_id: str, contact_id: str, variables: dict) -> dict:
        body = self._post(
            f"/triggered-emails/{template_id}/contacts/{contact_id}",
            {"variables": variables},
        )
        return {
            "message_id": body.get("messageId"),
            "status": body.get("status", "sent"),
            "error": body.get("error"),
        }

    def close(self):
        self._client.close()
