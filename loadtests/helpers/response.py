"""Response error extraction for load test observability.

Parses TicketStream API responses into human-readable messages.
Handles two response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Webhook responses: {"code": "...", "message": "..."}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def response_code(response: Response) -> str | None:
    """The ``code`` of a webhook response, or None for other shapes."""
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("code") if isinstance(body, dict) else None


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON: return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    # Pydantic validation errors: {"detail": [{"loc": [...], "msg": "..."}]}
    if isinstance(body, dict) and isinstance(body.get("detail"), list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if isinstance(body, dict) and "code" in body:
        return f"{body['code']}: {body.get('message', '')}"

    # Unknown shape: stringify and truncate
    return str(body)[:300]
