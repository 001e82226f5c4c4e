"""TicketStream FastAPI application.

Receives payment gateway webhooks and reconciles them with ticket orders.
Each webhook request is wrapped in the reconciliation domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Initialized at module level; uvicorn workers share it.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from reconciliation.domain import reconciliation  # noqa: E402

reconciliation.init()

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/webhooks": reconciliation,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: health check and docs
    return await call_next(request)


async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {"reconciliation": {"name": reconciliation.name}},
        }
    )


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
def create_app() -> FastAPI:
    from reconciliation.api import router as webhook_router

    application = FastAPI(
        title="TicketStream API",
        description="Payment webhook reconciliation and ticket delivery",
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.middleware("http")(domain_context_middleware)
    application.include_router(webhook_router)
    application.add_api_route("/health", health, methods=["GET"])
    return application


app = create_app()
