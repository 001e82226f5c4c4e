"""Reconciliation API package."""

from reconciliation.api.routes import router

__all__ = ["router"]
