"""Resolved tenant routes."""

from tenancy.presentation.tenant.routes import router

__all__ = ["router"]
