"""Admin session and roster routes."""

from tenancy.presentation.admin.routes import router

__all__ = ["router"]
