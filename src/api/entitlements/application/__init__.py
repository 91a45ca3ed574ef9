"""Application layer for the entitlements bounded context."""

from entitlements.application.services import EntitlementService

__all__ = ["EntitlementService"]
