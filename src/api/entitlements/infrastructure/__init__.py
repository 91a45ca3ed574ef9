"""Infrastructure layer for the entitlements bounded context."""
