"""Repository protocols (ports) for the entitlements bounded context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from entitlements.domain.snapshots import SubscriptionSnapshot


@runtime_checkable
class ISubscriptionRepository(Protocol):
    """Read access to business subscription records."""

    async def get_latest_for_business(
        self, business_id: str
    ) -> SubscriptionSnapshot | None:
        """Retrieve the subscription record with the greatest created_at.

        Args:
            business_id: The business identifier (ULID string)

        Returns:
            The latest SubscriptionSnapshot, or None if the business has none
        """
        ...
