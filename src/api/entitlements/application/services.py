"""Entitlement application service."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from entitlements.domain.features import FeatureAccess, feature_access
from entitlements.domain.snapshots import EntitledBusiness
from entitlements.domain.state_machine import EntitlementResult, compute_entitlement
from entitlements.ports.repositories import ISubscriptionRepository


def _utc_now() -> datetime:
    return datetime.now(UTC)


class EntitlementService:
    """Loads a business's latest subscription and computes its entitlement.

    The business must already be validated against the resolved tenant by
    the caller. The clock is read once per evaluation.
    """

    def __init__(
        self,
        subscription_repository: ISubscriptionRepository,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self._subscriptions = subscription_repository
        self._clock = clock

    async def entitlement_for(
        self, business_id: str, business: EntitledBusiness
    ) -> EntitlementResult:
        """Compute the entitlement of an already validated business.

        Args:
            business_id: ID used to load the latest subscription
            business: The business record (owner and status)

        Returns:
            The derived EntitlementResult
        """
        subscription = await self._subscriptions.get_latest_for_business(business_id)
        return compute_entitlement(business, subscription, self._clock())

    async def features_for(
        self, business_id: str, business: EntitledBusiness
    ) -> tuple[EntitlementResult, FeatureAccess]:
        """Compute the entitlement and the features it unlocks."""
        result = await self.entitlement_for(business_id, business)
        return result, feature_access(result)
