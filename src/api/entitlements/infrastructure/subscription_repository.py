"""PostgreSQL implementation of ISubscriptionRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from entitlements.domain.snapshots import SubscriptionSnapshot
from entitlements.infrastructure.models import BusinessSubscriptionModel
from entitlements.infrastructure.observability import (
    DefaultSubscriptionRepositoryProbe,
    SubscriptionRepositoryProbe,
)
from entitlements.ports.repositories import ISubscriptionRepository


class SubscriptionRepository(ISubscriptionRepository):
    """Reads the latest subscription row per business."""

    def __init__(
        self,
        session: AsyncSession,
        probe: SubscriptionRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultSubscriptionRepositoryProbe()

    async def get_latest_for_business(
        self, business_id: str
    ) -> SubscriptionSnapshot | None:
        stmt = (
            select(BusinessSubscriptionModel)
            .where(BusinessSubscriptionModel.business_id == business_id)
            .order_by(
                BusinessSubscriptionModel.created_at.desc(),
                BusinessSubscriptionModel.id.desc(),
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.subscription_not_found(business_id)
            return None

        self._probe.subscription_retrieved(business_id, model.status)
        return SubscriptionSnapshot(
            is_in_free_trial=model.is_in_free_trial,
            free_trial_end_date=model.free_trial_end_date,
            status=model.status,
            current_period_end=model.current_period_end,
            tier_name=model.tier_name,
            tier_display_name=model.tier_display_name,
        )
