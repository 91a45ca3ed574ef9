"""PostgreSQL implementation of IBusinessRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import BusinessProfile
from tenancy.domain.value_objects import BusinessId
from tenancy.infrastructure.models import BusinessProfileModel
from tenancy.infrastructure.observability import (
    DefaultRepositoryProbe,
    RepositoryProbe,
)
from tenancy.ports.repositories import IBusinessRepository


class BusinessRepository(IBusinessRepository):
    """Reads business profiles.

    Lookups are deliberately not filtered by tenant. The access validator
    compares the stored tenant with the resolved one so that a mismatch
    can be logged and audited rather than looking like a missing row.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: RepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultRepositoryProbe()

    async def get_by_owner(self, owner_user_id: str) -> BusinessProfile | None:
        """Fetch the single business owned by a user.

        Returns None when the owner has none, and also when the owner is
        linked to more than one business.
        """
        stmt = (
            select(BusinessProfileModel)
            .where(BusinessProfileModel.owner_user_id == owner_user_id)
            .limit(2)
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        if not models:
            self._probe.entity_not_found("business", owner_user_id)
            return None
        if len(models) > 1:
            self._probe.ambiguous_owner(owner_user_id, len(models))
            return None

        self._probe.entity_retrieved("business", models[0].id)
        return self._to_domain(models[0])

    async def get_by_id(self, business_id: BusinessId) -> BusinessProfile | None:
        stmt = select(BusinessProfileModel).where(
            BusinessProfileModel.id == business_id.value
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.entity_not_found("business", business_id.value)
            return None

        self._probe.entity_retrieved("business", model.id)
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: BusinessProfileModel) -> BusinessProfile:
        return BusinessProfile(
            id=BusinessId(value=model.id),
            tenant=model.tenant,
            name=model.name,
            status=model.status,
            owner_user_id=model.owner_user_id,
        )
