"""PostgreSQL implementation of IFranchiseRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import Franchise
from tenancy.domain.value_objects import FranchiseStatus
from tenancy.infrastructure.models import FranchiseModel
from tenancy.infrastructure.observability import (
    DefaultRepositoryProbe,
    RepositoryProbe,
)
from tenancy.ports.repositories import IFranchiseRepository


def _to_domain(model: FranchiseModel) -> Franchise:
    return Franchise(
        slug=model.slug,
        subdomain=model.subdomain,
        display_name=model.display_name,
        status=FranchiseStatus(model.status),
        locale=model.locale,
    )


class FranchiseRepository(IFranchiseRepository):
    """Reads franchises. Inactive franchises are invisible to both lookups."""

    def __init__(
        self,
        session: AsyncSession,
        probe: RepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultRepositoryProbe()

    async def get_by_subdomain(self, subdomain: str) -> Franchise | None:
        stmt = select(FranchiseModel).where(
            FranchiseModel.subdomain == subdomain,
            FranchiseModel.status == FranchiseStatus.ACTIVE.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.entity_not_found("franchise", subdomain)
            return None

        self._probe.entity_retrieved("franchise", model.slug)
        return _to_domain(model)

    async def get_by_slug(self, slug: str) -> Franchise | None:
        stmt = select(FranchiseModel).where(
            FranchiseModel.slug == slug,
            FranchiseModel.status == FranchiseStatus.ACTIVE.value,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.entity_not_found("franchise", slug)
            return None

        self._probe.entity_retrieved("franchise", model.slug)
        return _to_domain(model)
