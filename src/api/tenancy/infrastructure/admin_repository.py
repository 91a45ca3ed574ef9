"""PostgreSQL implementations of the city admin and admin session ports."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.domain.aggregates import AdminSession, CityAdmin
from tenancy.domain.value_objects import AdminId
from tenancy.infrastructure.models import AdminSessionModel, CityAdminModel
from tenancy.infrastructure.observability import (
    DefaultRepositoryProbe,
    RepositoryProbe,
)
from tenancy.ports.repositories import IAdminSessionRepository, ICityAdminRepository


def _admin_to_domain(model: CityAdminModel) -> CityAdmin:
    return CityAdmin(
        id=AdminId(value=model.id),
        tenant=model.tenant,
        username=model.username,
        password_hash=model.password_hash,
        is_active=model.is_active,
        email=model.email,
        full_name=model.full_name,
    )


class CityAdminRepository(ICityAdminRepository):
    """Reads city admins, always scoped by tenant."""

    def __init__(
        self,
        session: AsyncSession,
        probe: RepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultRepositoryProbe()

    async def get_active_for_tenant(
        self, admin_id: AdminId, tenant: str
    ) -> CityAdmin | None:
        stmt = select(CityAdminModel).where(
            CityAdminModel.id == admin_id.value,
            CityAdminModel.tenant == tenant,
            CityAdminModel.is_active.is_(True),
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.entity_not_found("city_admin", admin_id.value)
            return None

        self._probe.entity_retrieved("city_admin", model.id)
        return _admin_to_domain(model)

    async def get_by_username(self, tenant: str, username: str) -> CityAdmin | None:
        stmt = select(CityAdminModel).where(
            CityAdminModel.tenant == tenant,
            CityAdminModel.username == username,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.entity_not_found("city_admin", username)
            return None

        self._probe.entity_retrieved("city_admin", model.id)
        return _admin_to_domain(model)

    async def list_for_tenant(self, tenant: str) -> list[CityAdmin]:
        stmt = (
            select(CityAdminModel)
            .where(CityAdminModel.tenant == tenant)
            .order_by(CityAdminModel.created_at)
        )
        result = await self._session.execute(stmt)
        admins = [_admin_to_domain(model) for model in result.scalars().all()]

        self._probe.entities_listed("city_admin", len(admins))
        return admins


class AdminSessionRepository(IAdminSessionRepository):
    """Stores admin sessions by token digest.

    Writes only flush; the calling service owns the transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: RepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultRepositoryProbe()

    async def add(self, session: AdminSession) -> None:
        self._session.add(
            AdminSessionModel(
                token_hash=session.token_hash,
                admin_id=session.admin_id.value,
                tenant=session.tenant,
                created_at=session.created_at,
                expires_at=session.expires_at,
                revoked_at=session.revoked_at,
            )
        )
        await self._session.flush()
        self._probe.session_stored(session.admin_id.value)

    async def get_by_token_hash(self, token_hash: str) -> AdminSession | None:
        stmt = select(AdminSessionModel).where(
            AdminSessionModel.token_hash == token_hash
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            # Never log the digest itself
            self._probe.entity_not_found("admin_session", "<redacted>")
            return None

        self._probe.entity_retrieved("admin_session", model.admin_id)
        return AdminSession(
            token_hash=model.token_hash,
            admin_id=AdminId(value=model.admin_id),
            tenant=model.tenant,
            created_at=model.created_at,
            expires_at=model.expires_at,
            revoked_at=model.revoked_at,
        )

    async def revoke(self, token_hash: str, revoked_at: datetime) -> bool:
        stmt = (
            update(AdminSessionModel)
            .where(
                AdminSessionModel.token_hash == token_hash,
                AdminSessionModel.revoked_at.is_(None),
            )
            .values(revoked_at=revoked_at)
        )
        result = await self._session.execute(stmt)
        revoked = bool(result.rowcount)
        self._probe.session_revoked(revoked)
        return revoked
