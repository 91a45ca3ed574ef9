"""Admin session service: login and logout for city admins."""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.application.observability import (
    AdminSessionProbe,
    DefaultAdminSessionProbe,
)
from tenancy.application.security import (
    generate_session_token,
    hash_session_token,
    verify_password,
)
from tenancy.application.validator import Clock, utc_now
from tenancy.application.value_objects import IssuedSession
from tenancy.domain.aggregates import AdminSession, CityAdmin
from tenancy.domain.exceptions import InvalidCredentialsError
from tenancy.ports.repositories import IAdminSessionRepository, ICityAdminRepository


class AdminSessionService:
    """Issues and revokes opaque admin session tokens.

    A login is always scoped to the tenant resolved for the request. An
    admin of another city gets the same error as a wrong password.
    """

    def __init__(
        self,
        admin_repository: ICityAdminRepository,
        session_repository: IAdminSessionRepository,
        session: AsyncSession,
        ttl: timedelta,
        probe: AdminSessionProbe | None = None,
        clock: Clock = utc_now,
    ):
        self._admins = admin_repository
        self._sessions = session_repository
        self._session = session
        self._ttl = ttl
        self._probe = probe or DefaultAdminSessionProbe()
        self._clock = clock

    async def login(
        self, context: TenantContext, username: str, password: str
    ) -> IssuedSession:
        """Authenticate an admin of the resolved tenant and issue a session.

        Args:
            context: The resolved tenant for the request
            username: Admin username
            password: Plaintext password

        Returns:
            IssuedSession carrying the only copy of the token

        Raises:
            InvalidCredentialsError: Unknown user, wrong password or inactive
        """
        token = generate_session_token()
        now = self._clock()
        async with self._session.begin():
            admin = await self._admins.get_by_username(
                context.tenant, username.strip()
            )
            if not self._password_ok(admin, password):
                self._probe.login_failed(tenant=context.tenant, username=username)
                raise InvalidCredentialsError()
            assert admin is not None

            record = AdminSession(
                token_hash=hash_session_token(token),
                admin_id=admin.id,
                tenant=context.tenant,
                created_at=now,
                expires_at=now + self._ttl,
            )
            await self._sessions.add(record)

        self._probe.session_issued(admin_id=admin.id.value, tenant=context.tenant)
        return IssuedSession(token=token, expires_at=record.expires_at, admin=admin)

    async def logout(self, token: str | None) -> bool:
        """Revoke a session token.

        Returns:
            True if a live session was revoked, False otherwise
        """
        if not token:
            self._probe.session_revoke_missed()
            return False

        async with self._session.begin():
            revoked = await self._sessions.revoke(
                hash_session_token(token), revoked_at=self._clock()
            )

        if revoked:
            self._probe.session_revoked()
        else:
            self._probe.session_revoke_missed()
        return revoked

    async def list_admins(self, tenant: str) -> list[CityAdmin]:
        """List the admins of a tenant."""
        return await self._admins.list_for_tenant(tenant)

    @staticmethod
    def _password_ok(admin: CityAdmin | None, password: str) -> bool:
        if admin is None or not admin.is_active:
            # Still pay for one bcrypt check
            verify_password(password, None)
            return False
        return verify_password(password, admin.password_hash)
