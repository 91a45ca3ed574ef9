"""Access validation: does this principal's resource belong to this tenant?

Every check runs in fail-fast order: cheap principal presence first,
then tenant resolution, then datastore reads. Every failure raises a
``TenancyError`` and every attempt, allowed or denied, produces exactly
one audit entry. An unexpected exception is audited as ``internal_error``
and re-raised.

``ensure_tenant_write`` is the guard for mutating handlers: call it with
the validated ``TenantContext`` and the tenant named in the payload
before writing anything.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TypeVar

from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.application.audit import AuditSink, StructlogAuditSink
from tenancy.application.observability import (
    AccessValidatorProbe,
    DefaultAccessValidatorProbe,
)
from tenancy.application.resolver import TenantResolver
from tenancy.application.security import hash_session_token
from tenancy.application.value_objects import (
    AdminBusinessContext,
    AdminContext,
    AuditEntry,
    InboundRequest,
    OwnerPrincipal,
    ValidatedContext,
)
from tenancy.domain.aggregates import BusinessProfile
from tenancy.domain.exceptions import AuthError, AuthorizationError, TenancyError
from tenancy.domain.value_objects import (
    BusinessId,
    Decision,
    PrincipalKind,
    ReasonCode,
    normalize_tenant,
)
from tenancy.ports.repositories import (
    IAdminSessionRepository,
    IBusinessRepository,
    ICityAdminRepository,
)

T = TypeVar("T")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class _Attempt:
    """Mutable scratchpad for one validation attempt's audit entry."""

    route: str
    principal_id: str | None = None
    resolved_tenant: str | None = None
    resource_tenant: str | None = None


class AccessValidator:
    """Cross-checks principals, resources and the resolved tenant.

    Not-found and tenant mismatch raise the same ``AuthorizationError`` so
    a response never reveals whether a resource exists in another tenant.
    Datastore errors are not retried; they become a denial.
    """

    def __init__(
        self,
        resolver: TenantResolver,
        business_repository: IBusinessRepository,
        admin_repository: ICityAdminRepository,
        session_repository: IAdminSessionRepository,
        audit: AuditSink | None = None,
        probe: AccessValidatorProbe | None = None,
        clock: Clock = utc_now,
    ):
        self._resolver = resolver
        self._businesses = business_repository
        self._admins = admin_repository
        self._sessions = session_repository
        self._audit = audit or StructlogAuditSink()
        self._probe = probe or DefaultAccessValidatorProbe()
        self._clock = clock

    async def validate_owner(
        self,
        request: InboundRequest,
        principal: OwnerPrincipal | None,
        allow_query_override: bool = False,
    ) -> ValidatedContext:
        """Validate that an owner's business belongs to the resolved tenant.

        Args:
            request: The inbound request
            principal: The authenticated owner, or None if unauthenticated
            allow_query_override: Whether the route honors the override
                parameter on fallback hosts

        Returns:
            ValidatedContext scoped to the owner's business

        Raises:
            AuthError: No principal (401)
            ResolutionError: No tenant (400) or override rejected (403)
            AuthorizationError: Not found, mismatch or datastore error (403)
        """
        attempt = _Attempt(
            route=request.route,
            principal_id=principal.user_id if principal else None,
        )
        return await self._audited(
            attempt,
            lambda: self._validate_owner(
                attempt, request, principal, allow_query_override
            ),
        )

    async def validate_admin(
        self,
        request: InboundRequest,
        session_token: str | None,
        allow_query_override: bool = False,
    ) -> AdminContext:
        """Validate an admin session against the resolved tenant.

        The admin record is re-read from the datastore on every call, so
        deactivating an admin or moving them to another city takes effect
        immediately regardless of outstanding sessions.

        Raises:
            AuthError: Missing, unknown, expired or revoked session (401)
            ResolutionError: No tenant (400) or override rejected (403)
            AuthorizationError: Not an active admin of this tenant (403)
        """
        attempt = _Attempt(route=request.route)
        return await self._audited(
            attempt,
            lambda: self._validate_admin(
                attempt, request, session_token, allow_query_override
            ),
        )

    async def validate_admin_business(
        self,
        request: InboundRequest,
        session_token: str | None,
        business_id: str,
    ) -> AdminBusinessContext:
        """Validate an admin and a business they want to act on.

        The business must exist and belong to the admin's resolved tenant.
        A malformed ID is treated like a missing business.
        """
        attempt = _Attempt(route=request.route)

        async def run() -> AdminBusinessContext:
            admin = await self._validate_admin(attempt, request, session_token, False)
            business = await self._load_business_by_id(attempt, business_id)
            self._require_same_tenant(attempt, admin.tenant, business)
            return AdminBusinessContext(admin=admin, business=business)

        return await self._audited(attempt, run)

    def ensure_tenant_write(
        self,
        context: TenantContext,
        target_tenant: str | None,
        principal_id: str | None = None,
        route: str = "",
    ) -> None:
        """Reject a write whose payload names a tenant other than the resolved one.

        Raises:
            AuthorizationError: If ``target_tenant`` is blank or differs (403)
        """
        attempt = _Attempt(
            route=route,
            principal_id=principal_id,
            resolved_tenant=context.tenant,
            resource_tenant=target_tenant,
        )
        target = normalize_tenant(target_tenant)
        if not target or target != normalize_tenant(context.tenant):
            self._probe.tenant_mismatch(
                principal_id=principal_id or "",
                resolved_tenant=context.tenant,
                resource_tenant=target_tenant or "",
            )
            self._record(attempt, Decision.DENY, ReasonCode.TENANT_MISMATCH)
            raise AuthorizationError(ReasonCode.TENANT_MISMATCH)
        self._record(attempt, Decision.ALLOW, ReasonCode.OK)

    async def _audited(
        self, attempt: _Attempt, run: Callable[[], Awaitable[T]]
    ) -> T:
        try:
            result = await run()
        except TenancyError as e:
            self._record(attempt, Decision.DENY, e.reason)
            raise
        except Exception:
            self._record(attempt, Decision.DENY, ReasonCode.INTERNAL_ERROR)
            raise
        self._record(attempt, Decision.ALLOW, ReasonCode.OK)
        return result

    def _record(
        self, attempt: _Attempt, decision: Decision, reason: ReasonCode
    ) -> None:
        self._audit.record(
            AuditEntry(
                timestamp=self._clock(),
                principal_id=attempt.principal_id,
                route=attempt.route,
                resolved_tenant=attempt.resolved_tenant,
                resource_tenant=attempt.resource_tenant,
                decision=decision,
                reason_code=reason,
            )
        )

    async def _validate_owner(
        self,
        attempt: _Attempt,
        request: InboundRequest,
        principal: OwnerPrincipal | None,
        allow_query_override: bool,
    ) -> ValidatedContext:
        if principal is None:
            self._probe.principal_missing(route=request.route)
            raise AuthError(ReasonCode.UNAUTHENTICATED)

        context = await self._resolver.resolve_or_raise(request, allow_query_override)
        attempt.resolved_tenant = context.tenant

        try:
            business = await self._businesses.get_by_owner(principal.user_id)
        except Exception as e:
            self._probe.datastore_error(operation="get_business_by_owner", error=e)
            raise AuthorizationError(ReasonCode.DATASTORE_ERROR) from e

        if business is None:
            self._probe.resource_not_found(principal_id=principal.user_id)
            raise AuthorizationError(ReasonCode.RESOURCE_NOT_FOUND)

        attempt.resource_tenant = business.tenant
        self._require_same_tenant(attempt, context.tenant, business)

        self._probe.access_granted(
            principal_id=principal.user_id,
            tenant=context.tenant,
            kind=PrincipalKind.OWNER.value,
        )
        return ValidatedContext(
            resource_id=business.id,
            tenant=context.tenant,
            principal_id=principal.user_id,
            resource=business,
            tenant_context=context,
        )

    async def _validate_admin(
        self,
        attempt: _Attempt,
        request: InboundRequest,
        session_token: str | None,
        allow_query_override: bool,
    ) -> AdminContext:
        if not session_token:
            self._probe.principal_missing(route=request.route)
            raise AuthError(ReasonCode.UNAUTHENTICATED)

        context = await self._resolver.resolve_or_raise(request, allow_query_override)
        attempt.resolved_tenant = context.tenant

        try:
            session = await self._sessions.get_by_token_hash(
                hash_session_token(session_token)
            )
        except Exception as e:
            self._probe.datastore_error(operation="get_admin_session", error=e)
            raise AuthorizationError(ReasonCode.DATASTORE_ERROR) from e

        if session is None:
            self._probe.session_invalid(reason="not_found")
            raise AuthError(ReasonCode.SESSION_INVALID)
        if session.revoked_at is not None:
            self._probe.session_invalid(reason="revoked")
            raise AuthError(ReasonCode.SESSION_INVALID)
        if not session.is_usable(self._clock()):
            self._probe.session_invalid(reason="expired")
            raise AuthError(ReasonCode.SESSION_INVALID)

        attempt.principal_id = session.admin_id.value
        attempt.resource_tenant = session.tenant

        if normalize_tenant(session.tenant) != context.tenant:
            self._probe.tenant_mismatch(
                principal_id=session.admin_id.value,
                resolved_tenant=context.tenant,
                resource_tenant=session.tenant,
            )
            raise AuthorizationError(ReasonCode.TENANT_MISMATCH)

        try:
            admin = await self._admins.get_active_for_tenant(
                session.admin_id, context.tenant
            )
        except Exception as e:
            self._probe.datastore_error(operation="get_city_admin", error=e)
            raise AuthorizationError(ReasonCode.DATASTORE_ERROR) from e

        if admin is None or not admin.is_active:
            self._probe.admin_not_confirmed(
                admin_id=session.admin_id.value, tenant=context.tenant
            )
            raise AuthorizationError(ReasonCode.ADMIN_NOT_CONFIRMED)

        self._probe.access_granted(
            principal_id=admin.id.value,
            tenant=context.tenant,
            kind=PrincipalKind.ADMIN.value,
        )
        return AdminContext(
            admin_id=admin.id,
            tenant=context.tenant,
            username=admin.username,
            tenant_context=context,
        )

    async def _load_business_by_id(
        self, attempt: _Attempt, business_id: str
    ) -> BusinessProfile:
        try:
            parsed = BusinessId.from_string(business_id)
        except ValueError as e:
            self._probe.resource_not_found(principal_id=attempt.principal_id or "")
            raise AuthorizationError(ReasonCode.RESOURCE_NOT_FOUND) from e

        try:
            business = await self._businesses.get_by_id(parsed)
        except Exception as e:
            self._probe.datastore_error(operation="get_business_by_id", error=e)
            raise AuthorizationError(ReasonCode.DATASTORE_ERROR) from e

        if business is None:
            self._probe.resource_not_found(principal_id=attempt.principal_id or "")
            raise AuthorizationError(ReasonCode.RESOURCE_NOT_FOUND)

        attempt.resource_tenant = business.tenant
        return business

    def _require_same_tenant(
        self, attempt: _Attempt, tenant: str, business: BusinessProfile
    ) -> None:
        if business.belongs_to(tenant):
            return
        self._probe.tenant_mismatch(
            principal_id=attempt.principal_id or "",
            resolved_tenant=tenant,
            resource_tenant=business.tenant,
            resource_id=business.id.value,
        )
        raise AuthorizationError(ReasonCode.TENANT_MISMATCH)
