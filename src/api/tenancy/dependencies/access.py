"""Access validator and admin session dependencies.

``get_validated_owner`` and ``get_admin_context`` are what routes depend
on. Each runs a full, audited validation per request.
"""

from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.settings import get_session_settings
from shared_kernel.observability_context import ObservationContext
from tenancy.application.audit import StructlogAuditSink
from tenancy.application.observability import (
    DefaultAccessValidatorProbe,
    DefaultAdminSessionProbe,
)
from tenancy.application.resolver import TenantResolver
from tenancy.application.sessions import AdminSessionService
from tenancy.application.validator import AccessValidator
from tenancy.application.value_objects import (
    AdminContext,
    InboundRequest,
    OwnerPrincipal,
    ValidatedContext,
)
from tenancy.dependencies.authentication import (
    get_admin_session_token,
    get_owner_principal,
)
from tenancy.dependencies.request import get_inbound_request, get_observation_context
from tenancy.dependencies.resolver import get_tenant_resolver
from tenancy.infrastructure.admin_repository import (
    AdminSessionRepository,
    CityAdminRepository,
)
from tenancy.infrastructure.business_repository import BusinessRepository
from tenancy.infrastructure.observability import DefaultRepositoryProbe


def get_access_validator(
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
    session: Annotated[AsyncSession, Depends(get_read_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> AccessValidator:
    """Get an AccessValidator reading from the request's read session."""
    repo_probe = DefaultRepositoryProbe().with_context(context)
    return AccessValidator(
        resolver=resolver,
        business_repository=BusinessRepository(session, probe=repo_probe),
        admin_repository=CityAdminRepository(session, probe=repo_probe),
        session_repository=AdminSessionRepository(session, probe=repo_probe),
        audit=StructlogAuditSink(),
        probe=DefaultAccessValidatorProbe().with_context(context),
    )


def get_admin_session_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> AdminSessionService:
    """Get an AdminSessionService bound to the write session."""
    repo_probe = DefaultRepositoryProbe().with_context(context)
    return AdminSessionService(
        admin_repository=CityAdminRepository(session, probe=repo_probe),
        session_repository=AdminSessionRepository(session, probe=repo_probe),
        session=session,
        ttl=timedelta(minutes=get_session_settings().ttl_minutes),
        probe=DefaultAdminSessionProbe().with_context(context),
    )


async def get_validated_owner(
    inbound: Annotated[InboundRequest, Depends(get_inbound_request)],
    principal: Annotated[OwnerPrincipal | None, Depends(get_owner_principal)],
    validator: Annotated[AccessValidator, Depends(get_access_validator)],
) -> ValidatedContext:
    """Validate the owner's business against the resolved tenant.

    Raises:
        TenancyError: 400, 401 or 403 as mapped by the exception handler
    """
    return await validator.validate_owner(inbound, principal)


async def get_admin_context(
    inbound: Annotated[InboundRequest, Depends(get_inbound_request)],
    token: Annotated[str | None, Depends(get_admin_session_token)],
    validator: Annotated[AccessValidator, Depends(get_access_validator)],
) -> AdminContext:
    """Validate the admin session against the resolved tenant."""
    return await validator.validate_admin(inbound, token)
