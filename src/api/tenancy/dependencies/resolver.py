"""Tenant resolver dependencies.

Routes depend on ``get_tenant_context`` (override ignored) or
``get_tenant_context_with_override`` (override honored on fallback
hosts). Neither re-reads headers after resolution; the resulting
``TenantContext`` is passed explicitly from here on.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.dependencies import get_read_session
from infrastructure.settings import get_tenancy_settings
from shared_kernel.middleware.observability import DefaultTenantContextProbe
from shared_kernel.middleware.tenant_context import TenantContext
from shared_kernel.observability_context import ObservationContext
from tenancy.application.hostname import HostPolicy
from tenancy.application.resolver import TenantResolver
from tenancy.application.value_objects import InboundRequest
from tenancy.dependencies.request import get_inbound_request, get_observation_context
from tenancy.infrastructure.franchise_repository import FranchiseRepository
from tenancy.infrastructure.observability import DefaultRepositoryProbe


@lru_cache
def get_host_policy() -> HostPolicy:
    """Build the hostname policy once from tenancy settings."""
    settings = get_tenancy_settings()
    return HostPolicy(
        base_domains=tuple(settings.base_domains),
        fallback_hosts=frozenset(settings.fallback_hosts),
        fallback_host_suffixes=tuple(settings.fallback_host_suffixes),
        reserved_subdomains=frozenset(settings.reserved_subdomains),
    )


def get_franchise_repository(
    session: Annotated[AsyncSession, Depends(get_read_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> FranchiseRepository:
    return FranchiseRepository(
        session=session,
        probe=DefaultRepositoryProbe().with_context(context),
    )


def get_tenant_resolver(
    franchise_repository: Annotated[
        FranchiseRepository, Depends(get_franchise_repository)
    ],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> TenantResolver:
    """Get a TenantResolver configured from settings.

    Returns:
        TenantResolver with a probe bound to the request's context
    """
    settings = get_tenancy_settings()
    return TenantResolver(
        franchise_repository=franchise_repository,
        policy=get_host_policy(),
        default_tenant=settings.default_tenant,
        trust_forwarded_host=settings.trust_forwarded_host,
        override_param=settings.override_param,
        probe=DefaultTenantContextProbe().with_context(context),
    )


async def get_tenant_context(
    inbound: Annotated[InboundRequest, Depends(get_inbound_request)],
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
) -> TenantContext:
    """Resolve the tenant, ignoring any override parameter on fallback hosts.

    Raises:
        ResolutionError: 400 when no tenant resolves, 403 when an override
            was sent to a tenant host
    """
    return await resolver.resolve_or_raise(inbound, allow_query_override=False)


async def get_tenant_context_with_override(
    inbound: Annotated[InboundRequest, Depends(get_inbound_request)],
    resolver: Annotated[TenantResolver, Depends(get_tenant_resolver)],
) -> TenantContext:
    """Resolve the tenant, honoring the override parameter on fallback hosts."""
    return await resolver.resolve_or_raise(inbound, allow_query_override=True)
