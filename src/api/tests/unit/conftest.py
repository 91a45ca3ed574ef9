"""Unit test fixtures with mocked dependencies."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from tenancy.application.hostname import HostPolicy
from tenancy.application.resolver import TenantResolver
from tenancy.domain.aggregates import BusinessProfile, CityAdmin, Franchise
from tenancy.domain.value_objects import (
    AdminId,
    BusinessId,
    FranchiseStatus,
)
from tenancy.ports.repositories import IFranchiseRepository

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _franchise(
    slug: str,
    status: FranchiseStatus = FranchiseStatus.ACTIVE,
    subdomain: str | None = None,
) -> Franchise:
    return Franchise(
        slug=slug,
        subdomain=subdomain or slug,
        display_name=slug.title(),
        status=status,
        locale="en-US",
    )


def _business(
    tenant: str = "riverside",
    owner_user_id: str | None = "owner-1",
    status: str = "approved",
) -> BusinessProfile:
    return BusinessProfile(
        id=BusinessId.generate(),
        tenant=tenant,
        name="Corner Bakery",
        status=status,
        owner_user_id=owner_user_id,
    )


def _admin(
    tenant: str = "riverside",
    username: str = "alice",
    password_hash: str = "$2b$12$unused",
    is_active: bool = True,
) -> CityAdmin:
    return CityAdmin(
        id=AdminId.generate(),
        tenant=tenant,
        username=username,
        password_hash=password_hash,
        is_active=is_active,
    )


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock():
    """A clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def franchises() -> dict[str, Franchise]:
    """Registered franchises keyed by slug."""
    return {
        "riverside": _franchise("riverside"),
        "lakeside": _franchise("lakeside"),
        "oldtown": _franchise("oldtown", status=FranchiseStatus.INACTIVE),
    }


@pytest.fixture
def franchise_repository(franchises) -> AsyncMock:
    """Mock franchise repository backed by the ``franchises`` fixture.

    Mirrors the real repository: inactive franchises are never returned.
    """
    repo = AsyncMock(spec=IFranchiseRepository)

    async def by_subdomain(subdomain: str):
        for franchise in franchises.values():
            if franchise.subdomain == subdomain and franchise.is_active:
                return franchise
        return None

    async def by_slug(slug: str):
        franchise = franchises.get(slug)
        return franchise if franchise and franchise.is_active else None

    repo.get_by_subdomain.side_effect = by_subdomain
    repo.get_by_slug.side_effect = by_slug
    return repo


@pytest.fixture
def host_policy() -> HostPolicy:
    return HostPolicy(base_domains=("example.com",))


@pytest.fixture
def resolver_probe() -> MagicMock:
    return MagicMock()


@pytest.fixture
def resolver(franchise_repository, host_policy, resolver_probe) -> TenantResolver:
    """Resolver with no deployment default tenant."""
    return TenantResolver(
        franchise_repository=franchise_repository,
        policy=host_policy,
        probe=resolver_probe,
    )


@pytest.fixture
def now_plus():
    """Offset helper relative to FIXED_NOW."""
    return lambda **kwargs: FIXED_NOW + timedelta(**kwargs)


@pytest.fixture
def make_business():
    """Factory for BusinessProfile aggregates."""
    return _business


@pytest.fixture
def make_admin():
    """Factory for CityAdmin aggregates."""
    return _admin
