"""Repository protocols (ports) for the tenancy bounded context.

Every lookup the resolver and validator perform goes through one of
these protocols. Implementations only read, except the admin session
repository which issues and revokes sessions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable

from tenancy.domain.aggregates import (
    AdminSession,
    BusinessProfile,
    CityAdmin,
    Franchise,
)
from tenancy.domain.value_objects import AdminId, BusinessId


@runtime_checkable
class IFranchiseRepository(Protocol):
    """Read access to registered franchises."""

    async def get_by_subdomain(self, subdomain: str) -> Franchise | None:
        """Retrieve an active franchise by its hostname label.

        Args:
            subdomain: Normalized (lowercase) subdomain label

        Returns:
            The active Franchise, or None if no active franchise uses it
        """
        ...

    async def get_by_slug(self, slug: str) -> Franchise | None:
        """Retrieve an active franchise by tenant slug.

        Args:
            slug: Normalized tenant slug

        Returns:
            The active Franchise, or None if not registered or inactive
        """
        ...


@runtime_checkable
class IBusinessRepository(Protocol):
    """Read access to business profiles."""

    async def get_by_owner(self, owner_user_id: str) -> BusinessProfile | None:
        """Retrieve the business owned by a principal.

        An owner has at most one business. If the datastore somehow holds
        more than one, implementations must return None rather than pick.

        Args:
            owner_user_id: OIDC subject of the owner

        Returns:
            The owned BusinessProfile, or None
        """
        ...

    async def get_by_id(self, business_id: BusinessId) -> BusinessProfile | None:
        """Retrieve a business by ID regardless of tenant.

        Callers are responsible for the tenant comparison.
        """
        ...


@runtime_checkable
class ICityAdminRepository(Protocol):
    """Read access to city admins."""

    async def get_active_for_tenant(
        self, admin_id: AdminId, tenant: str
    ) -> CityAdmin | None:
        """Retrieve an active admin only if they belong to exactly this tenant.

        Args:
            admin_id: The admin's identifier
            tenant: Normalized tenant slug

        Returns:
            The CityAdmin, or None if missing, inactive, or in another tenant
        """
        ...

    async def get_by_username(self, tenant: str, username: str) -> CityAdmin | None:
        """Retrieve an admin by username within a tenant (active or not)."""
        ...

    async def list_for_tenant(self, tenant: str) -> list[CityAdmin]:
        """List all admins of a tenant, oldest first."""
        ...


@runtime_checkable
class IAdminSessionRepository(Protocol):
    """Server-side store for opaque admin session tokens."""

    async def add(self, session: AdminSession) -> None:
        """Persist a newly issued session."""
        ...

    async def get_by_token_hash(self, token_hash: str) -> AdminSession | None:
        """Retrieve a session by the digest of its token."""
        ...

    async def revoke(self, token_hash: str, revoked_at: datetime) -> bool:
        """Mark a session revoked.

        Returns:
            True if a session was revoked, False if none matched
        """
        ...
