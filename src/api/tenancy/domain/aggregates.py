"""Aggregates for the tenancy domain."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from tenancy.domain.value_objects import (
    AdminId,
    BusinessId,
    FranchiseStatus,
    normalize_tenant,
)


@dataclass(frozen=True)
class Franchise:
    """A franchise city instance sharing the platform.

    The slug is the tenant identifier everywhere else in the system and
    never changes once assigned. The subdomain is usually the slug but is
    stored separately so a city can be served from a different label.
    """

    slug: str
    subdomain: str
    display_name: str
    status: FranchiseStatus
    locale: str

    @property
    def is_active(self) -> bool:
        return self.status == FranchiseStatus.ACTIVE


@dataclass(frozen=True)
class BusinessProfile:
    """A tenant-owned business listing.

    ``tenant`` is set at creation and immutable. ``owner_user_id`` is the
    OIDC subject of the claiming owner, or None for an unclaimed listing.
    """

    id: BusinessId
    tenant: str
    name: str
    status: str
    owner_user_id: str | None

    def belongs_to(self, tenant: str) -> bool:
        """Compare tenants case-insensitively after trimming.

        An empty tenant on either side never matches.
        """
        mine = normalize_tenant(self.tenant)
        return bool(mine) and mine == normalize_tenant(tenant)


@dataclass(frozen=True)
class CityAdmin:
    """An administrator scoped to exactly one franchise."""

    id: AdminId
    tenant: str
    username: str
    password_hash: str
    is_active: bool
    email: str | None = None
    full_name: str | None = None


@dataclass(frozen=True)
class AdminSession:
    """Server-side record of an issued admin session.

    Only the SHA-256 digest of the opaque token is stored. The tenant here
    is a hint for lookups; membership is still re-checked against
    ``city_admins`` on every request.
    """

    token_hash: str
    admin_id: AdminId
    tenant: str
    created_at: datetime
    expires_at: datetime
    revoked_at: datetime | None = None

    def is_usable(self, now: datetime) -> bool:
        """A session is usable until it expires or is revoked."""
        return self.revoked_at is None and now < self.expires_at
