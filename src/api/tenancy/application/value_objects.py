"""Application-layer value objects for the tenancy bounded context.

These describe a single request's view of tenancy: what arrived, who is
asking, and what was validated. None of them are persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.domain.aggregates import BusinessProfile, CityAdmin
from tenancy.domain.value_objects import (
    AdminId,
    BusinessId,
    Decision,
    PrincipalKind,
    ReasonCode,
)


@dataclass(frozen=True)
class InboundRequest:
    """The parts of an HTTP request that tenant resolution looks at.

    ``tenant_override`` is None when the override parameter is absent and
    a string (possibly empty) when it is present at all.
    """

    host: str | None
    forwarded_host: str | None = None
    tenant_override: str | None = None
    route: str = ""


@dataclass(frozen=True)
class OwnerPrincipal:
    """A business owner authenticated by a bearer token."""

    user_id: str
    username: str

    kind: PrincipalKind = field(default=PrincipalKind.OWNER, init=False)


@dataclass(frozen=True)
class ValidatedContext:
    """Result of a successful owner validation.

    ``resource_id`` and ``tenant`` are the only values downstream handlers
    should use to scope further reads and writes.
    """

    resource_id: BusinessId
    tenant: str
    principal_id: str
    resource: BusinessProfile
    tenant_context: TenantContext


@dataclass(frozen=True)
class AdminContext:
    """Result of a successful admin validation."""

    admin_id: AdminId
    tenant: str
    username: str
    tenant_context: TenantContext


@dataclass(frozen=True)
class AdminBusinessContext:
    """An admin validated against a business inside their tenant."""

    admin: AdminContext
    business: BusinessProfile


@dataclass(frozen=True)
class IssuedSession:
    """A freshly issued admin session.

    ``token`` is the only copy of the opaque token; it is returned to the
    client once and never stored.
    """

    token: str
    expires_at: datetime
    admin: CityAdmin


@dataclass(frozen=True)
class AuditEntry:
    """One append-only record of an access validation attempt.

    Carries no request payload, only identifiers and the decision.
    """

    timestamp: datetime
    principal_id: str | None
    route: str
    resolved_tenant: str | None
    resource_tenant: str | None
    decision: Decision
    reason_code: ReasonCode

    def as_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "principal_id": self.principal_id,
            "route": self.route,
            "resolved_tenant": self.resolved_tenant,
            "resource_tenant": self.resource_tenant,
            "decision": self.decision.value,
            "reason_code": self.reason_code.value,
        }
