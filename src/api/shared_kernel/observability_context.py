"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped metadata that should be included with all
    instrumentation events, so a resolver trace and the validator decision
    that follows it can be correlated.

    Attributes:
        request_id: Unique identifier for the current request.
        route: Route template or path being served.
        hostname: Normalized hostname of the inbound request.
        tenant: Resolved tenant slug (if already resolved).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", route="/tenant")
        probe = DefaultTenantContextProbe().with_context(context)
    """

    request_id: str | None = None
    route: str | None = None
    hostname: str | None = None
    tenant: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.route is not None:
            result["route"] = self.route
        if self.hostname is not None:
            result["hostname"] = self.hostname
        if self.tenant is not None:
            result["tenant"] = self.tenant
        result.update(self.extra)
        return result

    def with_tenant(self, tenant: str) -> ObservationContext:
        """Create a new context with the resolved tenant set."""
        return ObservationContext(
            request_id=self.request_id,
            route=self.route,
            hostname=self.hostname,
            tenant=tenant,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return ObservationContext(
            request_id=self.request_id,
            route=self.route,
            hostname=self.hostname,
            tenant=self.tenant,
            extra={**self.extra, **kwargs},
        )
