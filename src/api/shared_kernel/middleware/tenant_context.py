"""Tenant context value object for resolved tenant identification.

This module contains the pure value object that represents a resolved
tenant context. It is framework-agnostic and contains no business logic,
making it safe for the shared kernel.

Downstream code receives a ``TenantContext`` as an explicit argument and
never re-derives the tenant from headers or cookies on its own. The
resolution logic (hostname parsing, fallback hosts, override rules)
lives in the tenancy bounded context.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TenantSource(StrEnum):
    """How a tenant was resolved for a request."""

    HOSTNAME = "hostname"
    QUERY = "query"
    ENV = "env"


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant context for the current request.

    Attributes:
        tenant: The lowercase franchise slug.
        source: Where the tenant came from. Only ``hostname`` is possible
            on a real tenant host.
        hostname: The normalized hostname the request arrived on.
        is_fallback: Whether the host is a development/preview/bare host
            that may accept explicit overrides.
    """

    tenant: str
    source: TenantSource
    hostname: str
    is_fallback: bool
