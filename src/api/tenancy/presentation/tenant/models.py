"""Pydantic models for the tenant route."""

from __future__ import annotations

from pydantic import BaseModel, Field

from shared_kernel.middleware.tenant_context import TenantContext, TenantSource
from tenancy.domain.aggregates import Franchise


class TenantResponse(BaseModel):
    """The tenant resolved for the current request."""

    tenant: str = Field(..., description="Franchise slug")
    source: TenantSource = Field(..., description="hostname, query or env")
    hostname: str = Field(..., description="Normalized request hostname")
    is_fallback: bool = Field(..., description="Whether the host is a fallback host")
    display_name: str | None = Field(None, description="Franchise display name")
    locale: str | None = Field(None, description="Franchise locale")

    @classmethod
    def from_domain(
        cls, context: TenantContext, franchise: Franchise | None
    ) -> TenantResponse:
        return cls(
            tenant=context.tenant,
            source=context.source,
            hostname=context.hostname,
            is_fallback=context.is_fallback,
            display_name=franchise.display_name if franchise else None,
            locale=franchise.locale if franchise else None,
        )
