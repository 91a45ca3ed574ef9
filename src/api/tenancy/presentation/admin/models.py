"""Pydantic models for admin session routes."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from tenancy.application.value_objects import IssuedSession
from tenancy.domain.aggregates import CityAdmin


class LoginRequest(BaseModel):
    """Request model for admin login."""

    username: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=1024)


class AdminSessionResponse(BaseModel):
    """Response model for a newly issued admin session.

    The token is returned once. It is also set as an HttpOnly cookie.
    """

    token: str = Field(..., description="Opaque session token")
    expires_at: datetime
    admin_id: str
    tenant: str
    username: str

    @classmethod
    def from_issued(cls, issued: IssuedSession) -> AdminSessionResponse:
        return cls(
            token=issued.token,
            expires_at=issued.expires_at,
            admin_id=issued.admin.id.value,
            tenant=issued.admin.tenant,
            username=issued.admin.username,
        )


class AdminResponse(BaseModel):
    """Response model for an admin in a roster listing.

    Never includes the password hash.
    """

    id: str
    username: str
    email: str | None = None
    full_name: str | None = None
    is_active: bool

    @classmethod
    def from_domain(cls, admin: CityAdmin) -> AdminResponse:
        return cls(
            id=admin.id.value,
            username=admin.username,
            email=admin.email,
            full_name=admin.full_name,
            is_active=admin.is_active,
        )
