"""HTTP routes for admin sessions and the admin roster."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import SQLAlchemyError

from infrastructure.settings import SessionSettings, get_session_settings
from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.application.sessions import AdminSessionService
from tenancy.application.value_objects import AdminContext
from tenancy.dependencies.access import get_admin_context, get_admin_session_service
from tenancy.dependencies.authentication import get_admin_session_token
from tenancy.dependencies.resolver import get_tenant_context
from tenancy.domain.exceptions import InvalidCredentialsError
from tenancy.presentation.admin.models import (
    AdminResponse,
    AdminSessionResponse,
    LoginRequest,
)

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
)


@router.post(
    "/sessions",
    status_code=status.HTTP_201_CREATED,
)
async def create_session(
    request: LoginRequest,
    response: Response,
    context: Annotated[TenantContext, Depends(get_tenant_context)],
    service: Annotated[AdminSessionService, Depends(get_admin_session_service)],
    settings: Annotated[SessionSettings, Depends(get_session_settings)],
) -> AdminSessionResponse:
    """Log an admin into the city resolved for this request.

    Raises:
        HTTPException: 401 for any credential failure
        HTTPException: 500 for unexpected errors
    """
    try:
        issued = await service.login(context, request.username, request.password)
    except InvalidCredentialsError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create session",
        ) from e

    response.set_cookie(
        key=settings.cookie_name,
        value=issued.token,
        max_age=settings.ttl_minutes * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite="lax",
    )
    return AdminSessionResponse.from_issued(issued)


@router.delete(
    "/sessions",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_session(
    response: Response,
    token: Annotated[str | None, Depends(get_admin_session_token)],
    service: Annotated[AdminSessionService, Depends(get_admin_session_service)],
    settings: Annotated[SessionSettings, Depends(get_session_settings)],
) -> None:
    """Revoke the current admin session.

    Idempotent: logging out without a live session still returns 204.
    """
    try:
        await service.logout(token)
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to revoke session",
        ) from e

    response.delete_cookie(key=settings.cookie_name)


@router.get("/admins")
async def list_admins(
    admin: Annotated[AdminContext, Depends(get_admin_context)],
    service: Annotated[AdminSessionService, Depends(get_admin_session_service)],
) -> list[AdminResponse]:
    """List the admins of the caller's city."""
    try:
        admins = await service.list_admins(admin.tenant)
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list admins",
        ) from e

    return [AdminResponse.from_domain(a) for a in admins]
