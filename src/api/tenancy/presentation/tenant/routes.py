"""HTTP route exposing the resolved tenant."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from shared_kernel.middleware.tenant_context import TenantContext
from tenancy.dependencies.resolver import (
    get_franchise_repository,
    get_tenant_context_with_override,
)
from tenancy.infrastructure.franchise_repository import FranchiseRepository
from tenancy.presentation.tenant.models import TenantResponse

router = APIRouter(tags=["tenant"])


@router.get("/tenant")
async def get_tenant(
    context: Annotated[TenantContext, Depends(get_tenant_context_with_override)],
    franchises: Annotated[FranchiseRepository, Depends(get_franchise_repository)],
) -> TenantResponse:
    """Return the tenant resolved for this request.

    The override parameter is honored here on fallback hosts, which lets
    local development pick a city with ``?tenant=<slug>``.

    Raises:
        TenancyError: 400 if no tenant resolves, 403 for an override on a
            tenant host
        HTTPException: 500 if franchise details cannot be loaded
    """
    try:
        franchise = await franchises.get_by_slug(context.tenant)
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load city",
        ) from e

    return TenantResponse.from_domain(context, franchise)
