"""HTTP routes exposing entitlements of validated businesses.

Every route here depends on a validated context from the tenancy
bounded context, so the business is known to belong to the resolved
tenant before its subscription is read.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.exc import SQLAlchemyError

from entitlements.application import EntitlementService
from entitlements.dependencies import get_entitlement_service
from entitlements.presentation.models import (
    BusinessEntitlementResponse,
    BusinessFeaturesResponse,
    BusinessSummary,
    EntitlementResponse,
    FeatureAccessResponse,
)
from tenancy.application.validator import AccessValidator
from tenancy.application.value_objects import InboundRequest, ValidatedContext
from tenancy.dependencies.access import get_access_validator, get_validated_owner
from tenancy.dependencies.authentication import get_admin_session_token
from tenancy.dependencies.request import get_inbound_request
from tenancy.domain.aggregates import BusinessProfile

router = APIRouter(tags=["entitlements"])


def _summary(business: BusinessProfile) -> BusinessSummary:
    return BusinessSummary(
        id=business.id.value,
        tenant=business.tenant,
        name=business.name,
        status=business.status,
    )


@router.get("/businesses/me")
async def get_my_business(
    validated: Annotated[ValidatedContext, Depends(get_validated_owner)],
    service: Annotated[EntitlementService, Depends(get_entitlement_service)],
) -> BusinessEntitlementResponse:
    """Return the owner's business and its entitlement.

    Raises:
        TenancyError: 400, 401 or 403 from validation
        HTTPException: 500 if the subscription cannot be loaded
    """
    try:
        result = await service.entitlement_for(
            validated.resource_id.value, validated.resource
        )
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load entitlement",
        ) from e

    return BusinessEntitlementResponse(
        business=_summary(validated.resource),
        entitlement=EntitlementResponse.from_domain(result),
    )


@router.get("/businesses/me/features")
async def get_my_features(
    validated: Annotated[ValidatedContext, Depends(get_validated_owner)],
    service: Annotated[EntitlementService, Depends(get_entitlement_service)],
) -> BusinessFeaturesResponse:
    """Return the billing-gated features of the owner's business."""
    try:
        result, access = await service.features_for(
            validated.resource_id.value, validated.resource
        )
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load features",
        ) from e

    return BusinessFeaturesResponse(
        business_id=validated.resource_id.value,
        state=result.state,
        features=FeatureAccessResponse.from_domain(access),
    )


@router.get("/admin/businesses/{business_id}/entitlement")
async def get_business_entitlement_as_admin(
    business_id: Annotated[str, Path(min_length=1, max_length=64)],
    inbound: Annotated[InboundRequest, Depends(get_inbound_request)],
    token: Annotated[str | None, Depends(get_admin_session_token)],
    validator: Annotated[AccessValidator, Depends(get_access_validator)],
    service: Annotated[EntitlementService, Depends(get_entitlement_service)],
) -> BusinessEntitlementResponse:
    """Return a business's entitlement to an admin of its city.

    A business in another city answers exactly like a missing one.
    """
    validated = await validator.validate_admin_business(inbound, token, business_id)
    business = validated.business

    try:
        result = await service.entitlement_for(business.id.value, business)
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load entitlement",
        ) from e

    return BusinessEntitlementResponse(
        business=_summary(business),
        entitlement=EntitlementResponse.from_domain(result),
    )
