"""Pydantic models for entitlement responses."""

from __future__ import annotations

from pydantic import BaseModel, Field

from entitlements.domain.features import FeatureAccess
from entitlements.domain.state_machine import EntitlementResult
from entitlements.domain.value_objects import DisplayTone, EntitlementState


class EntitlementResponse(BaseModel):
    """Derived entitlement state of a business."""

    state: EntitlementState
    is_claimed: bool
    is_unclaimed: bool
    is_trial_active: bool
    is_trial_expired: bool
    is_paid_active: bool
    tier_name: str | None = Field(None, description="Active tier, if any")
    should_lock_controls: bool
    should_show_to_users: bool
    display_label: str
    display_tone: DisplayTone
    is_free_listing: bool = False

    @classmethod
    def from_domain(cls, result: EntitlementResult) -> EntitlementResponse:
        return cls(
            state=result.state,
            is_claimed=result.is_claimed,
            is_unclaimed=result.is_unclaimed,
            is_trial_active=result.is_trial_active,
            is_trial_expired=result.is_trial_expired,
            is_paid_active=result.is_paid_active,
            tier_name=result.tier_name_or_none,
            should_lock_controls=result.should_lock_controls,
            should_show_to_users=result.should_show_to_users,
            display_label=result.display_label,
            display_tone=result.display_tone,
            is_free_listing=result.is_free_listing,
        )


class FeatureAccessResponse(BaseModel):
    """Billing-gated features of a business."""

    analytics: bool
    push_notifications: bool
    advanced_reporting: bool
    max_offers: int

    @classmethod
    def from_domain(cls, access: FeatureAccess) -> FeatureAccessResponse:
        return cls(
            analytics=access.analytics,
            push_notifications=access.push_notifications,
            advanced_reporting=access.advanced_reporting,
            max_offers=access.max_offers,
        )


class BusinessSummary(BaseModel):
    id: str
    tenant: str
    name: str
    status: str


class BusinessEntitlementResponse(BaseModel):
    """A business together with its entitlement."""

    business: BusinessSummary
    entitlement: EntitlementResponse


class BusinessFeaturesResponse(BaseModel):
    business_id: str
    state: EntitlementState
    features: FeatureAccessResponse
