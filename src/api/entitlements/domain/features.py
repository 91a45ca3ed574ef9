"""Billing-gated features derived from an entitlement result."""

from __future__ import annotations

from dataclasses import dataclass

from entitlements.domain.state_machine import EntitlementResult


@dataclass(frozen=True)
class FeatureAccess:
    analytics: bool
    push_notifications: bool
    advanced_reporting: bool
    max_offers: int


_FULL = FeatureAccess(
    analytics=True, push_notifications=True, advanced_reporting=True, max_offers=10
)

TIER_FEATURES: dict[str, FeatureAccess] = {
    "spotlight": _FULL,
    "pro": _FULL,
    "featured": FeatureAccess(
        analytics=True, push_notifications=False, advanced_reporting=False, max_offers=5
    ),
    "starter": FeatureAccess(
        analytics=False, push_notifications=False, advanced_reporting=False, max_offers=3
    ),
}
UNKNOWN_TIER_FEATURES = TIER_FEATURES["starter"]

FREE_LISTING_MAX_OFFERS = 1


def feature_access(result: EntitlementResult) -> FeatureAccess:
    """Derive feature access from an entitlement result.

    Features follow the active tier while a trial or paid plan is active.
    A free listing may publish one offer. Every other state gets nothing.
    """
    if not (result.is_trial_active or result.is_paid_active):
        max_offers = FREE_LISTING_MAX_OFFERS if result.is_free_listing else 0
        return FeatureAccess(
            analytics=False,
            push_notifications=False,
            advanced_reporting=False,
            max_offers=max_offers,
        )

    key = (result.tier_code or result.tier_name_or_none or "").strip().lower()
    return TIER_FEATURES.get(key, UNKNOWN_TIER_FEATURES)
