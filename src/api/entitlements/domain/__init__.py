"""Entitlement domain: the pure state machine and the features it gates."""

from entitlements.domain.features import FeatureAccess, feature_access
from entitlements.domain.state_machine import EntitlementResult, compute_entitlement
from entitlements.domain.value_objects import DisplayTone, EntitlementState

__all__ = [
    "DisplayTone",
    "EntitlementResult",
    "EntitlementState",
    "FeatureAccess",
    "compute_entitlement",
    "feature_access",
]
