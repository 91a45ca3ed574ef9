"""Value objects for the entitlement domain."""

from __future__ import annotations

from enum import StrEnum


class EntitlementState(StrEnum):
    """Derived access state of a business.

    Callers should branch on the boolean fields of ``EntitlementResult``
    rather than on these names, so new states can be added safely.
    """

    UNCLAIMED = "UNCLAIMED"
    NO_SUB = "NO_SUB"
    TRIAL_ACTIVE = "TRIAL_ACTIVE"
    TRIAL_EXPIRED = "TRIAL_EXPIRED"
    PAID_ACTIVE = "PAID_ACTIVE"
    PAID_LAPSED = "PAID_LAPSED"
    SUB_OTHER = "SUB_OTHER"


class DisplayTone(StrEnum):
    """Presentation-neutral tone paired with a display label."""

    MUTED = "muted"
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"


class SubscriptionStatus(StrEnum):
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELED = "canceled"


UNCLAIMED_BUSINESS_STATUSES = frozenset({"unclaimed", "pending_claim"})
LAPSED_SUBSCRIPTION_STATUSES = frozenset(
    {SubscriptionStatus.PAUSED.value, SubscriptionStatus.CANCELED.value}
)
DEFAULT_TRIAL_TIER_LABEL = "Featured"
