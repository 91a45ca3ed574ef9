"""Entitlement state machine.

``compute_entitlement`` is a pure function: no I/O, no clock reads and no
mutation of its inputs. The same inputs always produce equal results.
States are checked in a fixed precedence order and the first match wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from entitlements.domain.snapshots import EntitledBusiness, SubscriptionSnapshot
from entitlements.domain.value_objects import (
    DEFAULT_TRIAL_TIER_LABEL,
    LAPSED_SUBSCRIPTION_STATUSES,
    UNCLAIMED_BUSINESS_STATUSES,
    DisplayTone,
    EntitlementState,
    SubscriptionStatus,
)


@dataclass(frozen=True)
class EntitlementResult:
    """Derived access state of a business plus the flags callers use.

    Attributes:
        tier_name_or_none: Display name of the active tier, None when no
            tier is active.
        tier_code: Raw ``tier_name`` of the active tier, used for feature
            gating. None when no tier is active or none was recorded.
        is_free_listing: True only for a claimed business with no
            subscription record.
    """

    state: EntitlementState
    is_claimed: bool
    is_unclaimed: bool
    is_trial_active: bool
    is_trial_expired: bool
    is_paid_active: bool
    tier_name_or_none: str | None
    should_lock_controls: bool
    should_show_to_users: bool
    display_label: str
    display_tone: DisplayTone
    tier_code: str | None = None
    is_free_listing: bool = False


def _claimed(
    state: EntitlementState,
    *,
    label: str,
    tone: DisplayTone,
    show: bool,
    trial_active: bool = False,
    trial_expired: bool = False,
    paid_active: bool = False,
    tier: str | None = None,
    tier_code: str | None = None,
    free_listing: bool = False,
) -> EntitlementResult:
    return EntitlementResult(
        state=state,
        is_claimed=True,
        is_unclaimed=False,
        is_trial_active=trial_active,
        is_trial_expired=trial_expired,
        is_paid_active=paid_active,
        tier_name_or_none=tier,
        should_lock_controls=False,
        should_show_to_users=show,
        display_label=label,
        display_tone=tone,
        tier_code=tier_code,
        is_free_listing=free_listing,
    )


UNCLAIMED_RESULT = EntitlementResult(
    state=EntitlementState.UNCLAIMED,
    is_claimed=False,
    is_unclaimed=True,
    is_trial_active=False,
    is_trial_expired=False,
    is_paid_active=False,
    tier_name_or_none=None,
    should_lock_controls=True,
    # Listed in discovery but not as an interactive listing
    should_show_to_users=False,
    display_label="Unclaimed",
    display_tone=DisplayTone.MUTED,
)

NO_SUB_RESULT = _claimed(
    EntitlementState.NO_SUB,
    label="Free Listing",
    tone=DisplayTone.SUCCESS,
    show=True,
    free_listing=True,
)

TRIAL_EXPIRED_RESULT = _claimed(
    EntitlementState.TRIAL_EXPIRED,
    label="Trial Expired",
    tone=DisplayTone.DANGER,
    show=False,
    trial_expired=True,
)

SUB_OTHER_RESULT = _claimed(
    EntitlementState.SUB_OTHER,
    label="Unknown",
    tone=DisplayTone.MUTED,
    show=False,
)


def as_utc(value: Any) -> datetime | None:
    """Coerce a stored timestamp to an aware UTC datetime.

    None stays None. Naive datetimes are taken to be UTC. ISO 8601 strings
    are parsed.

    Raises:
        TypeError: For any other type
        ValueError: For an unparseable string
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return None
        value = datetime.fromisoformat(value.strip())
    if not isinstance(value, datetime):
        raise TypeError(f"Expected datetime, got {type(value).__name__}")
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError(f"Expected str, got {type(value).__name__}")
    return value.strip() or None


def _business_is_unclaimed(business: EntitledBusiness) -> bool:
    owner = getattr(business, "owner_user_id", None)
    status = getattr(business, "status", None)
    if owner is not None and not isinstance(owner, str):
        raise TypeError("owner_user_id must be a str")
    if status is not None and not isinstance(status, str):
        raise TypeError("status must be a str")
    return not owner and status in UNCLAIMED_BUSINESS_STATUSES


def _evaluate(sub: SubscriptionSnapshot, now: datetime) -> EntitlementResult:
    trial_flag = sub.is_in_free_trial
    if trial_flag is not None and not isinstance(trial_flag, bool):
        raise TypeError("is_in_free_trial must be a bool")

    tier_display = _text(sub.tier_display_name)
    tier_name = _text(sub.tier_name)
    status = sub.status

    trial_end = as_utc(sub.free_trial_end_date) if trial_flag else None
    if trial_end is not None:
        if trial_end >= now:
            tier = tier_display or tier_name or DEFAULT_TRIAL_TIER_LABEL
            return _claimed(
                EntitlementState.TRIAL_ACTIVE,
                label="Free Trial",
                tone=DisplayTone.INFO,
                show=True,
                trial_active=True,
                tier=tier,
                tier_code=tier_name,
            )
        return TRIAL_EXPIRED_RESULT

    if status == SubscriptionStatus.ACTIVE.value:
        period_end = as_utc(sub.current_period_end)
        if period_end is None or period_end >= now:
            tier = tier_display or tier_name
            return _claimed(
                EntitlementState.PAID_ACTIVE,
                label=tier or "Paid",
                tone=DisplayTone.SUCCESS,
                show=True,
                paid_active=True,
                tier=tier,
                tier_code=tier_name,
            )

    if status in LAPSED_SUBSCRIPTION_STATUSES:
        label = "Paused" if status == SubscriptionStatus.PAUSED.value else "Canceled"
        return _claimed(
            EntitlementState.PAID_LAPSED,
            label=label,
            tone=DisplayTone.WARNING,
            show=False,
        )

    return SUB_OTHER_RESULT


def compute_entitlement(
    business: EntitledBusiness,
    subscription: SubscriptionSnapshot | Mapping[str, Any] | None,
    now: datetime,
) -> EntitlementResult:
    """Compute the entitlement state of a business.

    Precedence, first match wins: UNCLAIMED, NO_SUB, TRIAL_ACTIVE,
    TRIAL_EXPIRED, PAID_ACTIVE, PAID_LAPSED, SUB_OTHER.

    Args:
        business: Anything exposing ``owner_user_id`` and ``status``
        subscription: The latest subscription record, a raw mapping of one,
            or None when the business has never subscribed
        now: The evaluation instant, captured once by the caller. Naive
            values are taken to be UTC.

    Returns:
        EntitlementResult. This function never raises; malformed
        business or subscription data yields SUB_OTHER.
    """
    try:
        if _business_is_unclaimed(business):
            return UNCLAIMED_RESULT

        if subscription is None:
            return NO_SUB_RESULT

        if isinstance(subscription, Mapping):
            subscription = SubscriptionSnapshot.from_mapping(subscription)
        if not isinstance(subscription, SubscriptionSnapshot):
            return SUB_OTHER_RESULT
        return _evaluate(subscription, as_utc(now) or now)
    except (TypeError, ValueError, AttributeError, OverflowError):
        return SUB_OTHER_RESULT
