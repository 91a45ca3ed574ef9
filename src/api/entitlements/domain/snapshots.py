"""Read-only inputs to the entitlement state machine.

Snapshots hold whatever the caller loaded, without validation. A
subscription built from an untyped mapping may contain strings where
timestamps are expected, or anything else; the state machine decides
what to make of it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


class EntitledBusiness(Protocol):
    """Anything with the two business fields the state machine reads."""

    @property
    def owner_user_id(self) -> str | None: ...

    @property
    def status(self) -> str | None: ...


@dataclass(frozen=True)
class BusinessSnapshot:
    owner_user_id: str | None
    status: str | None


@dataclass(frozen=True)
class SubscriptionSnapshot:
    """The latest subscription record of a business."""

    is_in_free_trial: Any = None
    free_trial_end_date: Any = None
    status: Any = None
    current_period_end: Any = None
    tier_name: Any = None
    tier_display_name: Any = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SubscriptionSnapshot:
        """Build a snapshot from a raw mapping, ignoring unknown keys."""
        return cls(
            is_in_free_trial=data.get("is_in_free_trial"),
            free_trial_end_date=data.get("free_trial_end_date"),
            status=data.get("status"),
            current_period_end=data.get("current_period_end"),
            tier_name=data.get("tier_name"),
            tier_display_name=data.get("tier_display_name"),
        )
