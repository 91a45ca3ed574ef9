"""Value objects for the tenancy domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and tenancy concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from ulid import ULID

# Franchise slugs double as DNS labels
_SLUG_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


def normalize_tenant(value: str | None) -> str:
    """Normalize a tenant slug for comparison: trimmed and lowercased.

    Returns an empty string for None so callers can treat "absent" and
    "blank" the same way.
    """
    if value is None:
        return ""
    return value.strip().lower()


def is_valid_slug(value: str) -> bool:
    """Check whether a normalized value is a syntactically valid slug."""
    return bool(_SLUG_PATTERN.match(value))


@dataclass(frozen=True)
class BusinessId:
    """Identifier for a business profile.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> BusinessId:
        """Generate a new BusinessId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> BusinessId:
        """Create BusinessId from string value.

        Accepts lowercase input and returns the canonical uppercase form.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            parsed = ULID.from_str(value.strip().upper())
        except ValueError as e:
            raise ValueError(f"Invalid BusinessId: {value}") from e

        return cls(value=str(parsed))


@dataclass(frozen=True)
class AdminId:
    """Identifier for a city admin account."""

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def generate(cls) -> AdminId:
        """Generate a new AdminId using ULID."""
        return cls(value=str(ULID()))


class FranchiseStatus(StrEnum):
    """Lifecycle status of a franchise. Only active franchises resolve."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class PrincipalKind(StrEnum):
    """Kinds of authenticated actors."""

    OWNER = "owner"
    ADMIN = "admin"


class Decision(StrEnum):
    """Outcome of an access validation attempt."""

    ALLOW = "allow"
    DENY = "deny"


class ReasonCode(StrEnum):
    """Machine-readable reason recorded with every audit entry.

    Reason codes are written to server-side logs only. Clients see the
    generic message of the matching exception.
    """

    OK = "ok"
    NO_TENANT = "no_tenant"
    OVERRIDE_REJECTED = "override_rejected"
    MALFORMED_HOST = "malformed_host"
    UNAUTHENTICATED = "unauthenticated"
    SESSION_INVALID = "session_invalid"
    RESOURCE_NOT_FOUND = "resource_not_found"
    TENANT_MISMATCH = "tenant_mismatch"
    ADMIN_NOT_CONFIRMED = "admin_not_confirmed"
    DATASTORE_ERROR = "datastore_error"
    INTERNAL_ERROR = "internal_error"
