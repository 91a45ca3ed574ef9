"""Domain exceptions for the tenancy bounded context.

Every exception here is terminal for the current request. Each carries
an HTTP status, a machine-readable reason code and a generic public
message. The public message never includes hostnames, tenant slugs or
resource fields; those go to server-side logs through the probes.
"""

from __future__ import annotations

from tenancy.domain.value_objects import ReasonCode


class TenancyError(Exception):
    """Base class for tenant isolation failures.

    Attributes:
        status_code: HTTP status the presentation layer responds with.
        reason: Reason code recorded in the audit log.
        public_message: Generic message safe to return to the client.
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, reason: ReasonCode, public_message: str | None = None):
        self.reason = reason
        self.public_message = public_message or self.default_message
        super().__init__(f"{reason.value}: {self.public_message}")


class ResolutionError(TenancyError):
    """Raised when no tenant can be derived for a request.

    ``no_tenant`` maps to 400. ``override_rejected`` maps to 403 because the
    client tried to choose a tenant on a host where that is never allowed.
    """

    default_message = "City not detected"

    def __init__(
        self,
        reason: ReasonCode,
        public_message: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(reason, public_message)
        if status_code is not None:
            self.status_code = status_code
        elif reason == ReasonCode.OVERRIDE_REJECTED:
            self.status_code = 403
        else:
            self.status_code = 400


class AuthError(TenancyError):
    """Raised when no authenticated principal accompanies the request."""

    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(TenancyError):
    """Raised when a principal may not act on the resolved tenant.

    Not-found, forbidden and tenant mismatch all share this type and the
    same public message so responses never reveal whether a resource
    exists.
    """

    status_code = 403
    default_message = "Access denied"


class ValidationInputError(TenancyError):
    """Raised when a request carries a malformed Host header.

    The resolver catches this internally and degrades to "no tenant from
    hostname"; it only escapes when a caller parses a host directly.
    """

    status_code = 400
    default_message = "City not detected"


class InvalidCredentialsError(Exception):
    """Raised when an admin login fails.

    Unknown user, wrong password, inactive account and wrong tenant all
    raise this same error.
    """

    pass
