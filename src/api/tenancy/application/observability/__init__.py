"""Domain-Oriented Observability for the tenancy application layer."""

from tenancy.application.observability.access_validator_probe import (
    AccessValidatorProbe,
    DefaultAccessValidatorProbe,
)
from tenancy.application.observability.admin_session_probe import (
    AdminSessionProbe,
    DefaultAdminSessionProbe,
)

__all__ = [
    "AccessValidatorProbe",
    "DefaultAccessValidatorProbe",
    "AdminSessionProbe",
    "DefaultAdminSessionProbe",
]
