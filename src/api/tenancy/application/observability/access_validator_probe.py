"""Protocol for access validation observability.

Captures the real reason behind every denial. Clients only ever see a
generic message; the detail lives here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class AccessValidatorProbe(Protocol):
    """Domain probe for access validation."""

    def access_granted(self, principal_id: str, tenant: str, kind: str) -> None:
        """Record that a principal passed validation for a tenant."""
        ...

    def principal_missing(self, route: str) -> None:
        """Record a request with no authenticated principal."""
        ...

    def session_invalid(self, reason: str) -> None:
        """Record an admin session that is unknown, expired or revoked.

        Args:
            reason: One of not_found, expired, revoked
        """
        ...

    def resource_not_found(self, principal_id: str) -> None:
        """Record that a principal owns no business (or an ambiguous set)."""
        ...

    def tenant_mismatch(
        self,
        principal_id: str,
        resolved_tenant: str,
        resource_tenant: str,
        resource_id: str | None = None,
    ) -> None:
        """Record a cross-tenant access attempt."""
        ...

    def admin_not_confirmed(self, admin_id: str, tenant: str) -> None:
        """Record that an admin is not an active admin of the tenant."""
        ...

    def datastore_error(self, operation: str, error: Exception) -> None:
        """Record a datastore failure during validation."""
        ...

    def with_context(self, context: ObservationContext) -> AccessValidatorProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultAccessValidatorProbe:
    """Default implementation of AccessValidatorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultAccessValidatorProbe:
        """Create a new probe with observation context bound."""
        return DefaultAccessValidatorProbe(logger=self._logger, context=context)

    def access_granted(self, principal_id: str, tenant: str, kind: str) -> None:
        self._logger.debug(
            "access_granted",
            principal_id=principal_id,
            tenant=tenant,
            principal_kind=kind,
            **self._get_context_kwargs(),
        )

    def principal_missing(self, route: str) -> None:
        self._logger.info(
            "access_principal_missing",
            route=route,
            **self._get_context_kwargs(),
        )

    def session_invalid(self, reason: str) -> None:
        self._logger.info(
            "admin_session_invalid",
            reason=reason,
            **self._get_context_kwargs(),
        )

    def resource_not_found(self, principal_id: str) -> None:
        self._logger.warning(
            "access_resource_not_found",
            principal_id=principal_id,
            **self._get_context_kwargs(),
        )

    def tenant_mismatch(
        self,
        principal_id: str,
        resolved_tenant: str,
        resource_tenant: str,
        resource_id: str | None = None,
    ) -> None:
        """Record a cross-tenant access attempt.

        Logged at warning: this is either a misconfigured host or someone
        probing another franchise.
        """
        self._logger.warning(
            "access_tenant_mismatch",
            principal_id=principal_id,
            resolved_tenant=resolved_tenant,
            resource_tenant=resource_tenant,
            resource_id=resource_id,
            **self._get_context_kwargs(),
        )

    def admin_not_confirmed(self, admin_id: str, tenant: str) -> None:
        self._logger.warning(
            "access_admin_not_confirmed",
            admin_id=admin_id,
            tenant=tenant,
            **self._get_context_kwargs(),
        )

    def datastore_error(self, operation: str, error: Exception) -> None:
        self._logger.error(
            "access_datastore_error",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
