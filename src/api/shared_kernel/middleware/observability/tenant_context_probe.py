"""Domain probe for tenant context resolution.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to deriving a tenant from the inbound
hostname, override parameter or deployment default.

Full diagnostic detail (attempted hostname, override value) is recorded
here and never returned to the client.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantContextProbe(Protocol):
    """Domain probe for tenant context resolution operations."""

    def tenant_resolved(
        self,
        tenant: str,
        source: str,
        hostname: str,
        is_fallback: bool,
    ) -> None:
        """Record that a tenant was resolved for a request."""
        ...

    def malformed_host(self, raw_host: str) -> None:
        """Record that the Host header could not be parsed."""
        ...

    def unknown_subdomain(self, hostname: str, subdomain: str) -> None:
        """Record that a subdomain matched no active franchise."""
        ...

    def hostname_lookup_failed(self, hostname: str, error: Exception) -> None:
        """Record that the franchise lookup for a hostname errored."""
        ...

    def override_rejected(self, hostname: str, override: str) -> None:
        """Record that an override was sent to a real tenant host."""
        ...

    def override_not_registered(self, hostname: str, override: str) -> None:
        """Record that an override named no active franchise."""
        ...

    def tenant_not_detected(self, hostname: str, is_fallback: bool) -> None:
        """Record that no tenant could be resolved."""
        ...

    def with_context(self, context: ObservationContext) -> TenantContextProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantContextProbe:
    """Default implementation of TenantContextProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantContextProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantContextProbe(logger=self._logger, context=context)

    def tenant_resolved(
        self,
        tenant: str,
        source: str,
        hostname: str,
        is_fallback: bool,
    ) -> None:
        """Record that a tenant was resolved for a request.

        Hostname resolution is the normal path and logs at debug. Query and
        env resolutions only happen on fallback hosts and log at info so they
        stand out.
        """
        log = self._logger.debug if source == "hostname" else self._logger.info
        log(
            "tenant_resolved",
            tenant=tenant,
            source=source,
            attempted_hostname=hostname,
            is_fallback=is_fallback,
            **self._get_context_kwargs(),
        )

    def malformed_host(self, raw_host: str) -> None:
        """Record that the Host header could not be parsed."""
        self._logger.warning(
            "tenant_malformed_host",
            raw_host=raw_host,
            **self._get_context_kwargs(),
        )

    def unknown_subdomain(self, hostname: str, subdomain: str) -> None:
        """Record that a subdomain matched no active franchise."""
        self._logger.warning(
            "tenant_unknown_subdomain",
            attempted_hostname=hostname,
            subdomain=subdomain,
            **self._get_context_kwargs(),
        )

    def hostname_lookup_failed(self, hostname: str, error: Exception) -> None:
        """Record that the franchise lookup for a hostname errored."""
        self._logger.error(
            "tenant_hostname_lookup_failed",
            attempted_hostname=hostname,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )

    def override_rejected(self, hostname: str, override: str) -> None:
        """Record that an override was sent to a real tenant host."""
        self._logger.warning(
            "tenant_override_rejected",
            attempted_hostname=hostname,
            override=override,
            message="Tenant override is never honored on a tenant host",
            **self._get_context_kwargs(),
        )

    def override_not_registered(self, hostname: str, override: str) -> None:
        """Record that an override named no active franchise."""
        self._logger.warning(
            "tenant_override_not_registered",
            attempted_hostname=hostname,
            override=override,
            **self._get_context_kwargs(),
        )

    def tenant_not_detected(self, hostname: str, is_fallback: bool) -> None:
        """Record that no tenant could be resolved."""
        self._logger.warning(
            "tenant_not_detected",
            attempted_hostname=hostname,
            is_fallback=is_fallback,
            **self._get_context_kwargs(),
        )
