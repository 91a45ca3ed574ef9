"""Tenant resolution for inbound requests.

The resolver is the only place that decides which franchise a request
belongs to. On a real tenant host the answer depends on the hostname
alone; overrides and the deployment default are only consulted on
fallback (development, preview, bare) hosts.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.middleware.observability import (
    DefaultTenantContextProbe,
    TenantContextProbe,
)
from shared_kernel.middleware.tenant_context import TenantContext, TenantSource
from tenancy.application.hostname import (
    HostPolicy,
    extract_hostname,
    is_fallback_host,
    parse_subdomain,
)
from tenancy.application.value_objects import InboundRequest
from tenancy.domain.exceptions import ResolutionError, ValidationInputError
from tenancy.domain.value_objects import ReasonCode, is_valid_slug, normalize_tenant
from tenancy.ports.repositories import IFranchiseRepository

NO_TENANT_MESSAGE = "City not detected"
NO_TENANT_FALLBACK_MESSAGE = (
    "City not detected. Use a city subdomain such as riverside.localhost, "
    "pass ?{param}=<city>, or configure a default tenant."
)
OVERRIDE_REJECTED_MESSAGE = "Access denied"


@dataclass(frozen=True)
class ResolutionFailure:
    """Why a tenant could not be resolved.

    ``error`` is safe to return to the client; ``reason`` is for logs.
    """

    status: int
    error: str
    reason: ReasonCode


@dataclass(frozen=True)
class TenantResolution:
    """Either a resolved ``TenantContext`` or a ``ResolutionFailure``."""

    context: TenantContext | None = None
    failure: ResolutionFailure | None = None

    @property
    def ok(self) -> bool:
        return self.context is not None

    def unwrap(self) -> TenantContext:
        """Return the context or raise the matching ResolutionError."""
        if self.context is not None:
            return self.context
        assert self.failure is not None
        raise ResolutionError(
            self.failure.reason,
            public_message=self.failure.error,
            status_code=self.failure.status,
        )


class TenantResolver:
    """Derives the tenant for a request from its hostname.

    Lookups run sequentially and fail fast. Any error while parsing the
    host or reading franchises degrades to "no tenant from hostname"
    rather than propagating.
    """

    def __init__(
        self,
        franchise_repository: IFranchiseRepository,
        policy: HostPolicy,
        default_tenant: str | None = None,
        trust_forwarded_host: bool = False,
        override_param: str = "tenant",
        probe: TenantContextProbe | None = None,
    ):
        self._franchises = franchise_repository
        self._policy = policy
        self._default_tenant = normalize_tenant(default_tenant) or None
        self._trust_forwarded_host = trust_forwarded_host
        self._override_param = override_param
        self._probe = probe or DefaultTenantContextProbe()

    async def resolve(
        self,
        request: InboundRequest,
        allow_query_override: bool = False,
    ) -> TenantResolution:
        """Resolve the tenant for a request.

        Args:
            request: Host headers and override parameter of the request
            allow_query_override: Whether this call site honors the override
                parameter on fallback hosts. Mutating routes leave it off.

        Returns:
            A TenantResolution holding either the context or the failure
        """
        hostname, host_ok = self._hostname(request)
        is_fallback = is_fallback_host(hostname, self._policy)
        override_present = request.tenant_override is not None

        if override_present and not is_fallback:
            self._probe.override_rejected(
                hostname=hostname or (request.host or ""),
                override=request.tenant_override or "",
            )
            return TenantResolution(
                failure=ResolutionFailure(
                    status=403,
                    error=OVERRIDE_REJECTED_MESSAGE,
                    reason=ReasonCode.OVERRIDE_REJECTED,
                )
            )

        tenant = await self._tenant_from_hostname(hostname) if host_ok else None
        if tenant is not None:
            return self._resolved(tenant, TenantSource.HOSTNAME, hostname, is_fallback)

        override = normalize_tenant(request.tenant_override)
        if is_fallback and allow_query_override and override:
            if await self._is_registered(hostname, override):
                return self._resolved(override, TenantSource.QUERY, hostname, True)
            return self._no_tenant(hostname, is_fallback)

        if is_fallback and self._default_tenant:
            return self._resolved(
                self._default_tenant, TenantSource.ENV, hostname, True
            )

        return self._no_tenant(hostname, is_fallback)

    async def resolve_or_raise(
        self,
        request: InboundRequest,
        allow_query_override: bool = False,
    ) -> TenantContext:
        """Resolve the tenant or raise ResolutionError."""
        resolution = await self.resolve(request, allow_query_override)
        return resolution.unwrap()

    def _hostname(self, request: InboundRequest) -> tuple[str, bool]:
        try:
            hostname = extract_hostname(
                request.host,
                request.forwarded_host,
                trust_forwarded_host=self._trust_forwarded_host,
            )
        except ValidationInputError:
            raw = request.host or request.forwarded_host or ""
            self._probe.malformed_host(raw_host=raw)
            return "", False
        return hostname, True

    async def _tenant_from_hostname(self, hostname: str) -> str | None:
        subdomain = parse_subdomain(hostname, self._policy)
        if subdomain is None:
            return None

        try:
            franchise = await self._franchises.get_by_subdomain(subdomain)
        except Exception as e:
            self._probe.hostname_lookup_failed(hostname=hostname, error=e)
            return None

        if franchise is None or not franchise.is_active:
            self._probe.unknown_subdomain(hostname=hostname, subdomain=subdomain)
            return None
        return normalize_tenant(franchise.slug)

    async def _is_registered(self, hostname: str, override: str) -> bool:
        if not is_valid_slug(override):
            self._probe.override_not_registered(hostname=hostname, override=override)
            return False

        try:
            franchise = await self._franchises.get_by_slug(override)
        except Exception as e:
            self._probe.hostname_lookup_failed(hostname=hostname, error=e)
            return False

        if franchise is None or not franchise.is_active:
            self._probe.override_not_registered(hostname=hostname, override=override)
            return False
        return True

    def _resolved(
        self,
        tenant: str,
        source: TenantSource,
        hostname: str,
        is_fallback: bool,
    ) -> TenantResolution:
        self._probe.tenant_resolved(
            tenant=tenant,
            source=source.value,
            hostname=hostname,
            is_fallback=is_fallback,
        )
        return TenantResolution(
            context=TenantContext(
                tenant=tenant,
                source=source,
                hostname=hostname,
                is_fallback=is_fallback,
            )
        )

    def _no_tenant(self, hostname: str, is_fallback: bool) -> TenantResolution:
        self._probe.tenant_not_detected(hostname=hostname, is_fallback=is_fallback)
        message = (
            NO_TENANT_FALLBACK_MESSAGE.format(param=self._override_param)
            if is_fallback
            else NO_TENANT_MESSAGE
        )
        return TenantResolution(
            failure=ResolutionFailure(
                status=400,
                error=message,
                reason=ReasonCode.NO_TENANT,
            )
        )
