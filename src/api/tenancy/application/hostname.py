"""Hostname parsing for tenant resolution.

Pure functions only. Nothing in this module touches the datastore; the
resolver combines these results with franchise lookups.
"""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass

from tenancy.domain.exceptions import ValidationInputError
from tenancy.domain.value_objects import ReasonCode

_LABEL = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")
_MAX_HOSTNAME_LENGTH = 253

# Always treated as a base domain so <city>.localhost works without config
_LOCAL_BASE_DOMAIN = "localhost"


@dataclass(frozen=True)
class HostPolicy:
    """Deployment-specific rules for interpreting hostnames.

    Attributes:
        base_domains: Domains tenants are served under (``example.com``
            serves ``riverside.example.com``). When empty, any host with
            three or more labels uses its first label.
        fallback_hosts: Exact hosts that carry no tenant and may accept an
            explicit override (``localhost``, ``127.0.0.1``).
        fallback_host_suffixes: Host suffixes treated the same way, such as
            preview deployment domains.
        reserved_subdomains: Labels that never name a tenant.
    """

    base_domains: tuple[str, ...] = ()
    fallback_hosts: frozenset[str] = frozenset({"localhost", "127.0.0.1"})
    fallback_host_suffixes: tuple[str, ...] = (".localhost",)
    reserved_subdomains: frozenset[str] = frozenset({"www", "app", "api"})


def _first_header_value(raw: str) -> str:
    # X-Forwarded-Host may carry a comma separated proxy chain
    return raw.split(",", 1)[0].strip()


def _strip_port(raw: str) -> str:
    if raw.startswith("["):
        end = raw.find("]")
        if end == -1:
            raise ValidationInputError(ReasonCode.MALFORMED_HOST)
        host, rest = raw[1:end], raw[end + 1 :]
        if rest and not (rest.startswith(":") and rest[1:].isdigit()):
            raise ValidationInputError(ReasonCode.MALFORMED_HOST)
        try:
            ipaddress.IPv6Address(host)
        except ValueError as e:
            raise ValidationInputError(ReasonCode.MALFORMED_HOST) from e
        return host

    host, sep, port = raw.partition(":")
    if sep and not port.isdigit():
        raise ValidationInputError(ReasonCode.MALFORMED_HOST)
    return host


def extract_hostname(
    host: str | None,
    forwarded_host: str | None = None,
    trust_forwarded_host: bool = False,
) -> str:
    """Extract the normalized hostname from request headers.

    Lowercases, strips any port and a trailing dot. IPv6 literals are
    returned without brackets.

    Args:
        host: The raw Host header
        forwarded_host: The raw X-Forwarded-Host header, if any
        trust_forwarded_host: Whether the deployment sits behind a proxy
            that sets X-Forwarded-Host

    Returns:
        The normalized hostname, or an empty string when no host was sent

    Raises:
        ValidationInputError: If the header is not a valid host[:port]
    """
    raw = host
    if trust_forwarded_host and forwarded_host and forwarded_host.strip():
        raw = _first_header_value(forwarded_host)

    if raw is None or not raw.strip():
        return ""

    raw = raw.strip().lower()
    if any(ch.isspace() for ch in raw) or "/" in raw or "@" in raw:
        raise ValidationInputError(ReasonCode.MALFORMED_HOST)

    hostname = _strip_port(raw)
    if ":" in hostname:
        # IPv6 literal
        return hostname

    hostname = hostname.rstrip(".")
    if not hostname or len(hostname) > _MAX_HOSTNAME_LENGTH:
        raise ValidationInputError(ReasonCode.MALFORMED_HOST)
    if not all(_LABEL.match(label) for label in hostname.split(".")):
        raise ValidationInputError(ReasonCode.MALFORMED_HOST)
    return hostname


def is_ip_address(hostname: str) -> bool:
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


def is_fallback_host(hostname: str, policy: HostPolicy) -> bool:
    """Check whether a host is a development, preview or bare host.

    Only fallback hosts may honor an explicit tenant override or the
    deployment default.
    """
    if not hostname:
        return False
    if hostname in policy.fallback_hosts:
        return True
    for suffix in policy.fallback_host_suffixes:
        bare = suffix.lstrip(".")
        if bare and hostname.endswith("." + bare):
            return True
    return False


def parse_subdomain(hostname: str, policy: HostPolicy) -> str | None:
    """Extract the candidate tenant label from a hostname.

    ``riverside.example.com`` yields ``riverside`` when ``example.com`` is a
    base domain; ``riverside.localhost`` always yields ``riverside``. Bare
    domains, reserved labels, IP literals and nested subdomains yield None.

    The label is only a candidate. The resolver still checks it against
    the registered franchises.
    """
    if not hostname or hostname in policy.fallback_hosts or is_ip_address(hostname):
        return None

    label: str | None = None
    for base in (*policy.base_domains, _LOCAL_BASE_DOMAIN):
        if hostname.endswith("." + base):
            candidate = hostname[: -len(base) - 1]
            label = candidate if "." not in candidate else None
            break
    else:
        if not policy.base_domains:
            parts = hostname.split(".")
            if len(parts) >= 3:
                label = parts[0]

    if not label or label in policy.reserved_subdomains:
        return None
    return label
