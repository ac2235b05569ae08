"""Tenant identification from request metadata.

Pure, total and deterministic: every input maps to a tenant identifier or
``None`` (main / administrative domain) and nothing here raises.
"""

import ipaddress
from typing import Any, Optional

# Leading labels that address the main domain rather than a hotel
NON_TENANT_ALIASES = frozenset({"www", "app"})

# Single-label hosts that never name a hotel
LOOPBACK_ALIASES = frozenset({"localhost", "127.0.0.1"})


def _clean(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _is_ip_literal(hostname: str) -> bool:
    if hostname.startswith("["):
        return True
    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return True


def _split_port(host: str) -> tuple:
    """Split ``host[:port]`` into (hostname, has_port)."""
    if host.startswith("["):
        closing = host.find("]")
        if closing == -1:
            return host, False
        return host[:closing + 1], host[closing + 1:].startswith(":")
    if host.count(":") > 1:
        # Bare IPv6 literal
        return host, False
    hostname, sep, _ = host.partition(":")
    return hostname, bool(sep)


def extract_subdomain(host: Any) -> Optional[str]:
    """Extract the tenant label from a host header value."""
    host = _clean(host)
    if host is None:
        return None
    host = host.lower()

    hostname, has_port = _split_port(host)
    if not hostname or _is_ip_literal(hostname):
        return None

    labels = hostname.split(".")
    label: Optional[str] = None
    if len(labels) >= 3:
        # hotel.example.com, hotel.example.com:443
        label = labels[0]
    elif len(labels) == 2 and has_port:
        # hotel.localhost:3000
        label = labels[0]
    elif len(labels) == 1 and has_port:
        # hotel:3000
        if hostname not in LOOPBACK_ALIASES:
            label = hostname

    if not label or label in NON_TENANT_ALIASES:
        return None
    return label


def resolve_tenant_id(
    host: Any,
    forwarded_host: Any = None,
    override: Any = None,
) -> Optional[str]:
    """Derive the tenant identifier for a request.

    Args:
        host: ``Host`` header value
        forwarded_host: ``X-Forwarded-Host`` header value; wins over ``host``
        override: ``X-Tenant-Subdomain`` header value; wins over both

    Returns:
        Lower-case tenant identifier, or None for the main domain
    """
    explicit = _clean(override)
    if explicit is not None:
        return explicit.lower()

    forwarded = _clean(forwarded_host)
    if forwarded is not None:
        # Proxies may append hops: "client-facing, proxy"
        forwarded = _clean(forwarded.split(",")[0])

    return extract_subdomain(forwarded if forwarded is not None else host)
