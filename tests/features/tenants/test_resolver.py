"""Tests for tenant identification from request headers."""

import pytest

from hotel_tenancy.features.tenants.utils.resolver import extract_subdomain, resolve_tenant_id


class TestExtractSubdomain:
    """Host header parsing."""

    @pytest.mark.parametrize("host,expected", [
        ("acme.example.com", "acme"),
        ("ACME.Example.COM", "acme"),
        ("acme.example.com:443", "acme"),
        ("grand.hotels.example.co.uk", "grand"),
        ("acme.localhost:3000", "acme"),
        ("acme:3000", "acme"),
        ("www.example.com", None),
        ("app.example.com", None),
        ("example.com", None),
        ("localhost", None),
        ("localhost:3000", None),
        ("127.0.0.1", None),
        ("127.0.0.1:8000", None),
        ("10.0.0.12:8080", None),
        ("[::1]:8000", None),
        ("::1", None),
        ("", None),
        ("   ", None),
        (None, None),
    ])
    def test_host_table(self, host, expected):
        assert extract_subdomain(host) == expected

    @pytest.mark.parametrize("value", [42, b"acme.example.com", ["acme"], object()])
    def test_non_string_input_never_raises(self, value):
        assert extract_subdomain(value) is None


class TestResolveTenantId:
    """Header precedence."""

    def test_override_wins(self):
        assert resolve_tenant_id(
            "acme.example.com",
            forwarded_host="other.example.com",
            override="  Grand  ",
        ) == "grand"

    def test_blank_override_is_ignored(self):
        assert resolve_tenant_id("acme.example.com", override="  ") == "acme"

    def test_forwarded_host_wins_over_host(self):
        assert resolve_tenant_id("internal:8000", forwarded_host="acme.example.com") == "acme"

    def test_forwarded_host_uses_first_hop(self):
        result = resolve_tenant_id(
            "internal:8000",
            forwarded_host="acme.example.com, proxy.internal.example.com",
        )
        assert result == "acme"

    def test_forwarded_main_domain_is_not_overridden_by_host(self):
        assert resolve_tenant_id("acme.example.com", forwarded_host="www.example.com") is None

    def test_main_domain(self):
        assert resolve_tenant_id("example.com") is None
        assert resolve_tenant_id("www.example.com") is None

    def test_deterministic(self):
        results = {resolve_tenant_id("Acme.Example.com:8443") for _ in range(5)}
        assert results == {"acme"}
