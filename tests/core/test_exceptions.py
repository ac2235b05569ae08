"""Tests for the exception hierarchy and HTTP mapping."""

import pytest

from hotel_tenancy.core.exceptions import (
    DatabaseUnavailableError,
    EntityNotFoundError,
    HotelTenancyError,
    InvariantViolationError,
    MainDomainError,
    PartialReconciliationError,
    TenantNotFoundError,
    TenantUnavailableError,
    create_error_response,
    get_http_status_code,
)


class TestHttpMapping:

    @pytest.mark.parametrize("exc,status", [
        (MainDomainError(), 403),
        (TenantNotFoundError("acme"), 404),
        (EntityNotFoundError("Stay", 1), 404),
        (InvariantViolationError("no bill", stay_id=1), 409),
        (TenantUnavailableError("acme", "timeout"), 503),
        (DatabaseUnavailableError("tenant_acme"), 503),
        (PartialReconciliationError("hourly", 1, 2), 500),
        (HotelTenancyError("boom"), 500),
        (RuntimeError("boom"), 500),
    ])
    def test_status_codes(self, exc, status):
        assert get_http_status_code(exc) == status


class TestErrorPayloads:

    def test_create_error_response(self):
        payload = create_error_response(TenantNotFoundError("acme"))

        assert payload == {
            "error": {
                "code": "HOTEL_NOT_FOUND",
                "message": "Hotel 'acme' not found or inactive",
                "details": {"tenant_id": "acme"},
                "type": "TenantNotFoundError",
            }
        }

    def test_default_error_code_is_class_name(self):
        assert HotelTenancyError("x").error_code == "HotelTenancyError"

    def test_partial_reconciliation_details(self):
        error = PartialReconciliationError("hourly", 1, 3, details={"failed_tenants": ["beta"]})

        assert error.details["tenant_errors"] == 1
        assert error.details["stay_errors"] == 3
        assert error.details["failed_tenants"] == ["beta"]
        assert "1 tenant error(s) and 3 stay error(s)" in error.message
