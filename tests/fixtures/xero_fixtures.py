# tests/fixtures/xero_fixtures.py
"""Test fixtures for Xero integration tests."""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List
from unittest.mock import Mock

import pytest

from invoice_bridge.domains.external_accounting.xero.auth.models import (
    StoredTokenSet,
    XeroSession,
)


@pytest.fixture
def stored_tokens() -> StoredTokenSet:
    """Token set with a live access token and a tenant."""
    now = datetime.now(timezone.utc)
    return StoredTokenSet(
        access_token="test-access-token",
        refresh_token="test-refresh-token",
        expires_at=now + timedelta(minutes=30),
        tenant_id="test-tenant-id",
        tenant_name="Test Organisation",
        saved_at=now,
    )


@pytest.fixture
def expired_tokens(stored_tokens: StoredTokenSet) -> StoredTokenSet:
    """Token set whose access token expired an hour ago."""
    return stored_tokens.model_copy(
        update={
            "access_token": "expired-access-token",
            "expires_at": datetime.now(timezone.utc) - timedelta(hours=1),
        }
    )


@pytest.fixture
def xero_session() -> XeroSession:
    return XeroSession(tenant_id="test-tenant-id", access_token="test-access-token")


@pytest.fixture
def xero_token_response_data() -> Dict[str, Any]:
    """Mock Xero token response data."""
    return {
        "access_token": "test-access-token-12345",
        "refresh_token": "test-refresh-token-12345",
        "expires_in": 1800,  # 30 minutes
        "token_type": "Bearer",
        "scope": (
            "openid profile email accounting.transactions "
            "accounting.settings offline_access"
        ),
        "id_token": "test-id-token",
    }


@pytest.fixture
def xero_tenant_info_data() -> Dict[str, Any]:
    """Mock Xero tenant information."""
    return {
        "id": "test-connection-uuid",
        "tenantId": "test-tenant-id",
        "tenantName": "Test Organisation",
        "tenantType": "ORGANISATION",
        "createdDateUtc": "2024-01-01T00:00:00.000Z",
        "updatedDateUtc": "2024-01-01T00:00:00.000Z",
    }


@pytest.fixture
def xero_connections_response_data(
    xero_tenant_info_data: Dict[str, Any],
) -> List[Dict[str, Any]]:
    """Mock Xero connections API response."""
    return [xero_tenant_info_data]


@pytest.fixture
def xero_invoice_created_data() -> Dict[str, Any]:
    """Xero response to a successful invoice creation."""
    return {
        "Id": "test-request-id",
        "Status": "OK",
        "Invoices": [
            {
                "InvoiceID": "test-invoice-id",
                "InvoiceNumber": "1001",
                "Type": "ACCREC",
                "Status": "AUTHORISED",
                "Total": 310.0,
                "CurrencyCode": "AUD",
                "HasErrors": False,
            }
        ],
    }


@pytest.fixture
def xero_organisation_data() -> Dict[str, Any]:
    """Xero organisation endpoint response."""
    return {
        "Organisations": [
            {
                "OrganisationID": "test-organisation-id",
                "Name": "Test Organisation",
                "CountryCode": "AU",
                "BaseCurrency": "AUD",
            }
        ]
    }


@pytest.fixture
def xero_validation_error_data() -> Dict[str, Any]:
    """Xero 400 ValidationException body."""
    return {
        "ErrorNumber": 10,
        "Type": "ValidationException",
        "Message": "A validation exception occurred",
        "Elements": [
            {
                "ValidationErrors": [
                    {"Message": "The currency code EUR is not enabled."}
                ]
            }
        ],
    }


class MockHttpResponse:
    """Mock HTTP response for testing."""

    def __init__(self, json_data: Any, status_code: int = 200):
        self.json_data = json_data
        self.status_code = status_code
        self.text = str(json_data)

    def json(self) -> Any:
        return self.json_data

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            from httpx import HTTPStatusError, Request, Response

            request = Mock(spec=Request)
            response = Mock(spec=Response)
            response.status_code = self.status_code
            response.text = self.text
            response.json.return_value = self.json_data
            raise HTTPStatusError(
                message=f"HTTP {self.status_code}",
                request=request,
                response=response,
            )


def create_mock_http_response(
    json_data: Any, status_code: int = 200
) -> MockHttpResponse:
    """Create a mock HTTP response."""
    return MockHttpResponse(json_data, status_code)


@pytest.fixture
def mock_settings():
    """Mock settings for Xero configuration."""
    settings_mock = Mock()
    settings_mock.XERO_CLIENT_ID = "test-client-id"
    settings_mock.XERO_CLIENT_SECRET = "test-client-secret"
    settings_mock.XERO_REDIRECT_URI = "http://localhost:3000/callback"
    settings_mock.XERO_SCOPES = (
        "openid profile email accounting.transactions "
        "accounting.settings offline_access"
    )
    settings_mock.JWT_SECRET = "test-jwt-secret-for-state-tokens"
    settings_mock.XERO_CLOCK_TOLERANCE = 60
    settings_mock.DEFAULT_CURRENCY = "USD"
    settings_mock.PAYMENT_TERMS_DAYS = 30
    return settings_mock
