import logging
from typing import Any, Dict, Optional, cast

import httpx

from invoice_bridge.domains.orders.models import CanonicalInvoiceDocument, CreatedInvoice
from invoice_bridge.shared.exceptions import (
    IntegrationConnectionError,
    IntegrationTokenExpiredError,
    IntegrationValidationError,
)

from .auth.models import XeroSession
from .types import (
    XeroErrorResponse,
    XeroInvoicesResponse,
    XeroOrganisation,
    XeroOrganisationsResponse,
)

logger = logging.getLogger(__name__)

XeroJson = Dict[str, Any]


class XeroDataService:
    """Xero accounting API calls used by the order bridge."""

    def __init__(self, timeout: float = 30.0):
        self.base_url = "https://api.xero.com/api.xro/2.0"
        self.timeout = timeout

    async def create_invoice(
        self, session: XeroSession, document: CanonicalInvoiceDocument
    ) -> CreatedInvoice:
        """
        Create an invoice in the session's tenant.

        Args:
            session: Tenant and access token to call with
            document: Canonical invoice to create

        Returns:
            CreatedInvoice with Xero's id, number, status and total

        Raises:
            IntegrationValidationError: If Xero rejects the invoice content
            IntegrationTokenExpiredError: If Xero rejects the access token
            IntegrationConnectionError: For transport failures or empty responses
        """
        response = await self._make_xero_request(
            "POST",
            f"{self.base_url}/Invoices",
            session,
            params={"summarizeErrors": "false"},
            json={"Invoices": [document.to_xero()]},
        )

        invoices = XeroInvoicesResponse.model_validate(response).Invoices
        if not invoices:
            raise IntegrationConnectionError("Xero API returned empty response")

        created = invoices[0]
        if created.ValidationErrors:
            raise IntegrationValidationError(
                [error.Message for error in created.ValidationErrors]
            )
        if not created.InvoiceID:
            raise IntegrationConnectionError("Xero API returned no invoice id")

        return CreatedInvoice(
            invoice_id=created.InvoiceID,
            invoice_number=created.InvoiceNumber,
            status=created.Status,
            total=created.Total,
        )

    async def get_organisation(self, session: XeroSession) -> XeroOrganisation:
        """Fetch the connected organisation."""
        response = await self._make_xero_request(
            "GET", f"{self.base_url}/Organisation", session
        )

        organisations = XeroOrganisationsResponse.model_validate(response).Organisations
        if not organisations:
            raise IntegrationConnectionError("No organisation returned from Xero API")
        return organisations[0]

    async def get_base_currency(self, session: XeroSession) -> str:
        organisation = await self.get_organisation(session)
        if not organisation.BaseCurrency:
            raise IntegrationConnectionError("Xero organisation has no base currency")
        return organisation.BaseCurrency

    async def _make_xero_request(
        self,
        method: str,
        url: str,
        session: XeroSession,
        params: Optional[Dict[str, str]] = None,
        json: Optional[XeroJson] = None,
    ) -> XeroJson:
        """
        Make an authenticated request to the Xero API.

        Raises:
            IntegrationValidationError: For 400 validation responses
            IntegrationTokenExpiredError: For 401 responses
            IntegrationConnectionError: For other failures
        """
        headers = {
            "Authorization": f"Bearer {session.access_token}",
            "Xero-Tenant-Id": session.tenant_id,
            "Accept": "application/json",
        }
        if json is not None:
            headers["Content-Type"] = "application/json"

        async with httpx.AsyncClient() as client:
            try:
                response = await client.request(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json,
                    timeout=self.timeout,
                )
                response.raise_for_status()
                return cast(XeroJson, response.json())
            except httpx.HTTPStatusError as e:
                raise self._error_from_response(e.response)
            except httpx.RequestError as e:
                raise IntegrationConnectionError(f"Xero API request failed: {e}")

    def _error_from_response(self, response: httpx.Response) -> Exception:
        logger.error(f"Xero API responded {response.status_code}: {response.text}")

        if response.status_code == 401:
            return IntegrationTokenExpiredError(
                f"Xero authentication failed: {response.text}"
            )

        if response.status_code == 400:
            try:
                messages = XeroErrorResponse.model_validate(response.json()).messages()
            except ValueError:
                messages = []
            if messages:
                return IntegrationValidationError(messages)

        return IntegrationConnectionError(f"Xero API request failed: {response.text}")
