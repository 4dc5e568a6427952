"""
Order submission: builds invoice documents and creates them in Xero.
"""

import logging
from typing import List, Optional, Union

from fastapi import HTTPException

from invoice_bridge.core.clock import Clock, SystemClock, epoch_millis
from invoice_bridge.core.settings import settings
from invoice_bridge.domains.external_accounting.xero.auth.models import XeroSession
from invoice_bridge.domains.external_accounting.xero.auth.service import (
    XeroAuthService,
)
from invoice_bridge.domains.external_accounting.xero.data_service import (
    XeroDataService,
)
from invoice_bridge.shared.exceptions import (
    IntegrationConnectionError,
    IntegrationValidationError,
    UnsupportedCurrencyError,
)

from .builder import normalize_order_to_invoice, normalize_quote_to_invoice, validate_quote
from .exceptions import OrderValidationError
from .line_items import tax_amount
from .models import (
    CanonicalInvoiceDocument,
    ConnectionDebugInfo,
    ConnectionTestResponse,
    CreatedInvoice,
    DebugStatusResponse,
    EnvironmentDebugInfo,
    InvoiceRecord,
    InvoiceSubmissionResponse,
    InvoiceSummary,
    OrganisationSummary,
    RecordDebugInfo,
    TokenDebugInfo,
)
from .records import InvoiceRecordLog
from .types import BaseOrder, CustomOrder, QuoteRequest, ShopifyOrder

logger = logging.getLogger(__name__)


def _order_key(order: BaseOrder) -> str:
    for value in (order.id, order.order_number, order.name):
        if value is not None and str(value):
            return str(value)
    return "unknown"


class OrderInvoiceService:
    """Turns inbound orders and quotes into Xero invoices."""

    def __init__(
        self,
        auth_service: XeroAuthService,
        data_service: XeroDataService,
        record_log: InvoiceRecordLog,
        clock: Optional[Clock] = None,
    ):
        self.auth_service = auth_service
        self.data_service = data_service
        self.record_log = record_log
        self.clock = clock or SystemClock()
        self.default_currency = settings.DEFAULT_CURRENCY
        self.payment_terms_days = settings.PAYMENT_TERMS_DAYS

    async def submit_shopify_order(
        self, order: ShopifyOrder
    ) -> InvoiceSubmissionResponse:
        """Create an authorised invoice for a Shopify webhook order."""
        logger.info(f"Received Shopify order: {order.order_number or order.id}")

        try:
            session = await self.auth_service.ensure_session()
            document = self._build_order_document(order)
            created = await self._create_invoice(session, document)
        except Exception as e:
            self._record_failure(_order_key(order), order, e)
            raise

        return self._record_success(order, document, created)

    async def submit_custom_order(self, order: CustomOrder) -> InvoiceSubmissionResponse:
        """
        Create an authorised invoice for a custom storefront order.

        A missing order id is generated and a missing currency is taken from
        the Xero organisation, falling back to the configured default.

        Raises:
            OrderValidationError: If customer or line items are missing
            IntegrationConnectionError: If the bridge is not connected to Xero
        """
        if not order.customer or not order.line_items:
            raise OrderValidationError()

        if order.id is None or not str(order.id):
            order = order.model_copy(update={"id": f"custom-{epoch_millis(self.clock)}"})

        logger.info(f"Received custom order: {order.id}")

        try:
            issues = self.readiness_issues()
            if issues:
                logger.error(f"System readiness issues: {issues}")
                raise IntegrationConnectionError(
                    f"System not ready: {', '.join(issues)}"
                )

            session = await self.auth_service.ensure_session()
            if not order.currency:
                currency = await self._organisation_currency(session)
                order = order.model_copy(update={"currency": currency})

            document = self._build_order_document(order)
            created = await self._create_invoice(session, document)
        except Exception as e:
            self._record_failure(_order_key(order), order, e)
            raise

        return self._record_success(order, document, created)

    async def submit_quote(self, quote: QuoteRequest) -> InvoiceSubmissionResponse:
        """
        Raise a quote as a draft invoice.

        Raises:
            QuoteValidationError: If required quote fields are missing or unusable
        """
        validate_quote(quote)
        logger.info(f"Received quote: {quote.quote_id}")
        key = str(quote.quote_id)

        try:
            session = await self.auth_service.ensure_session()
            if not quote.currency:
                currency = await self._organisation_currency(session)
                quote = quote.model_copy(update={"currency": currency})

            document = normalize_quote_to_invoice(
                quote,
                clock=self.clock,
                default_currency=self.default_currency,
                payment_terms_days=self.payment_terms_days,
            )
            created = await self._create_invoice(session, document)
        except Exception as e:
            self._record_failure(key, quote, e)
            raise

        self.record_log.record_success(
            InvoiceRecord(
                order_id=key,
                order_number=key,
                xero_invoice_id=created.invoice_id,
                xero_invoice_number=created.invoice_number,
                status=created.status,
                total=created.total,
                customer_email=quote.customer.email,
                customer_name=document.contact.name,
                created_at=self.clock.now(),
            )
        )
        return InvoiceSubmissionResponse(
            invoice=InvoiceSummary.from_created(created),
            message="Quote sent to Xero as draft invoice",
        )

    def readiness_issues(self) -> List[str]:
        """List configuration and token problems that block submission."""
        issues = []
        if not settings.XERO_CLIENT_ID:
            issues.append("Missing XERO_CLIENT_ID environment variable")
        if not settings.XERO_CLIENT_SECRET:
            issues.append("Missing XERO_CLIENT_SECRET environment variable")
        if not settings.XERO_REDIRECT_URI:
            issues.append("Missing XERO_REDIRECT_URI environment variable")

        tokens = self.auth_service.token_store.load()
        if not tokens:
            issues.append("No token file found")
        else:
            if not tokens.access_token:
                issues.append("No access_token in token file")
            if not tokens.refresh_token:
                issues.append("No refresh_token in token file")
            if not tokens.tenant_id:
                issues.append("No tenant_id in token file")

        return issues

    async def test_connection(self) -> ConnectionTestResponse:
        """Check configuration, then fetch the organisation from Xero."""
        issues = self.readiness_issues()
        if issues:
            return ConnectionTestResponse(
                success=False, error="System not ready", issues=issues
            )

        session = await self.auth_service.ensure_session()
        organisation = await self.data_service.get_organisation(session)
        logger.info("Xero connection test successful")

        return ConnectionTestResponse(
            success=True,
            message="Xero connection working",
            organisation=OrganisationSummary(
                name=organisation.Name,
                country_code=organisation.CountryCode,
                currency_code=organisation.BaseCurrency,
            ),
            tenant_id=session.tenant_id,
        )

    async def debug_status(self) -> DebugStatusResponse:
        tokens = self.auth_service.token_store.load()

        try:
            session = await self.auth_service.ensure_session()
            connection = ConnectionDebugInfo(
                status="connected", tenant_id=session.tenant_id
            )
        except HTTPException as e:
            connection = ConnectionDebugInfo(status="error", error=str(e.detail))

        return DebugStatusResponse(
            timestamp=self.clock.now(),
            tokens=(
                TokenDebugInfo(
                    has_access_token=bool(tokens.access_token),
                    has_refresh_token=bool(tokens.refresh_token),
                    tenant_id=tokens.tenant_id,
                    saved_at=tokens.saved_at,
                    expires_at=tokens.expires_at,
                )
                if tokens
                else None
            ),
            xero_connection=connection,
            environment=EnvironmentDebugInfo(
                has_client_id=bool(settings.XERO_CLIENT_ID),
                has_client_secret=bool(settings.XERO_CLIENT_SECRET),
                redirect_uri=settings.XERO_REDIRECT_URI,
            ),
            invoice_records=RecordDebugInfo(
                total=len(self.record_log), errors=self.record_log.error_count
            ),
        )

    def _build_order_document(self, order: BaseOrder) -> CanonicalInvoiceDocument:
        document = normalize_order_to_invoice(
            order,
            clock=self.clock,
            default_currency=self.default_currency,
            payment_terms_days=self.payment_terms_days,
        )
        logger.info(
            f"Invoice payload: contact={document.contact.name!r}, "
            f"lines={len(document.line_items)}, "
            f"currency={document.currency_code}, status={document.status}, "
            f"order tax={tax_amount(order):.2f}"
        )
        for line in document.line_items:
            logger.debug(
                f"  {line.description} x{line.quantity} @ {line.unit_amount} "
                f"({line.account_code})"
            )
        return document

    async def _organisation_currency(self, session: XeroSession) -> str:
        try:
            currency = await self.data_service.get_base_currency(session)
        except HTTPException as e:
            logger.warning(
                f"Could not read organisation base currency, "
                f"using {self.default_currency}: {e.detail}"
            )
            return self.default_currency

        logger.info(f"Using organisation base currency {currency}")
        return currency

    async def _create_invoice(
        self, session: XeroSession, document: CanonicalInvoiceDocument
    ) -> CreatedInvoice:
        """Create the invoice, turning currency rejections into remediation."""
        logger.info("Creating invoice in Xero")
        try:
            created = await self.data_service.create_invoice(session, document)
        except IntegrationValidationError as e:
            if not any("currency" in message.lower() for message in e.messages):
                raise
            base_currency = await self.data_service.get_base_currency(session)
            raise UnsupportedCurrencyError(document.currency_code, base_currency) from e

        logger.info(
            f"Invoice created: id={created.invoice_id}, "
            f"number={created.invoice_number}, status={created.status}, "
            f"total={created.total}"
        )
        return created

    def _record_success(
        self,
        order: BaseOrder,
        document: CanonicalInvoiceDocument,
        created: CreatedInvoice,
    ) -> InvoiceSubmissionResponse:
        self.record_log.record_success(
            InvoiceRecord(
                order_id=_order_key(order),
                order_number=str(order.order_number or order.name or order.id or ""),
                xero_invoice_id=created.invoice_id,
                xero_invoice_number=created.invoice_number,
                status=created.status,
                total=created.total,
                customer_email=document.contact.email_address,
                customer_name=document.contact.name,
                created_at=self.clock.now(),
            )
        )
        return InvoiceSubmissionResponse(invoice=InvoiceSummary.from_created(created))

    def _record_failure(
        self,
        key: str,
        payload: Union[BaseOrder, QuoteRequest],
        error: Exception,
    ) -> None:
        message = error.detail if isinstance(error, HTTPException) else str(error)
        logger.error(f"Error creating invoice for {key}: {message}", exc_info=True)

        self.record_log.record_failure(
            InvoiceRecord(
                order_id=key,
                error=str(message) or "Unknown error occurred",
                error_type=type(error).__name__,
                error_at=self.clock.now(),
                order_data=payload.model_dump(mode="json", by_alias=True),
            )
        )
