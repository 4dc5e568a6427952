# invoice_bridge/domains/orders/routes.py
from fastapi import APIRouter, Depends

from invoice_bridge.core.dependencies import get_record_log, get_token_store
from invoice_bridge.domains.external_accounting.xero.auth.service import (
    XeroAuthService,
)
from invoice_bridge.domains.external_accounting.xero.auth.token_store import TokenStore
from invoice_bridge.domains.external_accounting.xero.data_service import (
    XeroDataService,
)

from .models import (
    ConnectionTestResponse,
    DebugStatusResponse,
    InvoiceRecordListResponse,
    InvoiceRecordResponse,
    InvoiceSubmissionResponse,
)
from .records import InvoiceRecordLog
from .service import OrderInvoiceService
from .types import CustomOrder, QuoteRequest, ShopifyOrder

router = APIRouter(prefix="/api", tags=["Orders"])


def get_order_service(
    token_store: TokenStore = Depends(get_token_store),
    record_log: InvoiceRecordLog = Depends(get_record_log),
) -> OrderInvoiceService:
    return OrderInvoiceService(
        XeroAuthService(token_store), XeroDataService(), record_log
    )


@router.post(
    "/shopify/order",
    response_model=InvoiceSubmissionResponse,
    operation_id="createInvoiceFromShopifyOrder",
)
async def create_shopify_invoice(
    order: ShopifyOrder,
    service: OrderInvoiceService = Depends(get_order_service),
) -> InvoiceSubmissionResponse:
    """
    Shopify order-creation webhook.

    Creates an AUTHORISED invoice in the connected Xero organisation.
    """
    return await service.submit_shopify_order(order)


@router.post(
    "/custom/order",
    response_model=InvoiceSubmissionResponse,
    operation_id="createInvoiceFromCustomOrder",
)
async def create_custom_invoice(
    order: CustomOrder,
    service: OrderInvoiceService = Depends(get_order_service),
) -> InvoiceSubmissionResponse:
    """
    Custom storefront order submission.

    **Business Rules**:
    - Order must include customer information and at least one line item
    - Order id is generated when absent
    - Currency defaults to the Xero organisation's base currency
    """
    return await service.submit_custom_order(order)


@router.post(
    "/send-quote-to-xero",
    response_model=InvoiceSubmissionResponse,
    operation_id="sendQuoteToXero",
)
async def send_quote_to_xero(
    quote: QuoteRequest,
    service: OrderInvoiceService = Depends(get_order_service),
) -> InvoiceSubmissionResponse:
    """Send a quote to Xero as a DRAFT invoice for manual review."""
    return await service.submit_quote(quote)


@router.get(
    "/invoices",
    response_model=InvoiceRecordListResponse,
    operation_id="listInvoiceRecords",
)
async def list_invoice_records(
    record_log: InvoiceRecordLog = Depends(get_record_log),
) -> InvoiceRecordListResponse:
    invoices, errors = record_log.split()
    return InvoiceRecordListResponse(
        invoices=invoices, errors=errors, total=len(record_log)
    )


@router.get(
    "/invoice/{order_id}",
    response_model=InvoiceRecordResponse,
    operation_id="getInvoiceRecord",
)
async def get_invoice_record(
    order_id: str,
    record_log: InvoiceRecordLog = Depends(get_record_log),
) -> InvoiceRecordResponse:
    """Look up a record by order id, or ``error-<order id>`` for failures."""
    return InvoiceRecordResponse(invoice=record_log.get(order_id))


@router.get(
    "/test/connection",
    response_model=ConnectionTestResponse,
    operation_id="testXeroConnection",
)
async def test_xero_connection(
    service: OrderInvoiceService = Depends(get_order_service),
) -> ConnectionTestResponse:
    return await service.test_connection()


@router.get(
    "/debug/status",
    response_model=DebugStatusResponse,
    operation_id="getDebugStatus",
)
async def get_debug_status(
    service: OrderInvoiceService = Depends(get_order_service),
) -> DebugStatusResponse:
    return await service.debug_status()
