"""
Canonical invoice document assembly.

``normalize_order_to_invoice`` never fails: malformed order data degrades to
defaults. ``normalize_quote_to_invoice`` validates the quote first and raises
``QuoteValidationError`` before anything is built.
"""

from datetime import date, timedelta, timezone
from typing import Callable, Optional, Union

from invoice_bridge.core.clock import Clock, SystemClock, epoch_millis

from .contacts import resolve_contact, resolve_quote_contact
from .exceptions import QuoteValidationError
from .line_items import build_line_items
from .models import SALES_ACCOUNT_CODE, CanonicalInvoiceDocument, CanonicalInvoiceLine
from .parsing import format_amount, lenient_float, lenient_int
from .types import BaseOrder, CustomOrder, QuoteRequest, RawOrder, ShopifyOrder

DEFAULT_CURRENCY = "USD"
PAYMENT_TERMS_DAYS = 30

InvoiceNumberFactory = Callable[[], str]


def _invoice_dates(clock: Clock, payment_terms_days: int) -> tuple[date, date]:
    today = clock.now().astimezone(timezone.utc).date()
    return today, today + timedelta(days=payment_terms_days)


def _text(value: Union[int, str, None]) -> str:
    return "" if value is None else str(value)


def normalize_order_to_invoice(
    order: BaseOrder,
    clock: Optional[Clock] = None,
    invoice_number_factory: Optional[InvoiceNumberFactory] = None,
    default_currency: str = DEFAULT_CURRENCY,
    payment_terms_days: int = PAYMENT_TERMS_DAYS,
) -> CanonicalInvoiceDocument:
    """
    Build an authorised invoice from a Shopify or custom order.

    Args:
        order: Parsed order payload
        clock: Time source for the invoice and due dates
        invoice_number_factory: Fallback invoice number when the order has
            neither an order number nor a name. Defaults to INV-<epoch ms>.
        default_currency: Currency used when the order carries none
        payment_terms_days: Days between invoice date and due date

    Returns:
        CanonicalInvoiceDocument with status AUTHORISED
    """
    clock = clock or SystemClock()
    invoice_date, due_date = _invoice_dates(clock, payment_terms_days)

    invoice_number = _text(order.order_number) or order.name
    if not invoice_number:
        if invoice_number_factory is None:
            invoice_number = f"INV-{epoch_millis(clock)}"
        else:
            invoice_number = invoice_number_factory()

    order_ref = _text(order.order_number) or _text(order.id) or invoice_number

    return CanonicalInvoiceDocument(
        contact=resolve_contact(order),
        line_items=build_line_items(order),
        date=invoice_date,
        due_date=due_date,
        invoice_number=invoice_number,
        reference=f"Order: {order_ref}",
        status="AUTHORISED",
        currency_code=order.currency or default_currency,
        line_amount_types="Exclusive" if order.note else None,
    )


def validate_quote(quote: QuoteRequest) -> None:
    """Raise QuoteValidationError naming every missing or unusable field.

    Items are checked one by one and reported as ``items[i].<field>``.
    """
    missing = []
    if not _text(quote.quote_id):
        missing.append("quoteId")
    if not quote.customer or not quote.customer.name:
        missing.append("customer.name")
    if not quote.items:
        missing.append("items")
    for index, item in enumerate(quote.items or []):
        if not item.description:
            missing.append(f"items[{index}].description")
        quantity = lenient_int(item.quantity, default=0)
        if not quantity.ok or quantity.value < 1:
            missing.append(f"items[{index}].quantity")
        if not lenient_float(item.unit_amount).ok:
            missing.append(f"items[{index}].unitAmount")
    if missing:
        raise QuoteValidationError(missing)


def normalize_quote_to_invoice(
    quote: QuoteRequest,
    clock: Optional[Clock] = None,
    default_currency: str = DEFAULT_CURRENCY,
    payment_terms_days: int = PAYMENT_TERMS_DAYS,
) -> CanonicalInvoiceDocument:
    """Validate a quote request and build a draft invoice from it."""
    validate_quote(quote)

    clock = clock or SystemClock()
    invoice_date, due_date = _invoice_dates(clock, payment_terms_days)
    quote_id = _text(quote.quote_id)

    line_items = [
        CanonicalInvoiceLine(
            description=item.description,
            quantity=lenient_int(item.quantity).value,
            unit_amount=format_amount(lenient_float(item.unit_amount).value),
            account_code=SALES_ACCOUNT_CODE,
        )
        for item in quote.items
    ]

    return CanonicalInvoiceDocument(
        contact=resolve_quote_contact(quote.customer),
        line_items=line_items,
        date=invoice_date,
        due_date=due_date,
        invoice_number=quote_id,
        reference=f"Quote: {quote_id}",
        status="DRAFT",
        currency_code=quote.currency or default_currency,
    )


def normalize(
    payload: Union[RawOrder, QuoteRequest],
    clock: Optional[Clock] = None,
    default_currency: str = DEFAULT_CURRENCY,
    payment_terms_days: int = PAYMENT_TERMS_DAYS,
) -> CanonicalInvoiceDocument:
    """Build the invoice document for any supported payload shape."""
    match payload:
        case QuoteRequest():
            return normalize_quote_to_invoice(
                payload,
                clock=clock,
                default_currency=default_currency,
                payment_terms_days=payment_terms_days,
            )
        case ShopifyOrder() | CustomOrder():
            return normalize_order_to_invoice(
                payload,
                clock=clock,
                default_currency=default_currency,
                payment_terms_days=payment_terms_days,
            )
        case _:
            raise TypeError(f"Unsupported payload type: {type(payload).__name__}")
