"""
Line item normalization and order-level adjustments.

Every raw line becomes exactly one invoice line. Numeric fields that fail to
parse fall back to safe defaults instead of rejecting the order.
"""

from typing import Any, Dict, List

from .models import OUTPUT_TAX_TYPE, SALES_ACCOUNT_CODE, CanonicalInvoiceLine
from .parsing import display_value, format_amount, lenient_float, positive_quantity
from .types import BaseOrder, RawLineItem

AREA_PROPERTIES = ("Length", "Width", "PricePerSqFt")
DEFAULT_DESCRIPTION = "Product"


def property_map(item: RawLineItem) -> Dict[str, Any]:
    """Properties keyed by name; a repeated name keeps its last value."""
    return {prop.name: prop.value for prop in item.properties or [] if prop.name}


def _has_area_pricing(props: Dict[str, Any]) -> bool:
    return all(props.get(key) not in (None, "", 0) for key in AREA_PROPERTIES)


def normalize_line_item(item: RawLineItem) -> CanonicalInvoiceLine:
    """
    Convert one raw order line into an invoice line.

    Lines carrying Length, Width and PricePerSqFt properties are priced by
    area: the unit amount becomes length x width x price per square foot and
    the quantity is forced to 1.
    """
    description = item.title or item.name or DEFAULT_DESCRIPTION
    quantity = positive_quantity(item.quantity).value
    unit_amount = lenient_float(item.price, default=0.0).value

    props = property_map(item)
    if _has_area_pricing(props):
        length, width = props["Length"], props["Width"]
        area = lenient_float(length).value * lenient_float(width).value
        unit_amount = area * lenient_float(props["PricePerSqFt"]).value
        description = (
            f"{description} - {display_value(length)}ft x "
            f"{display_value(width)}ft ({format_amount(area)} sq ft)"
        )
        quantity = 1

    return CanonicalInvoiceLine(
        description=description,
        quantity=quantity,
        unit_amount=format_amount(unit_amount),
        account_code=SALES_ACCOUNT_CODE,
        item_code=item.sku or None,
        tax_type=OUTPUT_TAX_TYPE if item.taxable else None,
    )


def shipping_amount(order: BaseOrder) -> float:
    if not order.shipping_lines:
        return 0.0
    return lenient_float(order.shipping_lines[0].price).value


def discount_amount(order: BaseOrder) -> float:
    return lenient_float(order.total_discounts).value


def tax_amount(order: BaseOrder) -> float:
    """Order tax total. Reported for diagnostics, not invoiced."""
    return lenient_float(order.total_tax).value


def adjustment_lines(order: BaseOrder) -> List[CanonicalInvoiceLine]:
    """Synthetic lines for shipping charges and order-level discounts."""
    lines: List[CanonicalInvoiceLine] = []

    shipping = shipping_amount(order)
    if shipping > 0:
        lines.append(_synthetic_line("Shipping", shipping))

    discount = discount_amount(order)
    if discount > 0:
        lines.append(_synthetic_line("Discount", -discount))

    return lines


def _synthetic_line(description: str, amount: float) -> CanonicalInvoiceLine:
    return CanonicalInvoiceLine(
        description=description,
        quantity=1,
        unit_amount=format_amount(amount),
        account_code=SALES_ACCOUNT_CODE,
    )


def build_line_items(order: BaseOrder) -> List[CanonicalInvoiceLine]:
    """Normalized order lines followed by shipping and discount lines."""
    lines = [normalize_line_item(item) for item in order.line_items or []]
    return lines + adjustment_lines(order)
