"""Order and quote to Xero invoice transformation."""

from .builder import (
    normalize,
    normalize_order_to_invoice,
    normalize_quote_to_invoice,
)

__all__ = [
    "normalize",
    "normalize_order_to_invoice",
    "normalize_quote_to_invoice",
]
