"""
Domain-specific exceptions for order and quote submission.
"""

from typing import List

from invoice_bridge.shared.exceptions import BaseHTTPException


class ValidationError(BaseHTTPException):
    """Base exception for payloads rejected before any upstream call."""

    status_code = 400
    message = "Invalid order payload"


class OrderValidationError(ValidationError):
    """Raised when an order lacks customer information or line items."""

    message = "Missing required fields: customer and line_items"


class QuoteValidationError(ValidationError):
    """Raised when a quote request is missing required fields."""

    message = "Invalid quote request"

    def __init__(self, missing_fields: List[str]) -> None:
        self.missing_fields = list(missing_fields)
        super().__init__(
            f"Missing required fields: {', '.join(self.missing_fields)}"
        )


class InvoiceRecordNotFoundError(BaseHTTPException):
    """Raised when no invoice record exists for the requested key."""

    status_code = 404
    message = "Invoice record not found"
