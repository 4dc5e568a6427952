"""
Tests for canonical invoice document assembly.
"""

from datetime import date

import pytest

from invoice_bridge.core.clock import FixedClock
from invoice_bridge.domains.orders.builder import (
    normalize,
    normalize_order_to_invoice,
    normalize_quote_to_invoice,
    validate_quote,
)
from invoice_bridge.domains.orders.exceptions import QuoteValidationError
from invoice_bridge.domains.orders.types import CustomOrder, QuoteRequest, ShopifyOrder


class TestNormalizeOrderToInvoice:
    """Test suite for normalize_order_to_invoice."""

    def test_shopify_order(
        self, shopify_order_data: dict, fixed_clock: FixedClock
    ) -> None:
        """Test a complete Shopify order maps to an authorised invoice."""
        # Arrange
        order = ShopifyOrder.model_validate(shopify_order_data)

        # Act
        document = normalize_order_to_invoice(order, clock=fixed_clock)

        # Assert
        assert document.type == "ACCREC"
        assert document.status == "AUTHORISED"
        assert document.invoice_number == "1001"
        assert document.reference == "Order: 1001"
        assert document.currency_code == "AUD"
        assert document.date == date(2024, 3, 15)
        assert document.due_date == date(2024, 4, 14)
        assert document.line_amount_types is None
        assert [line.description for line in document.line_items] == [
            "Oak Table",
            "Shipping",
            "Discount",
        ]

    def test_invoice_number_falls_back_to_name(self, fixed_clock: FixedClock) -> None:
        order = ShopifyOrder(id=77, name="#1002")

        document = normalize_order_to_invoice(order, clock=fixed_clock)

        assert document.invoice_number == "#1002"
        assert document.reference == "Order: 77"

    def test_invoice_number_from_factory(self, fixed_clock: FixedClock) -> None:
        document = normalize_order_to_invoice(
            CustomOrder(),
            clock=fixed_clock,
            invoice_number_factory=lambda: "INV-TEST",
        )

        assert document.invoice_number == "INV-TEST"
        assert document.reference == "Order: INV-TEST"

    def test_invoice_number_defaults_to_timestamp(
        self, fixed_clock: FixedClock
    ) -> None:
        """Test an order with no number or name gets INV-<epoch millis>."""
        document = normalize_order_to_invoice(CustomOrder(), clock=fixed_clock)

        expected = int(fixed_clock.now().timestamp() * 1000)
        assert document.invoice_number == f"INV-{expected}"

    def test_defaults_for_empty_order(self, fixed_clock: FixedClock) -> None:
        document = normalize_order_to_invoice(
            CustomOrder(), clock=fixed_clock, default_currency="NZD"
        )

        assert document.contact.name == "Walk-in Customer"
        assert document.currency_code == "NZD"
        assert document.line_items == []

    def test_note_sets_exclusive_line_amounts(self, fixed_clock: FixedClock) -> None:
        order = CustomOrder(order_number="A1", note="Leave at door")

        document = normalize_order_to_invoice(order, clock=fixed_clock)

        assert document.line_amount_types == "Exclusive"
        assert document.to_xero()["LineAmountTypes"] == "Exclusive"

    def test_payment_terms(self, fixed_clock: FixedClock) -> None:
        document = normalize_order_to_invoice(
            CustomOrder(order_number="A1"), clock=fixed_clock, payment_terms_days=14
        )

        assert document.due_date == date(2024, 3, 29)

    def test_is_deterministic_for_fixed_clock(
        self, shopify_order_data: dict, fixed_clock: FixedClock
    ) -> None:
        order = ShopifyOrder.model_validate(shopify_order_data)

        first = normalize_order_to_invoice(order, clock=fixed_clock)
        second = normalize_order_to_invoice(order, clock=fixed_clock)

        assert first == second

    def test_to_xero_preserves_fields(
        self, shopify_order_data: dict, fixed_clock: FixedClock
    ) -> None:
        """Test the Xero payload carries every canonical field."""
        order = ShopifyOrder.model_validate(shopify_order_data)
        document = normalize_order_to_invoice(order, clock=fixed_clock)

        payload = document.to_xero()

        assert payload["Type"] == "ACCREC"
        assert payload["Date"] == "2024-03-15"
        assert payload["DueDate"] == "2024-04-14"
        assert payload["InvoiceNumber"] == "1001"
        assert payload["Reference"] == "Order: 1001"
        assert payload["Status"] == "AUTHORISED"
        assert payload["CurrencyCode"] == "AUD"
        assert payload["Contact"]["Name"] == "Jane Doe"
        assert payload["Contact"]["EmailAddress"] == "jane@example.com"
        assert payload["Contact"]["Phones"] == [
            {"PhoneType": "DEFAULT", "PhoneNumber": "+61 400 000 000"}
        ]
        assert payload["Contact"]["Addresses"][0]["AddressType"] == "POBOX"
        assert payload["LineItems"][0] == {
            "Description": "Oak Table",
            "Quantity": 2,
            "UnitAmount": "150.00",
            "AccountCode": "200",
            "ItemCode": "OAK-TBL",
            "TaxType": "OUTPUT",
        }
        assert payload["LineItems"][1]["UnitAmount"] == "15.00"
        assert payload["LineItems"][2]["UnitAmount"] == "-5.00"
        assert "LineAmountTypes" not in payload


class TestNormalizeQuoteToInvoice:
    """Test suite for normalize_quote_to_invoice."""

    def test_quote_becomes_draft(self, quote_data: dict, fixed_clock: FixedClock) -> None:
        # Arrange
        quote = QuoteRequest.model_validate(quote_data)

        # Act
        document = normalize_quote_to_invoice(quote, clock=fixed_clock)

        # Assert
        assert document.status == "DRAFT"
        assert document.invoice_number == "Q-42"
        assert document.reference == "Quote: Q-42"
        assert document.currency_code == "AUD"
        assert document.contact.name == "Acme Pty Ltd"
        assert [
            (line.description, line.quantity, line.unit_amount)
            for line in document.line_items
        ] == [("Install", 2, "99.50"), ("Callout", 1, "50.00")]

    def test_currency_defaults(self, quote_data: dict, fixed_clock: FixedClock) -> None:
        quote_data.pop("currency")
        quote = QuoteRequest.model_validate(quote_data)

        document = normalize_quote_to_invoice(quote, clock=fixed_clock)

        assert document.currency_code == "USD"

    def test_empty_items_rejected(self, quote_data: dict) -> None:
        quote_data["items"] = []
        quote = QuoteRequest.model_validate(quote_data)

        with pytest.raises(QuoteValidationError) as exc_info:
            normalize_quote_to_invoice(quote)

        assert exc_info.value.status_code == 400
        assert exc_info.value.missing_fields == ["items"]

    def test_all_missing_fields_named(self) -> None:
        with pytest.raises(QuoteValidationError) as exc_info:
            normalize_quote_to_invoice(QuoteRequest())

        assert exc_info.value.missing_fields == ["quoteId", "customer.name", "items"]
        assert exc_info.value.detail == (
            "Missing required fields: quoteId, customer.name, items"
        )

    def test_null_items_and_customer_are_reported(self) -> None:
        quote = QuoteRequest.model_validate(
            {"quoteId": "Q-7", "customer": None, "items": None}
        )

        with pytest.raises(QuoteValidationError) as exc_info:
            validate_quote(quote)

        assert exc_info.value.missing_fields == ["customer.name", "items"]

    def test_unusable_items_are_reported_by_position(self, quote_data: dict) -> None:
        """Test zero quantity and bad amounts are rejected per item."""
        # Arrange
        quote_data["items"] = [
            {"description": "Install", "quantity": 0, "unitAmount": 10},
            {"quantity": 1, "unitAmount": "n/a"},
        ]
        quote = QuoteRequest.model_validate(quote_data)

        # Act
        with pytest.raises(QuoteValidationError) as exc_info:
            normalize_quote_to_invoice(quote)

        # Assert
        assert exc_info.value.missing_fields == [
            "items[0].quantity",
            "items[1].description",
            "items[1].unitAmount",
        ]

    def test_numeric_strings_in_items_are_accepted(
        self, quote_data: dict, fixed_clock: FixedClock
    ) -> None:
        quote_data["items"] = [
            {"description": "Install", "quantity": "3", "unitAmount": "12.5"}
        ]
        quote = QuoteRequest.model_validate(quote_data)

        line = normalize_quote_to_invoice(quote, clock=fixed_clock).line_items[0]

        assert (line.quantity, line.unit_amount) == (3, "12.50")


class TestNormalize:
    """Test suite for the payload dispatcher."""

    def test_dispatches_by_payload_type(
        self,
        shopify_order_data: dict,
        quote_data: dict,
        fixed_clock: FixedClock,
    ) -> None:
        order = ShopifyOrder.model_validate(shopify_order_data)
        quote = QuoteRequest.model_validate(quote_data)

        assert normalize(order, clock=fixed_clock).status == "AUTHORISED"
        assert normalize(quote, clock=fixed_clock).status == "DRAFT"

    def test_rejects_unknown_payload(self) -> None:
        with pytest.raises(TypeError):
            normalize({"id": 1})
