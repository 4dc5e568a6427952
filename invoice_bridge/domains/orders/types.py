"""Inbound payload shapes for orders and quotes.

Order payloads are untrusted: numeric fields are kept as received and only
interpreted by the lenient parsers in ``parsing``. Unknown fields are kept so
the original payload can be recorded for debugging.
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Shopify sends ids and order numbers as integers, custom frontends as strings
Identifier = Union[int, str]


class RawPayload(BaseModel):
    """Base for untrusted inbound payloads."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)


class LineItemProperty(RawPayload):
    """Free-form key/value attached to a line item."""

    name: Optional[str] = Field(None, description="Property key, e.g. Length")
    value: Any = Field(None, description="Property value as supplied")


class RawLineItem(RawPayload):
    """A single order line as received from the storefront."""

    title: Optional[str] = Field(None, description="Product title")
    name: Optional[str] = Field(None, description="Alternate product name")
    quantity: Any = Field(None, description="Quantity, parsed leniently")
    price: Any = Field(None, description="Unit price, parsed leniently")
    sku: Optional[str] = Field(None, description="Stock keeping unit")
    taxable: Any = Field(None, description="Whether the line attracts tax")
    properties: Optional[List[LineItemProperty]] = Field(
        None, description="Ordered custom properties"
    )


class RawAddress(RawPayload):
    """Billing, shipping or default customer address."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


class RawCustomer(RawPayload):
    """Customer block of a Shopify or custom order."""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    default_address: Optional[RawAddress] = None


class ShippingLine(RawPayload):
    """Shipping charge entry."""

    price: Any = None


class BaseOrder(RawPayload):
    """Fields shared by every order shape."""

    id: Optional[Identifier] = Field(None, description="Order identifier")
    order_number: Optional[Identifier] = Field(None, description="Order number")
    name: Optional[str] = Field(None, description="Order display name, e.g. #1001")
    email: Optional[str] = Field(None, description="Order contact email")
    customer: Optional[RawCustomer] = None
    customer_name: Optional[str] = None
    billing_address: Optional[RawAddress] = None
    shipping_address: Optional[RawAddress] = None
    line_items: Optional[List[RawLineItem]] = None
    currency: Optional[str] = Field(None, description="ISO 4217 currency code")
    shipping_lines: Optional[List[ShippingLine]] = None
    total_tax: Any = None
    total_discounts: Any = None
    note: Optional[str] = None


class ShopifyOrder(BaseOrder):
    """Order delivered by a Shopify order-creation webhook."""

    source: Literal["shopify"] = "shopify"


class CustomOrder(BaseOrder):
    """Order submitted by a custom storefront.

    ``id`` is generated and ``currency`` resolved from the Xero organisation
    when the frontend leaves them out.
    """

    source: Literal["custom"] = "custom"


RawOrder = Annotated[Union[ShopifyOrder, CustomOrder], Field(discriminator="source")]


class QuoteCustomer(RawPayload):
    """Customer details on a quote request."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class QuoteItem(RawPayload):
    """One quoted product or service.

    Quantity and unit amount are checked by ``validate_quote`` so that bad
    items are reported by field name.
    """

    model_config = ConfigDict(populate_by_name=True)

    description: Optional[str] = Field(None, description="Line description")
    quantity: Any = Field(None, description="Quantity quoted, at least 1")
    unit_amount: Any = Field(None, alias="unitAmount", description="Unit price")


class QuoteRequest(RawPayload):
    """Ad hoc quote to be raised as a draft invoice."""

    model_config = ConfigDict(populate_by_name=True)

    quote_id: Optional[Identifier] = Field(
        None, alias="quoteId", description="Quote identifier"
    )
    customer: Optional[QuoteCustomer] = None
    items: Optional[List[QuoteItem]] = None
    currency: Optional[str] = Field(None, description="ISO 4217 currency code")
