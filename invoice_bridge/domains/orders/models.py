# invoice_bridge/domains/orders/models.py
import datetime as dt
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SALES_ACCOUNT_CODE = "200"
OUTPUT_TAX_TYPE = "OUTPUT"
POSTAL_ADDRESS_TYPE = "POBOX"
WALK_IN_CUSTOMER = "Walk-in Customer"

InvoiceStatus = Literal["AUTHORISED", "DRAFT"]


class CanonicalModel(BaseModel):
    """Immutable value object built once per submission."""

    model_config = ConfigDict(frozen=True)


class CanonicalInvoiceLine(CanonicalModel):
    """Invoice line ready for submission."""

    description: str
    quantity: int = Field(..., ge=1)
    unit_amount: str = Field(..., description="Unit amount fixed to 2 decimals")
    account_code: str = SALES_ACCOUNT_CODE
    item_code: Optional[str] = None
    tax_type: Optional[str] = None

    def to_xero(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "Description": self.description,
            "Quantity": self.quantity,
            "UnitAmount": self.unit_amount,
            "AccountCode": self.account_code,
        }
        if self.item_code:
            payload["ItemCode"] = self.item_code
        if self.tax_type:
            payload["TaxType"] = self.tax_type
        return payload


class CanonicalAddress(CanonicalModel):
    """Postal address attached to a contact."""

    address_type: str = POSTAL_ADDRESS_TYPE
    address_line1: str
    address_line2: str = ""
    city: str = ""
    region: str = ""
    postal_code: str = ""
    country: str = ""

    def to_xero(self) -> Dict[str, Any]:
        return {
            "AddressType": self.address_type,
            "AddressLine1": self.address_line1,
            "AddressLine2": self.address_line2,
            "City": self.city,
            "Region": self.region,
            "PostalCode": self.postal_code,
            "Country": self.country,
        }


class CanonicalContact(CanonicalModel):
    """Billing contact for an invoice."""

    name: str = Field(..., min_length=1)
    email_address: Optional[str] = None
    phone: Optional[str] = None
    addresses: List[CanonicalAddress] = Field(default_factory=list, max_length=1)

    def to_xero(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"Name": self.name}
        if self.email_address:
            payload["EmailAddress"] = self.email_address
        if self.phone:
            payload["Phones"] = [{"PhoneType": "DEFAULT", "PhoneNumber": self.phone}]
        payload["Addresses"] = [address.to_xero() for address in self.addresses]
        return payload


class CanonicalInvoiceDocument(CanonicalModel):
    """Accounts-receivable invoice in platform-neutral form."""

    type: Literal["ACCREC"] = "ACCREC"
    contact: CanonicalContact
    line_items: List[CanonicalInvoiceLine]
    date: dt.date
    due_date: dt.date
    invoice_number: str
    reference: str
    status: InvoiceStatus
    currency_code: str
    line_amount_types: Optional[str] = None

    def to_xero(self) -> Dict[str, Any]:
        """Serialize using the Xero REST field names."""
        payload: Dict[str, Any] = {
            "Type": self.type,
            "Contact": self.contact.to_xero(),
            "LineItems": [line.to_xero() for line in self.line_items],
            "Date": self.date.isoformat(),
            "DueDate": self.due_date.isoformat(),
            "InvoiceNumber": self.invoice_number,
            "Reference": self.reference,
            "Status": self.status,
            "CurrencyCode": self.currency_code,
        }
        if self.line_amount_types:
            payload["LineAmountTypes"] = self.line_amount_types
        return payload


# Submission results and debug records
class CreatedInvoice(BaseModel):
    """Invoice as acknowledged by the accounting platform."""

    invoice_id: str
    invoice_number: Optional[str] = None
    status: Optional[str] = None
    total: Optional[float] = None


class InvoiceSummary(BaseModel):
    """Invoice details returned to the caller after submission."""

    id: str
    number: Optional[str] = None
    status: Optional[str] = None
    total: Optional[float] = None
    url: str

    @classmethod
    def from_created(cls, created: CreatedInvoice) -> "InvoiceSummary":
        return cls(
            id=created.invoice_id,
            number=created.invoice_number,
            status=created.status,
            total=created.total,
            url=(
                "https://go.xero.com/AccountsReceivable/View.aspx"
                f"?InvoiceID={created.invoice_id}"
            ),
        )


class InvoiceSubmissionResponse(BaseModel):
    """Response for order and quote submission endpoints."""

    success: bool = True
    invoice: InvoiceSummary
    message: str = "Invoice created successfully"


class InvoiceRecord(BaseModel):
    """Debug log entry for a submitted order."""

    order_id: str
    order_number: Optional[str] = None
    xero_invoice_id: Optional[str] = None
    xero_invoice_number: Optional[str] = None
    status: Optional[str] = None
    total: Optional[float] = None
    customer_email: Optional[str] = None
    customer_name: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_at: Optional[dt.datetime] = None
    order_data: Optional[Dict[str, Any]] = None


class InvoiceRecordListResponse(BaseModel):
    """All debug records, split into invoices and failures."""

    success: bool = True
    invoices: List[InvoiceRecord]
    errors: List[InvoiceRecord]
    total: int


class InvoiceRecordResponse(BaseModel):
    success: bool = True
    invoice: InvoiceRecord


class OrganisationSummary(BaseModel):
    name: Optional[str] = None
    country_code: Optional[str] = None
    currency_code: Optional[str] = None


class ConnectionTestResponse(BaseModel):
    """Result of a live Xero connectivity check."""

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    issues: List[str] = Field(default_factory=list)
    organisation: Optional[OrganisationSummary] = None
    tenant_id: Optional[str] = None


class TokenDebugInfo(BaseModel):
    has_access_token: bool
    has_refresh_token: bool
    tenant_id: Optional[str] = None
    saved_at: Optional[dt.datetime] = None
    expires_at: Optional[dt.datetime] = None


class ConnectionDebugInfo(BaseModel):
    status: Literal["connected", "error"]
    tenant_id: Optional[str] = None
    error: Optional[str] = None


class EnvironmentDebugInfo(BaseModel):
    has_client_id: bool
    has_client_secret: bool
    redirect_uri: Optional[str] = None


class RecordDebugInfo(BaseModel):
    total: int
    errors: int


class DebugStatusResponse(BaseModel):
    """Snapshot of tokens, connectivity and configuration for support."""

    success: bool = True
    timestamp: dt.datetime
    tokens: Optional[TokenDebugInfo] = None
    xero_connection: ConnectionDebugInfo
    environment: EnvironmentDebugInfo
    invoice_records: RecordDebugInfo
