"""Xero API type definitions for type safety."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class XeroModel(BaseModel):
    """Xero responses carry many more fields than the bridge reads."""

    model_config = ConfigDict(extra="ignore")


class XeroValidationError(XeroModel):
    """Validation message attached to a rejected element."""

    Message: str = Field(..., description="Human readable validation message")


class XeroInvoiceResult(XeroModel):
    """Invoice returned from a create request."""

    InvoiceID: Optional[str] = Field(None, description="Xero invoice identifier")
    InvoiceNumber: Optional[str] = Field(None, description="Invoice number")
    Status: Optional[str] = Field(None, description="Invoice status")
    Total: Optional[float] = Field(None, description="Total including tax")
    CurrencyCode: Optional[str] = Field(None, description="Currency code")
    HasErrors: Optional[bool] = Field(None, description="Whether Xero rejected it")
    ValidationErrors: List[XeroValidationError] = Field(
        default_factory=list, description="Per-invoice validation errors"
    )


class XeroOrganisation(XeroModel):
    """Organisation details for the connected tenant."""

    OrganisationID: Optional[str] = Field(None, description="Organisation identifier")
    Name: Optional[str] = Field(None, description="Organisation name")
    CountryCode: Optional[str] = Field(None, description="ISO country code")
    BaseCurrency: Optional[str] = Field(None, description="Base currency code")


# Xero API Response Wrappers
class XeroInvoicesResponse(XeroModel):
    """Response wrapper for invoices endpoint."""

    Invoices: List[XeroInvoiceResult] = Field(
        default_factory=list, description="Invoices from Xero API"
    )


class XeroOrganisationsResponse(XeroModel):
    """Response wrapper for organisation endpoint."""

    Organisations: List[XeroOrganisation] = Field(
        default_factory=list, description="Organisations from Xero API"
    )


class XeroErrorElement(XeroModel):
    ValidationErrors: List[XeroValidationError] = Field(default_factory=list)


class XeroErrorResponse(XeroModel):
    """Body of a 400 ValidationException response."""

    ErrorNumber: Optional[int] = None
    Type: Optional[str] = None
    Message: Optional[str] = None
    Elements: List[XeroErrorElement] = Field(default_factory=list)

    def messages(self) -> List[str]:
        found = [
            error.Message
            for element in self.Elements
            for error in element.ValidationErrors
        ]
        if not found and self.Message:
            found.append(self.Message)
        return found
