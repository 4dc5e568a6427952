# invoice_bridge/shared/exceptions.py
from typing import List, Optional

from fastapi import HTTPException, status


class BaseHTTPException(HTTPException):
    """HTTP exception whose status and default message are class attributes."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(
            status_code=self.__class__.status_code,
            detail=message or self.__class__.message,
        )


# Integration Exceptions
class IntegrationConnectionError(HTTPException):
    def __init__(self, message: str = "Integration connection failed") -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message
        )


class IntegrationAuthenticationError(HTTPException):
    def __init__(self, message: str = "Integration authentication failed") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)


class IntegrationTokenExpiredError(HTTPException):
    def __init__(self, message: str = "Integration token has expired") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=message)


class IntegrationValidationError(HTTPException):
    """The accounting platform accepted the request but rejected its content."""

    def __init__(self, messages: List[str]) -> None:
        self.messages = list(messages)
        detail = "Xero validation errors: " + ", ".join(self.messages)
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class UnsupportedCurrencyError(HTTPException):
    def __init__(self, rejected_currency: str, base_currency: str) -> None:
        self.rejected_currency = rejected_currency
        self.base_currency = base_currency
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f"Currency '{rejected_currency}' is not enabled for this Xero "
                f"organisation. Resubmit the order in '{base_currency}' or "
                f"enable '{rejected_currency}' in Xero."
            ),
        )
