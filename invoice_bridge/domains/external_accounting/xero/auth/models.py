# invoice_bridge/domains/external_accounting/xero/auth/models.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class XeroAuthUrlResponse(BaseModel):
    """Response model for OAuth authorization URL generation."""

    auth_url: str = Field(..., description="Xero OAuth authorization URL")
    expires_at: datetime = Field(..., description="When the state token expires")


class XeroCallbackParams(BaseModel):
    """Query parameters from Xero OAuth callback."""

    code: Optional[str] = Field(None, description="OAuth authorization code")
    state: Optional[str] = Field(None, description="JWT state token")
    error: Optional[str] = Field(None, description="Error code if authorization failed")
    error_description: Optional[str] = Field(None, description="Error description")


class XeroTokenResponse(BaseModel):
    """Response from Xero token endpoint."""

    access_token: str = Field(..., description="Access token for API calls")
    refresh_token: str = Field(..., description="Refresh token for token renewal")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    token_type: str = Field(default="Bearer", description="Token type")
    scope: Optional[str] = Field(None, description="Granted scopes")
    id_token: Optional[str] = Field(None, description="OpenID Connect identity token")


class XeroTenantInfo(BaseModel):
    """Information about a Xero tenant from connections endpoint."""

    id: str = Field(..., description="Xero connection UUID")
    tenantId: str = Field(..., description="Xero tenant ID")
    tenantName: Optional[str] = Field(None, description="Organisation name in Xero")
    tenantType: str = Field(..., description="Tenant type (ORGANISATION, PRACTICE)")
    createdDateUtc: Optional[datetime] = Field(
        None, description="When the connection was created"
    )
    updatedDateUtc: Optional[datetime] = Field(
        None, description="When the connection was last updated"
    )


class XeroStateTokenPayload(BaseModel):
    """JWT payload for OAuth state token."""

    csrf_token: str = Field(..., description="CSRF protection token")
    issued_at: datetime = Field(..., description="Token issue time")
    expires_at: datetime = Field(..., description="Token expiry time")


class StoredTokenSet(BaseModel):
    """Token set persisted between restarts."""

    access_token: str
    refresh_token: str
    expires_at: datetime
    id_token: Optional[str] = None
    scope: Optional[str] = None
    tenant_id: Optional[str] = None
    tenant_name: Optional[str] = None
    saved_at: Optional[datetime] = None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at


class XeroSession(BaseModel):
    """Credentials for one round of calls against a single tenant."""

    model_config = ConfigDict(frozen=True)

    tenant_id: str
    access_token: str


class XeroAuthorizationResult(BaseModel):
    """Outcome of the OAuth callback."""

    has_access_token: bool
    has_refresh_token: bool
    has_id_token: bool
    tenant_id: Optional[str] = None
    tenant_name: Optional[str] = None
    tenant_error: Optional[str] = Field(
        None, description="Why the tenant lookup failed, if it did"
    )


class XeroAuthStatus(BaseModel):
    """Response model for the OAuth status endpoint."""

    auth_in_progress: bool
    last_auth_time: Optional[datetime] = None
    has_tokens: bool
    tenant_id: Optional[str] = None
    tenant_name: Optional[str] = None
    expires_at: Optional[datetime] = None
