# invoice_bridge/domains/external_accounting/xero/auth/service.py
import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional
from urllib.parse import urlencode

import httpx
import jwt

from invoice_bridge.core.clock import Clock, SystemClock
from invoice_bridge.core.settings import settings
from invoice_bridge.shared.exceptions import (
    IntegrationAuthenticationError,
    IntegrationConnectionError,
    IntegrationTokenExpiredError,
)

from .models import (
    StoredTokenSet,
    XeroAuthorizationResult,
    XeroAuthUrlResponse,
    XeroCallbackParams,
    XeroSession,
    XeroStateTokenPayload,
    XeroTenantInfo,
    XeroTokenResponse,
)
from .token_store import TokenStore

logger = logging.getLogger(__name__)


class XeroAuthService:
    """Service for the Xero OAuth flow and the persisted token set."""

    def __init__(self, token_store: TokenStore, clock: Optional[Clock] = None):
        self.token_store = token_store
        self.clock = clock or SystemClock()
        self.client_id = settings.XERO_CLIENT_ID
        self.client_secret = settings.XERO_CLIENT_SECRET
        self.redirect_uri = settings.XERO_REDIRECT_URI
        self.scopes = settings.XERO_SCOPES
        self.jwt_secret = settings.JWT_SECRET
        self.clock_tolerance = settings.XERO_CLOCK_TOLERANCE

        # Xero OAuth endpoints
        self.auth_url = "https://login.xero.com/identity/connect/authorize"
        self.token_url = "https://identity.xero.com/connect/token"
        self.connections_url = "https://api.xero.com/connections"

    def build_consent_url(self) -> XeroAuthUrlResponse:
        """
        Build the Xero consent URL the user is redirected to.

        Returns:
            XeroAuthUrlResponse with authorization URL and state expiry

        Raises:
            IntegrationAuthenticationError: If OAuth settings are incomplete
        """
        if not self.client_id or not self.redirect_uri:
            raise IntegrationAuthenticationError(
                "XERO_CLIENT_ID and XERO_REDIRECT_URI must be configured"
            )

        # State token is valid for 30 minutes
        expires_at = self.clock.now() + timedelta(minutes=30)
        state_token = self._generate_state_token(expires_at)

        auth_params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scopes,
            "state": state_token,
        }

        return XeroAuthUrlResponse(
            auth_url=f"{self.auth_url}?{urlencode(auth_params)}",
            expires_at=expires_at,
        )

    async def complete_authorization(
        self, callback_params: XeroCallbackParams
    ) -> XeroAuthorizationResult:
        """
        Complete the OAuth flow using the callback parameters.

        Tokens are persisted even when the tenant lookup fails; the tenant is
        then resolved on the next ``ensure_session`` call.

        Args:
            callback_params: Parameters from Xero OAuth callback

        Returns:
            XeroAuthorizationResult describing what was received

        Raises:
            IntegrationAuthenticationError: For OAuth flow errors
            IntegrationConnectionError: For token endpoint failures
        """
        if callback_params.error:
            error_desc = callback_params.error_description or callback_params.error
            raise IntegrationAuthenticationError(
                f"OAuth authorization failed: {error_desc}"
            )

        if not callback_params.code or not callback_params.state:
            raise IntegrationAuthenticationError("Missing required OAuth parameters")

        self._validate_state_token(callback_params.state)

        token_response = await self._exchange_code_for_tokens(callback_params.code)
        logger.info(
            "Received Xero tokens "
            f"(access={bool(token_response.access_token)}, "
            f"refresh={bool(token_response.refresh_token)}, "
            f"id={bool(token_response.id_token)})"
        )

        tenant: Optional[XeroTenantInfo] = None
        tenant_error: Optional[str] = None
        try:
            tenant = await self._get_tenant_info(token_response.access_token)
        except IntegrationConnectionError as e:
            tenant_error = e.detail
            logger.warning(f"Could not fetch Xero tenant information: {e.detail}")

        self._store_token_response(token_response, tenant)

        return XeroAuthorizationResult(
            has_access_token=bool(token_response.access_token),
            has_refresh_token=bool(token_response.refresh_token),
            has_id_token=bool(token_response.id_token),
            tenant_id=tenant.tenantId if tenant else None,
            tenant_name=tenant.tenantName if tenant else None,
            tenant_error=tenant_error,
        )

    async def ensure_session(self) -> XeroSession:
        """
        Return a session with a valid access token and tenant id.

        Refreshes an expired access token and looks up a missing tenant id,
        persisting both to the token file.

        Raises:
            IntegrationConnectionError: If no tokens are stored
            IntegrationTokenExpiredError: If token refresh fails
        """
        tokens = self.token_store.load()
        if not tokens:
            raise IntegrationConnectionError(
                "No Xero tokens found. Please complete the OAuth flow first."
            )

        if tokens.is_expired(self.clock.now()):
            logger.info("Xero access token expired, refreshing")
            tokens = await self._refresh_tokens(tokens)

        if not tokens.tenant_id:
            tenant = await self._get_tenant_info(tokens.access_token)
            tokens = tokens.model_copy(
                update={"tenant_id": tenant.tenantId, "tenant_name": tenant.tenantName}
            )
            self.token_store.save(tokens)

        return XeroSession(tenant_id=tokens.tenant_id, access_token=tokens.access_token)

    def _generate_state_token(self, expires_at: datetime) -> str:
        """Generate JWT state token for OAuth flow."""
        if not self.jwt_secret:
            raise IntegrationAuthenticationError("JWT secret not configured")

        payload = XeroStateTokenPayload(
            csrf_token=secrets.token_urlsafe(32),
            issued_at=self.clock.now(),
            expires_at=expires_at,
        )

        return jwt.encode(
            {
                **payload.model_dump(mode="json"),
                "exp": int(expires_at.timestamp()),
            },
            self.jwt_secret,
            algorithm="HS256",
        )

    def _validate_state_token(self, token: str) -> XeroStateTokenPayload:
        """Validate and decode JWT state token."""
        if not self.jwt_secret:
            raise IntegrationAuthenticationError("JWT secret not configured")

        try:
            payload = jwt.decode(
                token,
                self.jwt_secret,
                algorithms=["HS256"],
                leeway=self.clock_tolerance,
            )
        except jwt.ExpiredSignatureError:
            raise IntegrationAuthenticationError("OAuth session expired")
        except jwt.InvalidTokenError as e:
            raise IntegrationAuthenticationError(f"Invalid OAuth state token: {e}")

        return XeroStateTokenPayload(**payload)

    async def _exchange_code_for_tokens(self, code: str) -> XeroTokenResponse:
        """Exchange OAuth authorization code for access tokens."""
        token_data = {
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "redirect_uri": self.redirect_uri,
        }

        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    self.token_url,
                    data=token_data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
                response.raise_for_status()
                return XeroTokenResponse(**response.json())
            except httpx.HTTPStatusError as e:
                raise IntegrationAuthenticationError(
                    f"Token exchange failed: {e.response.text}"
                )
            except httpx.RequestError as e:
                raise IntegrationConnectionError(f"Token exchange request failed: {e}")

    async def _get_tenant_info(self, access_token: str) -> XeroTenantInfo:
        """Get tenant information from Xero connections endpoint."""
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

        async with httpx.AsyncClient() as client:
            try:
                response = await client.get(self.connections_url, headers=headers)
                response.raise_for_status()
                connections = response.json()
            except httpx.HTTPStatusError as e:
                raise IntegrationConnectionError(
                    f"Failed to get tenant info: {e.response.text}"
                )
            except httpx.RequestError as e:
                raise IntegrationConnectionError(f"Tenant info request failed: {e}")

        if not connections:
            raise IntegrationConnectionError("No Xero tenant found for this connection")

        # The bridge posts to a single organisation: the first connection
        return XeroTenantInfo(**connections[0])

    async def _refresh_tokens(self, tokens: StoredTokenSet) -> StoredTokenSet:
        """Refresh an expired access token and persist the new token set."""
        refresh_data = {
            "grant_type": "refresh_token",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "refresh_token": tokens.refresh_token,
        }

        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    self.token_url,
                    data=refresh_data,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
                response.raise_for_status()
                token_response = XeroTokenResponse(**response.json())
            except httpx.HTTPStatusError as e:
                raise IntegrationTokenExpiredError(
                    f"Token refresh failed: {e.response.text}"
                )
            except httpx.RequestError as e:
                raise IntegrationConnectionError(f"Token refresh request failed: {e}")

        refreshed = self._to_stored_tokens(token_response).model_copy(
            update={"tenant_id": tokens.tenant_id, "tenant_name": tokens.tenant_name}
        )
        self.token_store.save(refreshed)
        return refreshed

    def _store_token_response(
        self, token_response: XeroTokenResponse, tenant: Optional[XeroTenantInfo]
    ) -> StoredTokenSet:
        tokens = self._to_stored_tokens(token_response)
        if tenant:
            tokens = tokens.model_copy(
                update={"tenant_id": tenant.tenantId, "tenant_name": tenant.tenantName}
            )
        self.token_store.save(tokens)
        return tokens

    def _to_stored_tokens(self, token_response: XeroTokenResponse) -> StoredTokenSet:
        now = self.clock.now()
        return StoredTokenSet(
            access_token=token_response.access_token,
            refresh_token=token_response.refresh_token,
            id_token=token_response.id_token,
            scope=token_response.scope,
            expires_at=now + timedelta(seconds=token_response.expires_in),
            saved_at=now,
        )
