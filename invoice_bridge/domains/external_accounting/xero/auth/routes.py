# invoice_bridge/domains/external_accounting/xero/auth/routes.py
import logging
from html import escape

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from invoice_bridge.core.dependencies import get_auth_gate, get_token_store

from .gate import AuthorizationGate
from .models import XeroAuthStatus, XeroCallbackParams
from .service import XeroAuthService
from .token_store import TokenStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/oauth", tags=["Xero OAuth"])


def get_auth_service(
    token_store: TokenStore = Depends(get_token_store),
) -> XeroAuthService:
    return XeroAuthService(token_store)


def _page(title: str, body: str) -> str:
    return (
        "<html><body style=\"font-family: Arial, sans-serif; padding: 20px;\">"
        f"<h2>{escape(title)}</h2>{body}"
        '<hr><p><a href="/oauth/auth">Try again</a></p></body></html>'
    )


@router.get("/auth", operation_id="startXeroAuthorization")
async def start_xero_authorization(
    gate: AuthorizationGate = Depends(get_auth_gate),
    service: XeroAuthService = Depends(get_auth_service),
) -> Response:
    """
    Redirect the browser to the Xero consent screen.

    **Business Rules**:
    - Refused while another consent flow is in progress
    - Refused within the cooldown window after the previous attempt
    """
    refusal = gate.try_begin()
    if refusal:
        logger.warning(f"Xero authorization refused: {refusal}")
        return HTMLResponse(escape(refusal))

    try:
        consent = service.build_consent_url()
    except HTTPException:
        gate.release()
        raise

    logger.info("Redirecting to Xero consent screen")
    return RedirectResponse(url=consent.auth_url, status_code=status.HTTP_302_FOUND)


@router.get("/callback", operation_id="xeroOAuthCallback")
async def xero_oauth_callback(
    code: str = Query(None, description="OAuth authorization code"),
    state: str = Query(None, description="JWT state token"),
    error: str = Query(None, description="OAuth error code"),
    error_description: str = Query(None, description="OAuth error description"),
    gate: AuthorizationGate = Depends(get_auth_gate),
    service: XeroAuthService = Depends(get_auth_service),
) -> HTMLResponse:
    """
    Handle the OAuth callback from Xero after user authorization.

    Exchanges the code for tokens, looks up the tenant and saves both to the
    token file. Also mounted at ``/callback`` for redirect URI compatibility.
    """
    callback_params = XeroCallbackParams(
        code=code,
        state=state,
        error=error,
        error_description=error_description,
    )

    try:
        result = await service.complete_authorization(callback_params)
    except HTTPException as e:
        logger.error(f"OAuth callback failed: {e.detail}")
        return HTMLResponse(
            _page("OAuth Failed", f"<p><strong>Error:</strong> {escape(str(e.detail))}</p>"),
            status_code=e.status_code,
        )
    finally:
        gate.release()

    received = (
        f"<p><strong>Access Token:</strong> "
        f"{'Received' if result.has_access_token else 'Missing'}</p>"
        f"<p><strong>Refresh Token:</strong> "
        f"{'Received' if result.has_refresh_token else 'Missing'}</p>"
    )

    if result.tenant_error:
        return HTMLResponse(
            _page(
                "Partial Success",
                received
                + "<p><strong>Issue:</strong> Could not fetch organisation details</p>"
                + f"<p><strong>Reason:</strong> {escape(result.tenant_error)}</p>",
            )
        )

    return HTMLResponse(
        _page(
            "OAuth Success",
            received
            + f"<p><strong>Tenant ID:</strong> {escape(result.tenant_id or 'Not available')}</p>"
            + f"<p><strong>Organisation:</strong> {escape(result.tenant_name or '')}</p>",
        )
    )


@router.get(
    "/status",
    response_model=XeroAuthStatus,
    operation_id="getXeroAuthStatus",
)
async def get_xero_auth_status(
    gate: AuthorizationGate = Depends(get_auth_gate),
    token_store: TokenStore = Depends(get_token_store),
) -> XeroAuthStatus:
    tokens = token_store.load()
    return XeroAuthStatus(
        auth_in_progress=gate.in_progress,
        last_auth_time=gate.last_started_at,
        has_tokens=bool(tokens and tokens.access_token),
        tenant_id=tokens.tenant_id if tokens else None,
        tenant_name=tokens.tenant_name if tokens else None,
        expires_at=tokens.expires_at if tokens else None,
    )
