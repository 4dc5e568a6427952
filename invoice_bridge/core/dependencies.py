# invoice_bridge/core/dependencies.py
from fastapi import Request

from invoice_bridge.domains.external_accounting.xero.auth.gate import AuthorizationGate
from invoice_bridge.domains.external_accounting.xero.auth.token_store import TokenStore
from invoice_bridge.domains.orders.records import InvoiceRecordLog


def get_token_store(request: Request) -> TokenStore:
    """Token store owned by the running app."""
    return request.app.state.token_store


def get_record_log(request: Request) -> InvoiceRecordLog:
    """Invoice record log owned by the running app."""
    return request.app.state.record_log


def get_auth_gate(request: Request) -> AuthorizationGate:
    """Consent redirect gate owned by the running app."""
    return request.app.state.auth_gate
