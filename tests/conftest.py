"""
Global pytest configuration and fixtures for the invoice bridge test suite.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from invoice_bridge.core.clock import FixedClock
from invoice_bridge.core.dependencies import (
    get_auth_gate,
    get_record_log,
    get_token_store,
)
from invoice_bridge.domains.external_accounting.xero.auth.gate import AuthorizationGate
from invoice_bridge.domains.external_accounting.xero.auth.token_store import TokenStore
from invoice_bridge.domains.orders.records import InvoiceRecordLog
from invoice_bridge.main import app

# Import fixtures from fixture modules
from tests.fixtures.order_fixtures import *  # noqa: F403, F401
from tests.fixtures.xero_fixtures import *  # noqa: F403, F401


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock frozen at 2024-03-15 10:30 UTC."""
    return FixedClock(datetime(2024, 3, 15, 10, 30, 0, tzinfo=timezone.utc))


@pytest.fixture
def token_store(tmp_path: Path) -> TokenStore:
    """Token store backed by a file in a temporary directory."""
    return TokenStore(tmp_path / "tokens.json")


@pytest.fixture
def record_log() -> InvoiceRecordLog:
    """Empty invoice record log."""
    return InvoiceRecordLog()


@pytest.fixture
def auth_gate() -> AuthorizationGate:
    """Authorization gate using the wall clock."""
    return AuthorizationGate()


@pytest.fixture
def client(
    token_store: TokenStore,
    record_log: InvoiceRecordLog,
    auth_gate: AuthorizationGate,
) -> Generator[TestClient, None, None]:
    """FastAPI test client with app state replaced by per-test instances."""
    app.dependency_overrides[get_token_store] = lambda: token_store
    app.dependency_overrides[get_record_log] = lambda: record_log
    app.dependency_overrides[get_auth_gate] = lambda: auth_gate
    yield TestClient(app)
    app.dependency_overrides.clear()
