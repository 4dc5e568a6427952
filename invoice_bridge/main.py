import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from invoice_bridge.core.settings import settings
from invoice_bridge.domains.external_accounting.xero.auth.gate import AuthorizationGate
from invoice_bridge.domains.external_accounting.xero.auth.routes import (
    router as xero_oauth_router,
)
from invoice_bridge.domains.external_accounting.xero.auth.routes import (
    xero_oauth_callback,
)
from invoice_bridge.domains.external_accounting.xero.auth.token_store import TokenStore
from invoice_bridge.domains.orders.records import InvoiceRecordLog
from invoice_bridge.domains.orders.routes import router as orders_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup
    if app.state.token_store.load():
        logger.info("Xero tokens loaded")
    else:
        logger.warning("No Xero tokens found, visit /oauth/auth to connect")
    yield


app = FastAPI(
    title="Shopify Xero Bridge",
    description="Creates Xero invoices from Shopify, custom storefront and quote orders",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.token_store = TokenStore(settings.XERO_TOKEN_FILE)
app.state.record_log = InvoiceRecordLog()
app.state.auth_gate = AuthorizationGate(
    cooldown_seconds=settings.XERO_AUTH_COOLDOWN_SECONDS,
    in_progress_seconds=settings.XERO_AUTH_IN_PROGRESS_SECONDS,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(orders_router)
app.include_router(xero_oauth_router)
app.add_api_route(
    "/callback",
    xero_oauth_callback,
    methods=["GET"],
    include_in_schema=False,
)


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "Shopify Xero Bridge is running"}


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}
