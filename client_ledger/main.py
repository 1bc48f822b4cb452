"""
Client Ledger: FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

import logging

from fastapi import FastAPI

from client_ledger.config import get_settings
from client_ledger.logging_setup import configure_logging
from client_ledger.api.health import router as health_router
from client_ledger.api.clients import router as clients_router
from client_ledger.api.transactions import router as transactions_router
from client_ledger.api.reports import router as reports_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    description="Per-client debit/credit ledgers with running balances",
)

# Register routers
app.include_router(health_router)
app.include_router(clients_router)
app.include_router(transactions_router)
app.include_router(reports_router)

logger.info(
    "Starting %s %s (balance strategy: %s)",
    settings.APP_NAME, settings.APP_VERSION, settings.BALANCE_STRATEGY,
)
