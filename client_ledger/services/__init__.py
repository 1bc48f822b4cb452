"""Business logic services."""

from client_ledger.services.balance_store import (
    BalanceStore,
    ComputedBalanceStore,
    PersistedBalanceStore,
    build_balance_store,
)
from client_ledger.services.client_service import ClientService
from client_ledger.services.transaction_service import TransactionService
from client_ledger.services.report_service import ReportService

__all__ = [
    "BalanceStore",
    "ComputedBalanceStore",
    "PersistedBalanceStore",
    "build_balance_store",
    "ClientService",
    "TransactionService",
    "ReportService",
]
