"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from client_ledger.models.base import Base
from client_ledger.models.enums import (
    SortField,
    SortOrder,
    EntryType,
    BalanceStrategy,
)
from client_ledger.models.client import Client
from client_ledger.models.transaction import Transaction

__all__ = [
    "Base",
    "SortField",
    "SortOrder",
    "EntryType",
    "BalanceStrategy",
    "Client",
    "Transaction",
]
