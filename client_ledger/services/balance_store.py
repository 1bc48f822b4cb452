"""
Balance stores: how running balances get from the engine to the reader.

Two strategies share one interface:

ComputedBalanceStore
    Never stores balances and clears any left by a persisted
    pass when the ledger changes. Every read loads the client's
    full ledger and runs the balance engine.

PersistedBalanceStore
    After every create, update or delete, reloads the client's
    full ledger, runs the engine, and writes balance_after back
    onto every row. Reads return the stored values, or compute
    in memory when some are missing.

Both produce the same balance for every transaction of the
same set. The rewrite happens inside the caller's database
transaction and the caller commits once, so a mutation and the
balance rewrite it triggers are stored together or not at all.
"""

import logging
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from client_ledger.config import get_settings
from client_ledger.exceptions import NotFoundError
from client_ledger.models.client import Client
from client_ledger.models.enums import BalanceStrategy, SortField, SortOrder
from client_ledger.models.transaction import Transaction
from client_ledger.services.balance_engine import (
    ZERO,
    TransactionWithBalance,
    chronological_key,
    compute_balances,
    to_decimal,
)

logger = logging.getLogger(__name__)


def load_client(
    db: Session, user_id: str, client_id: int, for_update: bool = False
) -> Client:
    """Return the user's client or raise NotFoundError."""
    query = select(Client).where(
        Client.id == client_id, Client.user_id == user_id
    )
    if for_update:
        query = query.with_for_update()
    client = db.execute(query).scalar_one_or_none()
    if not client:
        logger.warning("Client %s not found for user %s", client_id, user_id)
        raise NotFoundError(f"Client {client_id} not found")
    return client


def load_transactions(
    db: Session, user_id: str, client_id: int
) -> list[Transaction]:
    """All of a client's transactions in canonical order (date, id)."""
    transactions = db.execute(
        select(Transaction)
        .where(
            Transaction.client_id == client_id,
            Transaction.user_id == user_id,
        )
        .order_by(Transaction.date, Transaction.id)
    ).scalars().all()
    return list(transactions)


class BalanceStore:
    """
    Base class for balance strategies.

    The store takes a database session as a constructor argument.
    The caller controls the transaction boundary.
    """

    strategy: BalanceStrategy

    def __init__(self, db: Session):
        self.db = db

    def compute_or_fetch_balances(
        self,
        user_id: str,
        client_id: int,
        sort_field: SortField = SortField.DATE,
        sort_order: SortOrder = SortOrder.ASC,
    ) -> list[TransactionWithBalance]:
        raise NotImplementedError

    def on_transactions_changed(self, user_id: str, client_id: int) -> None:
        """Called after a client's ledger was written, before commit."""
        raise NotImplementedError

    def get_client_balance(self, user_id: str, client_id: int) -> Decimal:
        """
        Current balance of a client.

        This is the balance after the last transaction in date
        order, which always equals total debits minus total credits.
        """
        rows = self.compute_or_fetch_balances(
            user_id, client_id, SortField.DATE, SortOrder.ASC
        )
        return rows[-1].balance_after if rows else ZERO


class ComputedBalanceStore(BalanceStore):
    strategy = BalanceStrategy.COMPUTED

    def compute_or_fetch_balances(
        self,
        user_id: str,
        client_id: int,
        sort_field: SortField = SortField.DATE,
        sort_order: SortOrder = SortOrder.ASC,
    ) -> list[TransactionWithBalance]:
        load_client(self.db, user_id, client_id)
        transactions = load_transactions(self.db, user_id, client_id)
        return compute_balances(transactions, sort_field, sort_order)

    def on_transactions_changed(self, user_id: str, client_id: int) -> None:
        # Clear balances a persisted pass may have left behind.
        self.db.execute(
            update(Transaction)
            .where(
                Transaction.client_id == client_id,
                Transaction.user_id == user_id,
            )
            .values(balance_after=None)
        )
        self.db.flush()


class PersistedBalanceStore(BalanceStore):
    strategy = BalanceStrategy.PERSISTED

    def recompute(
        self, user_id: str, client_id: int
    ) -> list[TransactionWithBalance]:
        """
        Rewrite balance_after for the client's whole ledger.

        Locks the client row first so two rewrites of the same
        ledger cannot interleave (no-op on SQLite). Every row is
        overwritten, so repeating a failed pass from scratch is
        safe. Returns the rows in chronological order.
        """
        load_client(self.db, user_id, client_id, for_update=True)
        transactions = load_transactions(self.db, user_id, client_id)
        rows = compute_balances(transactions, SortField.DATE, SortOrder.ASC)

        changed = 0
        for row in rows:
            if row.transaction.balance_after != row.balance_after:
                row.transaction.balance_after = row.balance_after
                changed += 1

        self.db.flush()
        logger.debug(
            "Recomputed balances for client %s: %d rows, %d changed",
            client_id, len(rows), changed,
        )
        return rows

    def on_transactions_changed(self, user_id: str, client_id: int) -> None:
        self.recompute(user_id, client_id)

    def compute_or_fetch_balances(
        self,
        user_id: str,
        client_id: int,
        sort_field: SortField = SortField.DATE,
        sort_order: SortOrder = SortOrder.ASC,
    ) -> list[TransactionWithBalance]:
        sort_field = SortField(sort_field)
        sort_order = SortOrder(sort_order)

        load_client(self.db, user_id, client_id)
        transactions = load_transactions(self.db, user_id, client_id)

        # Stored balances follow date order only.
        if sort_field != SortField.DATE:
            return compute_balances(transactions, sort_field, sort_order)

        if any(t.balance_after is None for t in transactions):
            # Filled in by the next write, reads never write.
            logger.debug(
                "Client %s has rows without a stored balance, computing",
                client_id,
            )
            return compute_balances(transactions, sort_field, sort_order)

        rows = [
            TransactionWithBalance(t, to_decimal(t.balance_after))
            for t in sorted(transactions, key=chronological_key(SortField.DATE))
        ]
        if sort_order == SortOrder.DESC:
            rows.reverse()
        return rows


STORES = {
    BalanceStrategy.COMPUTED: ComputedBalanceStore,
    BalanceStrategy.PERSISTED: PersistedBalanceStore,
}


def build_balance_store(
    db: Session, strategy: BalanceStrategy | str | None = None
) -> BalanceStore:
    """Return the configured balance store bound to this session."""
    if strategy is None:
        strategy = get_settings().BALANCE_STRATEGY
    try:
        strategy = BalanceStrategy(strategy)
    except ValueError:
        raise ValueError(f"Unknown balance strategy '{strategy}'")
    return STORES[strategy](db)
