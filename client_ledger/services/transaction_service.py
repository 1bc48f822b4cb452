"""
Transaction service: create, edit and delete ledger lines.

Each write:
1. Checks the client (or transaction) belongs to the user
2. Validates the amounts
3. Writes the row and flushes it
4. Tells the balance store the client's ledger changed

The caller controls the commit. With the persisted balance
strategy, step 4 rewrites every balance of the client in the
same database transaction as the write itself.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from client_ledger.config import get_settings
from client_ledger.exceptions import NotFoundError, ValidationError
from client_ledger.models.client import Client
from client_ledger.models.enums import EntryType, SortField, SortOrder
from client_ledger.models.transaction import Transaction
from client_ledger.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
)
from client_ledger.services.balance_engine import (
    TransactionWithBalance,
    final_balance,
    to_decimal,
)
from client_ledger.services.balance_store import (
    BalanceStore,
    build_balance_store,
    load_client,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LedgerFilters:
    start_date: date | None = None
    end_date: date | None = None
    entry_type: EntryType | None = None
    search: str | None = None

    def matches(self, transaction: Transaction) -> bool:
        if self.start_date and transaction.date < self.start_date:
            return False
        if self.end_date and transaction.date > self.end_date:
            return False
        if self.entry_type == EntryType.DEBIT and not (
            to_decimal(transaction.debit_amount) > 0
        ):
            return False
        if self.entry_type == EntryType.CREDIT and not (
            to_decimal(transaction.credit_amount) > 0
        ):
            return False
        if self.search:
            needle = self.search.lower()
            haystacks = (transaction.particulars or "", transaction.bill_no or "")
            if not any(needle in h.lower() for h in haystacks):
                return False
        return True


@dataclass(frozen=True)
class LedgerPage:
    client_id: int
    items: list[TransactionWithBalance]
    total: int
    page: int
    page_size: int
    balance: Decimal


def validate_amounts(debit_amount, credit_amount) -> None:
    """Reject negative amounts and entries with nothing on either side."""
    try:
        debit = to_decimal(debit_amount)
        credit = to_decimal(credit_amount)
    except ArithmeticError:
        raise ValidationError("Amounts must be numeric")
    if not (debit.is_finite() and credit.is_finite()):
        raise ValidationError("Amounts must be numeric")
    if debit < 0 or credit < 0:
        raise ValidationError("Amounts must not be negative")
    if debit == 0 and credit == 0:
        logger.warning("Rejected entry with zero debit and credit")
        raise ValidationError(
            "Either debit or credit amount must be greater than 0"
        )


class TransactionService:

    def __init__(self, db: Session, balance_store: BalanceStore | None = None):
        self.db = db
        self.balance_store = balance_store or build_balance_store(db)

    def _get_owned(self, user_id: str, transaction_id: int) -> Transaction:
        txn = self.db.execute(
            select(Transaction).where(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id,
            )
        ).scalar_one_or_none()
        if not txn:
            logger.warning(
                "Transaction %s not found for user %s", transaction_id, user_id
            )
            raise NotFoundError(f"Transaction {transaction_id} not found")
        return txn

    def create_transaction(
        self, user_id: str, client_id: int, request: TransactionCreate
    ) -> Transaction:
        """Add a line to a client's ledger."""
        client = load_client(self.db, user_id, client_id)
        validate_amounts(request.debit_amount, request.credit_amount)

        txn = Transaction(
            user_id=user_id,
            client_id=client.id,
            date=request.date,
            particulars=request.particulars,
            bill_no=request.bill_no or None,
            debit_amount=request.debit_amount,
            credit_amount=request.credit_amount,
        )
        self.db.add(txn)
        self.db.flush()

        self.balance_store.on_transactions_changed(user_id, client.id)
        logger.info(
            "Created transaction %s for client %s (Dr %s Cr %s)",
            txn.id, client.id, txn.debit_amount, txn.credit_amount,
        )
        return txn

    def get_transaction(self, user_id: str, transaction_id: int) -> Transaction:
        """Get a transaction by ID. Raises NotFoundError."""
        return self._get_owned(user_id, transaction_id)

    def get_transaction_with_balance(
        self, user_id: str, transaction_id: int
    ) -> TransactionWithBalance:
        txn = self._get_owned(user_id, transaction_id)
        rows = self.balance_store.compute_or_fetch_balances(
            user_id, txn.client_id
        )
        for row in rows:
            if row.id == txn.id:
                return row
        raise NotFoundError(f"Transaction {transaction_id} not found")

    def update_transaction(
        self, user_id: str, transaction_id: int, request: TransactionUpdate
    ) -> Transaction:
        """
        Apply the fields that were sent, then rebalance the client.

        The merged debit/credit pair must still satisfy the amount
        rules, otherwise nothing is changed.
        """
        txn = self._get_owned(user_id, transaction_id)
        changes = request.model_dump(exclude_unset=True)

        # date, particulars and amounts cannot be cleared
        for field in ("date", "particulars", "debit_amount", "credit_amount"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be empty")

        validate_amounts(
            changes.get("debit_amount", txn.debit_amount),
            changes.get("credit_amount", txn.credit_amount),
        )

        for field, value in changes.items():
            setattr(txn, field, value)
        self.db.flush()

        self.balance_store.on_transactions_changed(user_id, txn.client_id)
        logger.info(
            "Updated transaction %s (%s)", txn.id, ", ".join(sorted(changes))
        )
        return txn

    def delete_transaction(self, user_id: str, transaction_id: int) -> None:
        """Remove a line and rebalance the client's remaining ledger."""
        txn = self._get_owned(user_id, transaction_id)
        client_id = txn.client_id

        self.db.delete(txn)
        self.db.flush()

        self.balance_store.on_transactions_changed(user_id, client_id)
        logger.info(
            "Deleted transaction %s from client %s", transaction_id, client_id
        )

    def get_ledger(
        self,
        user_id: str,
        client_id: int,
        sort_field: SortField = SortField.DATE,
        sort_order: SortOrder = SortOrder.DESC,
        filters: LedgerFilters | None = None,
        page: int = 1,
        page_size: int | None = None,
    ) -> LedgerPage:
        """
        A page of a client's ledger with running balances.

        Balances come from the full ledger. Filters and paging only
        decide which rows are returned, never their balances.
        """
        if page < 1:
            raise ValidationError("page must be 1 or greater")
        if page_size is None:
            page_size = get_settings().DEFAULT_PAGE_SIZE
        if page_size < 1:
            raise ValidationError("page_size must be 1 or greater")

        rows = self.balance_store.compute_or_fetch_balances(
            user_id, client_id, sort_field, sort_order
        )
        balance = final_balance(r.transaction for r in rows)

        if filters:
            rows = [r for r in rows if filters.matches(r.transaction)]

        start = (page - 1) * page_size
        return LedgerPage(
            client_id=client_id,
            items=rows[start:start + page_size],
            total=len(rows),
            page=page,
            page_size=page_size,
            balance=balance,
        )

    def get_recent_transactions(
        self, user_id: str, limit: int = 10
    ) -> list[tuple[Transaction, str]]:
        """Latest transactions across all of a user's clients, with client name."""
        if limit < 1:
            raise ValidationError("limit must be 1 or greater")
        results = self.db.execute(
            select(Transaction, Client.name)
            .join(Client, Transaction.client_id == Client.id)
            .where(Transaction.user_id == user_id)
            .order_by(
                Transaction.date.desc(),
                Transaction.created_at.desc(),
                Transaction.id.desc(),
            )
            .limit(limit)
        ).all()
        return [(txn, name) for txn, name in results]
