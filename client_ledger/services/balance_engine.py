"""
Balance engine: running balances for one client's ledger.

Pure functions, no I/O. Given the transactions of a single client
in any order, compute the balance after each one and return them
in the requested display order.

Balances are always computed in ascending chronological order of
the chosen sort field, tie-broken by id. The display order only
decides how rows are listed, never what their balances are:

    balance_after(n) = balance_after(n - 1) + debit(n) - credit(n)

A positive balance means the client owes money.

All arithmetic uses Decimal. Amounts coming in as float are
converted through str() so 0.1 stays 0.1.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable

from client_ledger.exceptions import ComputationInvariantViolation
from client_ledger.models.enums import SortField, SortOrder

ZERO = Decimal("0")


@dataclass(frozen=True)
class TransactionWithBalance:
    """A transaction paired with its running balance."""
    transaction: Any
    balance_after: Decimal

    @property
    def id(self):
        return self.transaction.id


def to_decimal(value) -> Decimal:
    """Convert a stored or submitted amount to Decimal. None is zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def net_amount(transaction) -> Decimal:
    """Debit minus credit for a single transaction."""
    return to_decimal(transaction.debit_amount) - to_decimal(
        transaction.credit_amount
    )


def final_balance(transactions: Iterable) -> Decimal:
    """sum(debit) - sum(credit) over the whole set."""
    return sum((net_amount(t) for t in transactions), ZERO)


def chronological_key(sort_field: SortField | str):
    """Sort key for a field, with id as the deterministic tie-break."""
    field = SortField(sort_field)
    attribute = "date" if field == SortField.DATE else "created_at"

    def key(transaction):
        return (getattr(transaction, attribute), transaction.id)

    return key


def check_final_balance(
    rows: list[TransactionWithBalance], transactions: list
) -> None:
    """
    Raise if the last chronological balance is not the net sum.

    rows must be in chronological order.
    """
    if not rows:
        return
    expected = final_balance(transactions)
    actual = rows[-1].balance_after
    if actual != expected:
        raise ComputationInvariantViolation(
            f"Final balance {actual} does not match "
            f"debits minus credits {expected}"
        )


def compute_balances(
    transactions: Iterable,
    sort_field: SortField | str = SortField.DATE,
    sort_order: SortOrder | str = SortOrder.ASC,
) -> list[TransactionWithBalance]:
    """
    Annotate every transaction with its running balance.

    Each transaction must expose id, date, created_at,
    debit_amount and credit_amount. The input is not modified.

    Returns one TransactionWithBalance per input transaction,
    ordered by sort_field in sort_order. Raises ValueError for
    an unknown sort_field or sort_order.
    """
    sort_field = SortField(sort_field)
    sort_order = SortOrder(sort_order)
    transactions = list(transactions)

    key = chronological_key(sort_field)
    chronological = sorted(transactions, key=key)

    running = ZERO
    rows = []
    for transaction in chronological:
        running = running + net_amount(transaction)
        rows.append(TransactionWithBalance(transaction, running))

    check_final_balance(rows, transactions)

    # Keys are unique because of the id tie-break, so descending
    # is the exact reverse of the chronological pass.
    if sort_order == SortOrder.DESC:
        rows.reverse()
    return rows
