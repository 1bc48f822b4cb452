"""
Transaction model.

One debit or credit line in a client's ledger. A debit increases
what the client owes (goods delivered), a credit decreases it
(payment received).

balance_after is only written when the persisted balance
strategy is active. Under the computed strategy it stays NULL
and balances are derived on every read.
"""

import datetime as dt
from decimal import Decimal

from sqlalchemy import (
    String, Text, Date, DateTime, Numeric, ForeignKey,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from client_ledger.models.base import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(
        String(128), nullable=False, index=True
    )
    client_id: Mapped[int] = mapped_column(
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Business date, user-editable, not tied to insertion order
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    particulars: Mapped[str] = mapped_column(Text, nullable=False)
    bill_no: Mapped[str | None] = mapped_column(String(100), nullable=True)
    debit_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    credit_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    balance_after: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True, default=None
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, default=dt.datetime.utcnow
    )

    client: Mapped["Client"] = relationship(back_populates="transactions")

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.id} {self.date} "
            f"Dr {self.debit_amount} Cr {self.credit_amount}>"
        )
