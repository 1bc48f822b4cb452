"""
Pydantic schemas for ledger transactions.

Amounts must be non-negative with at most two decimal places,
and at least one of debit or credit must be greater than zero.
"""

import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class TransactionCreate(BaseModel):
    date: dt.date
    particulars: str = Field(min_length=1)
    bill_no: str | None = Field(default=None, max_length=100)
    debit_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)
    credit_amount: Decimal = Field(default=Decimal("0"), ge=0, decimal_places=2)

    @model_validator(mode="after")
    def debit_or_credit_required(self):
        if self.debit_amount <= 0 and self.credit_amount <= 0:
            raise ValueError(
                "Either debit or credit amount must be greater than 0"
            )
        return self


class TransactionUpdate(BaseModel):
    """
    Partial update. Only fields that are sent are changed.

    The debit/credit rule is checked by the service against the
    merged result, since either amount may be left unchanged.
    """
    date: dt.date | None = None
    particulars: str | None = Field(default=None, min_length=1)
    bill_no: str | None = Field(default=None, max_length=100)
    debit_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    credit_amount: Decimal | None = Field(default=None, ge=0, decimal_places=2)


class TransactionResponse(BaseModel):
    id: int
    client_id: int
    date: dt.date
    particulars: str
    bill_no: str | None
    debit_amount: Decimal
    credit_amount: Decimal
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class LedgerRowResponse(TransactionResponse):
    """A transaction as shown in a ledger, with its running balance."""
    balance_after: Decimal
    nepali_date: str | None = None


class LedgerPageResponse(BaseModel):
    client_id: int
    items: list[LedgerRowResponse]
    total: int
    page: int
    page_size: int
    balance: Decimal


class RecentTransactionResponse(TransactionResponse):
    client_name: str
