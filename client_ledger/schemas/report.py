"""
Pydantic schemas for reports.
"""

from decimal import Decimal

from pydantic import BaseModel


class MonthlyTotalsResponse(BaseModel):
    year: int
    month: int
    total_debit: Decimal
    total_credit: Decimal
    # Money in minus money out: credit - debit
    net: Decimal
    transaction_count: int
