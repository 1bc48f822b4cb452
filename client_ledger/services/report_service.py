"""
Report service: totals across all of a user's clients.
"""

import calendar
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from client_ledger.exceptions import ValidationError
from client_ledger.models.transaction import Transaction
from client_ledger.services.balance_engine import to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MonthlyTotals:
    year: int
    month: int
    total_debit: Decimal
    total_credit: Decimal
    net: Decimal
    transaction_count: int


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a Gregorian month."""
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    if not 1 <= year <= 9999:
        raise ValidationError(f"Invalid year {year}")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


class ReportService:

    def __init__(self, db: Session):
        self.db = db

    def get_monthly_totals(
        self, user_id: str, year: int, month: int
    ) -> MonthlyTotals:
        """
        Sum debits and credits dated within one calendar month.

        Both the first and last day of the month are included.
        net is credit minus debit: money received minus goods
        and services handed out.
        """
        first_day, last_day = month_bounds(year, month)

        # Summed in Python with Decimal so SQLite (float SUM) and
        # PostgreSQL (numeric SUM) give identical totals.
        amounts = self.db.execute(
            select(Transaction.debit_amount, Transaction.credit_amount).where(
                Transaction.user_id == user_id,
                Transaction.date >= first_day,
                Transaction.date <= last_day,
            )
        ).all()

        total_debit = sum((to_decimal(d) for d, _ in amounts), Decimal("0"))
        total_credit = sum((to_decimal(c) for _, c in amounts), Decimal("0"))
        count = len(amounts)
        logger.debug(
            "Monthly totals %04d-%02d for user %s: %d transactions",
            year, month, user_id, count,
        )
        return MonthlyTotals(
            year=year,
            month=month,
            total_debit=total_debit,
            total_credit=total_credit,
            net=total_credit - total_debit,
            transaction_count=count,
        )
