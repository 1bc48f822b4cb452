"""
Report API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from client_ledger.api.deps import get_balance_store, get_current_user_id
from client_ledger.models.base import get_db
from client_ledger.schemas.report import MonthlyTotalsResponse
from client_ledger.schemas.transaction import (
    TransactionResponse,
    RecentTransactionResponse,
)
from client_ledger.services.balance_store import BalanceStore
from client_ledger.services.report_service import ReportService
from client_ledger.services.transaction_service import TransactionService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/monthly/{year}/{month}", response_model=MonthlyTotalsResponse)
def get_monthly_totals(
    year: int,
    month: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Debit and credit totals for one Gregorian month, all clients.

    net is credit minus debit.
    """
    service = ReportService(db)
    try:
        totals = service.get_monthly_totals(user_id, year, month)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MonthlyTotalsResponse(
        year=totals.year,
        month=totals.month,
        total_debit=totals.total_debit,
        total_credit=totals.total_credit,
        net=totals.net,
        transaction_count=totals.transaction_count,
    )


@router.get("/recent", response_model=list[RecentTransactionResponse])
def get_recent_transactions(
    limit: int = Query(default=10, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    """Latest transactions across all clients, newest date first."""
    service = TransactionService(db, store)
    return [
        RecentTransactionResponse(
            **TransactionResponse.model_validate(txn).model_dump(),
            client_name=client_name,
        )
        for txn, client_name in service.get_recent_transactions(user_id, limit)
    ]
