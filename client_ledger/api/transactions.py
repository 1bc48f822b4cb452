"""
Transaction and ledger API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from client_ledger.api.deps import get_balance_store, get_current_user_id
from client_ledger.exceptions import NotFoundError
from client_ledger.models.base import get_db
from client_ledger.models.enums import EntryType, SortField, SortOrder
from client_ledger.nepali_calendar import format_local_date
from client_ledger.schemas.transaction import (
    TransactionCreate,
    TransactionUpdate,
    TransactionResponse,
    LedgerRowResponse,
    LedgerPageResponse,
)
from client_ledger.services.balance_engine import TransactionWithBalance
from client_ledger.services.balance_store import BalanceStore
from client_ledger.services.transaction_service import (
    LedgerFilters,
    TransactionService,
)

router = APIRouter(tags=["Transactions"])


def to_ledger_row(row: TransactionWithBalance) -> LedgerRowResponse:
    return LedgerRowResponse(
        **TransactionResponse.model_validate(row.transaction).model_dump(),
        balance_after=row.balance_after,
        nepali_date=format_local_date(row.transaction.date),
    )


@router.get(
    "/clients/{client_id}/transactions",
    response_model=LedgerPageResponse,
)
def get_ledger(
    client_id: int,
    sort_field: SortField = SortField.DATE,
    sort_order: SortOrder = SortOrder.DESC,
    start_date: date | None = None,
    end_date: date | None = None,
    entry_type: EntryType | None = Query(default=None, alias="type"),
    search: str | None = None,
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    """
    A client's ledger with running balances.

    Balances are computed over the whole ledger in date (or
    creation) order. Filters and paging never change them.
    """
    service = TransactionService(db, store)
    filters = LedgerFilters(
        start_date=start_date,
        end_date=end_date,
        entry_type=entry_type,
        search=search or None,
    )
    try:
        ledger = service.get_ledger(
            user_id, client_id, sort_field, sort_order,
            filters=filters, page=page, page_size=page_size,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return LedgerPageResponse(
        client_id=ledger.client_id,
        items=[to_ledger_row(r) for r in ledger.items],
        total=ledger.total,
        page=ledger.page,
        page_size=ledger.page_size,
        balance=ledger.balance,
    )


@router.post(
    "/clients/{client_id}/transactions",
    response_model=LedgerRowResponse,
    status_code=201,
)
def create_transaction(
    client_id: int,
    request: TransactionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    """Add a debit or credit line to a client's ledger."""
    service = TransactionService(db, store)
    try:
        txn = service.create_transaction(user_id, client_id, request)
        db.commit()
        return to_ledger_row(
            service.get_transaction_with_balance(user_id, txn.id)
        )
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/transactions/{transaction_id}", response_model=LedgerRowResponse)
def get_transaction(
    transaction_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    service = TransactionService(db, store)
    try:
        return to_ledger_row(
            service.get_transaction_with_balance(user_id, transaction_id)
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/transactions/{transaction_id}", response_model=LedgerRowResponse)
def update_transaction(
    transaction_id: int,
    request: TransactionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    """Edit a line. Every balance of the client is recomputed."""
    service = TransactionService(db, store)
    try:
        txn = service.update_transaction(user_id, transaction_id, request)
        db.commit()
        return to_ledger_row(
            service.get_transaction_with_balance(user_id, txn.id)
        )
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    service = TransactionService(db, store)
    try:
        service.delete_transaction(user_id, transaction_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)
