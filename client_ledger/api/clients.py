"""
Client API endpoints.

The API layer is thin: it handles HTTP concerns and delegates
all business logic to ClientService.
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from client_ledger.api.deps import get_balance_store, get_current_user_id
from client_ledger.exceptions import NotFoundError
from client_ledger.models.base import get_db
from client_ledger.schemas.client import (
    ClientCreate,
    ClientUpdate,
    ClientResponse,
    ClientSummaryResponse,
    ClientBalanceResponse,
)
from client_ledger.services.balance_store import BalanceStore
from client_ledger.services.client_service import ClientService, ClientSummary

router = APIRouter(prefix="/clients", tags=["Clients"])


def to_summary_response(summary: ClientSummary) -> ClientSummaryResponse:
    return ClientSummaryResponse(
        **ClientResponse.model_validate(summary.client).model_dump(),
        balance=summary.balance,
        transaction_count=summary.transaction_count,
        last_activity=summary.last_activity,
    )


@router.get("", response_model=list[ClientSummaryResponse])
def list_clients(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    """All clients with balance, transaction count and last activity."""
    service = ClientService(db, store)
    return [to_summary_response(s) for s in service.list_summaries(user_id)]


@router.post("", response_model=ClientResponse, status_code=201)
def create_client(
    request: ClientCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    service = ClientService(db, store)
    try:
        client = service.create_client(user_id, request)
        db.commit()
        return client
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{client_id}", response_model=ClientSummaryResponse)
def get_client(
    client_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    service = ClientService(db, store)
    try:
        return to_summary_response(service.get_summary(user_id, client_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{client_id}", response_model=ClientResponse)
def update_client(
    client_id: int,
    request: ClientUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    service = ClientService(db, store)
    try:
        client = service.update_client(user_id, client_id, request)
        db.commit()
        return client
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{client_id}", status_code=204)
def delete_client(
    client_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    """Delete a client and all of its transactions."""
    service = ClientService(db, store)
    try:
        service.delete_client(user_id, client_id)
        db.commit()
    except NotFoundError as e:
        db.rollback()
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.get("/{client_id}/balance", response_model=ClientBalanceResponse)
def get_client_balance(
    client_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    store: BalanceStore = Depends(get_balance_store),
):
    """
    Current balance of a client.

    Positive means the client owes money.
    """
    service = ClientService(db, store)
    try:
        balance = service.get_balance(user_id, client_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return ClientBalanceResponse(client_id=client_id, balance=balance)
