"""
Shared request dependencies.

Authentication happens in front of this service. The
authenticated user's id arrives in the X-User-Id header and
every query is scoped to it.
"""

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from client_ledger.models.base import get_db
from client_ledger.services.balance_store import (
    BalanceStore,
    build_balance_store,
)


def get_current_user_id(
    x_user_id: str | None = Header(default=None),
) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    return x_user_id.strip()


def get_balance_store(db: Session = Depends(get_db)) -> BalanceStore:
    """The configured balance strategy, bound to the request session."""
    return build_balance_store(db)
