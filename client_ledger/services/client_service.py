"""
Client service: clients and their derived ledger figures.

A client never stores its balance. Balance, transaction count
and last activity are derived from the client's transactions
every time they are asked for.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from client_ledger.models.client import Client
from client_ledger.schemas.client import ClientCreate, ClientUpdate
from client_ledger.services.balance_store import (
    BalanceStore,
    build_balance_store,
    load_client,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientSummary:
    client: Client
    balance: Decimal
    transaction_count: int
    last_activity: datetime


class ClientService:

    def __init__(self, db: Session, balance_store: BalanceStore | None = None):
        self.db = db
        self.balance_store = balance_store or build_balance_store(db)

    def create_client(self, user_id: str, request: ClientCreate) -> Client:
        """Create a new client for a user."""
        client = Client(user_id=user_id, **request.model_dump())
        self.db.add(client)
        self.db.flush()
        logger.info("Created client %s for user %s", client.id, user_id)
        return client

    def get_client(self, user_id: str, client_id: int) -> Client:
        """Get a client by ID. Raises NotFoundError."""
        return load_client(self.db, user_id, client_id)

    def list_clients(self, user_id: str) -> list[Client]:
        """All clients of a user, newest first."""
        clients = self.db.execute(
            select(Client)
            .where(Client.user_id == user_id)
            .order_by(Client.created_at.desc(), Client.id.desc())
        ).scalars().all()
        return list(clients)

    def update_client(
        self, user_id: str, client_id: int, request: ClientUpdate
    ) -> Client:
        """Apply the fields that were sent."""
        client = load_client(self.db, user_id, client_id)
        changes = request.model_dump(exclude_unset=True)
        if changes.get("name", "") is None:
            del changes["name"]
        for field, value in changes.items():
            setattr(client, field, value)
        self.db.flush()
        return client

    def delete_client(self, user_id: str, client_id: int) -> None:
        """Delete a client together with its whole ledger."""
        client = load_client(self.db, user_id, client_id)
        self.db.delete(client)
        self.db.flush()
        logger.info("Deleted client %s for user %s", client_id, user_id)

    def get_balance(self, user_id: str, client_id: int) -> Decimal:
        """Current balance. Positive means the client owes money."""
        return self.balance_store.get_client_balance(user_id, client_id)

    def get_summary(self, user_id: str, client_id: int) -> ClientSummary:
        client = load_client(self.db, user_id, client_id)
        return self._summarize(client)

    def list_summaries(self, user_id: str) -> list[ClientSummary]:
        """All clients of a user with balance, count and last activity."""
        return [self._summarize(c) for c in self.list_clients(user_id)]

    def _summarize(self, client: Client) -> ClientSummary:
        rows = self.balance_store.compute_or_fetch_balances(
            client.user_id, client.id
        )
        balance = rows[-1].balance_after if rows else Decimal("0")
        if rows:
            last_activity = max(r.transaction.created_at for r in rows)
        else:
            last_activity = client.created_at
        return ClientSummary(
            client=client,
            balance=balance,
            transaction_count=len(rows),
            last_activity=last_activity,
        )
