"""
Helpers shared by service and API tests.
"""

from datetime import date
from decimal import Decimal

from client_ledger.schemas.client import ClientCreate
from client_ledger.schemas.transaction import TransactionCreate

USER_ID = "user-1"
OTHER_USER_ID = "user-2"

HEADERS = {"X-User-Id": USER_ID}
OTHER_HEADERS = {"X-User-Id": OTHER_USER_ID}


def make_client(service, name="Sagar Medical", user_id=USER_ID):
    """Create and return a client."""
    return service.create_client(user_id, ClientCreate(name=name))


def add_entry(
    service, client_id, on, debit="0", credit="0",
    particulars="Entry", bill_no=None, user_id=USER_ID,
):
    """Add a transaction dated `on` (ISO string or date)."""
    if isinstance(on, str):
        on = date.fromisoformat(on)
    return service.create_transaction(user_id, client_id, TransactionCreate(
        date=on,
        particulars=particulars,
        bill_no=bill_no,
        debit_amount=Decimal(debit),
        credit_amount=Decimal(credit),
    ))
