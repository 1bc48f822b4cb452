"""
Pydantic schemas for client operations.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class ClientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    company_name: str | None = None
    contact_person: str | None = None
    contact: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=255)
    address: str | None = None
    pan_number: str | None = Field(default=None, max_length=20)


class ClientUpdate(BaseModel):
    """Partial update. Only fields that are sent are changed."""
    name: str | None = Field(default=None, min_length=1, max_length=255)
    company_name: str | None = None
    contact_person: str | None = None
    contact: str | None = Field(default=None, max_length=50)
    email: str | None = Field(default=None, max_length=255)
    address: str | None = None
    pan_number: str | None = Field(default=None, max_length=20)


class ClientResponse(BaseModel):
    id: int
    name: str
    company_name: str | None
    contact_person: str | None
    contact: str | None
    email: str | None
    address: str | None
    pan_number: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ClientSummaryResponse(ClientResponse):
    """Client with its derived ledger figures."""
    balance: Decimal
    transaction_count: int
    last_activity: datetime


class ClientBalanceResponse(BaseModel):
    client_id: int
    balance: Decimal
