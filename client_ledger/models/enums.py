"""
Shared enumerations.

str-based enums so FastAPI can use them directly as query
parameters and the balance engine can accept either the enum
or its plain string value.
"""

import enum


class SortField(str, enum.Enum):
    """Field a ledger is ordered by."""
    DATE = "date"
    CREATED_AT = "created_at"


class SortOrder(str, enum.Enum):
    """Direction a ledger is displayed in."""
    ASC = "asc"
    DESC = "desc"


class EntryType(str, enum.Enum):
    """Side of a ledger entry, used for filtering."""
    DEBIT = "debit"
    CREDIT = "credit"


class BalanceStrategy(str, enum.Enum):
    """How running balances reach the reader."""
    COMPUTED = "computed"
    PERSISTED = "persisted"
