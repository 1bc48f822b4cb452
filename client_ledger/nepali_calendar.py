"""
Bikram Sambat rendering of ledger dates.

The conversion itself is done by the nepali-datetime library.
This is display only; balances are always computed on the
Gregorian dates stored in the database.
"""

import logging
from dataclasses import dataclass
from datetime import date

import nepali_datetime

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalDate:
    year: int
    month: int
    day: int

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"


def to_local_calendar(value: date) -> LocalDate | None:
    """
    Convert a Gregorian date to Bikram Sambat.

    Returns None for dates outside the range the library
    has calendar data for.
    """
    try:
        converted = nepali_datetime.date.from_datetime_date(value)
    except (ValueError, OverflowError):
        logger.debug("No Bikram Sambat date for %s", value)
        return None
    return LocalDate(converted.year, converted.month, converted.day)


def format_local_date(value: date) -> str | None:
    local = to_local_calendar(value)
    return local.isoformat() if local else None
