"""
Record types for the three billing tables and the period filter for
time-based queries.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Table records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Customer:
    customer_id: int
    customer_name: str
    region: str
    registration_date: dt.date


@dataclass(frozen=True)
class Service:
    service_id: int
    service_name: str
    service_type: str
    monthly_fee: Decimal


@dataclass(frozen=True)
class Transaction:
    transaction_id: int
    customer_id: Optional[int]           # None for unregistered/prepaid payments
    service_id: Optional[int]
    transaction_date: dt.date
    amount_paid: Decimal


# ---------------------------------------------------------------------------
# Period filter
# ---------------------------------------------------------------------------

class PeriodType(str, Enum):
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    CUSTOM = "custom"
    ALL = "all"


@dataclass
class PeriodFilter:
    """Defines a date range for filtering transactions."""
    period_type: PeriodType = PeriodType.ALL
    year: Optional[int] = None
    month: Optional[int] = None          # 1-12
    quarter: Optional[int] = None        # 1-4
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    def resolve(self) -> tuple[Optional[dt.date], Optional[dt.date]]:
        """Return (start_date, end_date) based on period_type."""
        if self.period_type == PeriodType.ALL:
            return None, None

        if self.period_type == PeriodType.CUSTOM:
            return self.start_date, self.end_date

        if self.year is None:
            return None, None

        if self.period_type == PeriodType.MONTH:
            if self.month is None:
                return None, None
            return dt.date(self.year, self.month, 1), _month_end(self.year, self.month)

        if self.period_type == PeriodType.QUARTER:
            if self.quarter is None:
                return None, None
            start_month = (self.quarter - 1) * 3 + 1
            return dt.date(self.year, start_month, 1), _month_end(self.year, start_month + 2)

        if self.period_type == PeriodType.YEAR:
            return dt.date(self.year, 1, 1), dt.date(self.year, 12, 31)

        return None, None

    @property
    def label(self) -> str:
        """Human-readable label for the period."""
        if self.period_type == PeriodType.ALL:
            return "All Time"
        if self.period_type == PeriodType.MONTH and self.year and self.month:
            return f"{dt.date(self.year, self.month, 1):%B %Y}"
        if self.period_type == PeriodType.QUARTER and self.year and self.quarter:
            return f"Q{self.quarter} {self.year}"
        if self.period_type == PeriodType.YEAR and self.year:
            return str(self.year)
        if self.period_type == PeriodType.CUSTOM:
            s = self.start_date.isoformat() if self.start_date else "?"
            e = self.end_date.isoformat() if self.end_date else "?"
            return f"{s} to {e}"
        return "Unknown"


def _month_end(year: int, month: int) -> dt.date:
    if month == 12:
        return dt.date(year + 1, 1, 1) - dt.timedelta(days=1)
    return dt.date(year, month + 1, 1) - dt.timedelta(days=1)
