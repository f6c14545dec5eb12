"""
FastAPI dependencies — DataStore singleton, period parsing.
"""
from __future__ import annotations

import datetime as dt
from typing import Optional

from fastapi import HTTPException, Query

from billing_analytics.data.store import DataStore
from billing_analytics.data.schemas import PeriodFilter, PeriodType

# ---------------------------------------------------------------------------
# Global store singleton (set during startup)
# ---------------------------------------------------------------------------
_store: DataStore | None = None


def set_store(store: DataStore | None) -> None:
    global _store
    _store = store


def get_store() -> DataStore:
    if _store is None or not _store.is_loaded:
        raise HTTPException(503, "Data not loaded yet")
    return _store


# ---------------------------------------------------------------------------
# Period parsing from query params
# ---------------------------------------------------------------------------

def parse_period(
    period_type: Optional[str] = Query(None, description="month|quarter|year|custom|all"),
    year: Optional[int] = Query(None),
    month: Optional[int] = Query(None, ge=1, le=12),
    quarter: Optional[int] = Query(None, ge=1, le=4),
    start_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
    end_date: Optional[str] = Query(None, description="YYYY-MM-DD"),
) -> PeriodFilter | None:
    """Parse period query parameters into a PeriodFilter."""
    if period_type is None:
        return None

    try:
        pt = PeriodType(period_type)
    except ValueError:
        raise HTTPException(400, f"Invalid period_type: {period_type}")

    try:
        sd = dt.date.fromisoformat(start_date) if start_date else None
        ed = dt.date.fromisoformat(end_date) if end_date else None
    except ValueError:
        raise HTTPException(400, "start_date/end_date must be YYYY-MM-DD")

    return PeriodFilter(
        period_type=pt,
        year=year,
        month=month,
        quarter=quarter,
        start_date=sd,
        end_date=ed,
    )
