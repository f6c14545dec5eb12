"""
DataStore — In-memory billing tables backed by pandas.

Loaded once at startup, queried on every request. Queries never mutate
the stored frames.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from billing_analytics.config import DATA_FOLDER
from billing_analytics.data.loader import load_tables
from billing_analytics.data.schemas import PeriodFilter, PeriodType
from billing_analytics.data.seed import seed_tables
from billing_analytics.data.validate import validate_tables


class DataStore:
    """Customers, services and transactions with period-filtered accessors."""

    def __init__(self) -> None:
        self.customers: pd.DataFrame = pd.DataFrame()
        self.services: pd.DataFrame = pd.DataFrame()
        self.transactions: pd.DataFrame = pd.DataFrame()
        self.source: str = "none"
        self.warnings: list[str] = []
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self, data_dir: Path | None = DATA_FOLDER, use_seed: bool = True) -> "DataStore":
        """Load CSVs from data_dir, falling back to the embedded seed.

        Pass data_dir=None to load the seed directly.
        """
        if data_dir is None and not use_seed:
            raise ValueError("No data folder given and the seed fallback is disabled")

        tables = None
        if data_dir is not None:
            print(f"Loading billing data from {data_dir}...")
            tables = load_tables(Path(data_dir))
            source = str(data_dir)

        if tables is None:
            if not use_seed:
                raise FileNotFoundError(f"No billing CSVs found in {data_dir}")
            print("  No billing CSVs found — using embedded seed data")
            tables = seed_tables()
            source = "seed"

        return self.set_tables(tables, source)

    def set_tables(self, tables: dict[str, pd.DataFrame], source: str = "memory") -> "DataStore":
        """Validate and install already-built tables."""
        self.warnings = validate_tables(tables)
        self.customers = tables["customers"]
        self.services = tables["services"]
        self.transactions = tables["transactions"]
        self.source = source
        self._loaded = True
        print(f"  Ready: {len(self.customers):,} customers, {len(self.services):,} services, "
              f"{len(self.transactions):,} transactions")
        return self

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def _apply_period(self, df: pd.DataFrame, period: PeriodFilter) -> pd.DataFrame:
        """Filter transactions by period.

        Uses year/month accessors for the calendar period types and
        a date comparison for custom ranges.
        """
        dates = df["transaction_date"]

        if period.period_type == PeriodType.ALL:
            return df
        if period.period_type == PeriodType.MONTH and period.year and period.month:
            return df[(dates.dt.year == period.year) & (dates.dt.month == period.month)]
        if period.period_type == PeriodType.QUARTER and period.year and period.quarter:
            return df[(dates.dt.year == period.year) & (dates.dt.quarter == period.quarter)]
        if period.period_type == PeriodType.YEAR and period.year:
            return df[dates.dt.year == period.year]

        start, end = period.resolve()
        if start is not None:
            df = df[df["transaction_date"] >= pd.Timestamp(start)]
        if end is not None:
            df = df[df["transaction_date"] <= pd.Timestamp(end)]
        return df

    def get_transactions(self, period: PeriodFilter | None = None) -> pd.DataFrame:
        """Transactions for a period, in load order."""
        df = self.transactions
        if period and not df.empty:
            df = self._apply_period(df, period)
        return df.reset_index(drop=True)

    # ------------------------------------------------------------------
    # Metadata queries
    # ------------------------------------------------------------------

    def regions(self) -> list[str]:
        if self.customers.empty:
            return []
        return sorted(self.customers["region"].dropna().unique().tolist())

    def service_types(self) -> list[str]:
        if self.services.empty:
            return []
        return sorted(self.services["service_type"].dropna().unique().tolist())

    def date_range(self, period: PeriodFilter | None = None) -> str:
        """Human-readable date range string."""
        df = self.get_transactions(period)
        if df.empty:
            return "N/A"
        dates = df["transaction_date"].dropna()
        return f"{dates.min():%Y-%m-%d} to {dates.max():%Y-%m-%d}"

    def total_billed(self, period: PeriodFilter | None = None) -> float:
        df = self.get_transactions(period)
        return round(float(df["amount_paid"].sum()), 2) if not df.empty else 0.0

    def row_counts(self) -> dict[str, int]:
        return {
            "customers": len(self.customers),
            "services": len(self.services),
            "transactions": len(self.transactions),
        }
