"""
Window analytics — ranking, running totals, previous-period values, quartiles.

Each computation returns one row per input row (or per group for the
aggregated windows) without collapsing the result further. Ties in the
ordering key keep load order. Empty input gives an empty frame with the
documented columns.
"""
from __future__ import annotations

import pandas as pd

from billing_analytics.analytics.common import ntile, over, pct_change, stable_sort
from billing_analytics.analytics.joins import join_tables
from billing_analytics.config import QUARTILE_BUCKETS

RANK_COLUMNS = [
    "service_id", "service_name", "service_type", "transaction_count",
    "total_revenue", "revenue_rank", "dense_rank", "row_number",
]
RUNNING_TOTAL_COLUMNS = [
    "transaction_id", "transaction_date", "customer_id", "service_id",
    "amount_paid", "running_total",
]
PERIOD_COLUMNS = [
    "period", "transaction_count", "total_amount",
    "previous_total", "next_total", "change", "change_pct",
]
QUARTILE_COLUMNS = [
    "customer_id", "customer_name", "region", "transaction_count",
    "total_spend", "spend_quartile",
]

PERIODS = ("day", "month")


def _check_partition(df: pd.DataFrame, partition_by: str | None) -> None:
    if partition_by is not None and partition_by not in df.columns:
        raise ValueError(f"Cannot partition by {partition_by!r}: not a column")


# ---------------------------------------------------------------------------
# Ranking
# ---------------------------------------------------------------------------

def rank_services(
    services: pd.DataFrame,
    transactions: pd.DataFrame,
    partition_by: str | None = None,
) -> pd.DataFrame:
    """Rank services by total revenue, highest first.

    revenue_rank is RANK() (ties share a rank, the next one skips),
    dense_rank is DENSE_RANK() and row_number is ROW_NUMBER().
    partition_by="service_type" ranks within each service type.
    """
    _check_partition(services, partition_by)
    tx = transactions.dropna(subset=["service_id"])
    if tx.empty:
        return pd.DataFrame(columns=RANK_COLUMNS)

    totals = tx.groupby("service_id", sort=False).agg(
        transaction_count=("transaction_id", "count"),
        total_revenue=("amount_paid", "sum"),
    ).reset_index()
    totals["total_revenue"] = totals["total_revenue"].round(2)

    ranked = join_tables(services[["service_id", "service_name", "service_type"]], totals,
                         on="service_id", how="inner")
    if partition_by:
        ranked = stable_sort(ranked, [partition_by, "total_revenue"], [True, False])
    else:
        ranked = stable_sort(ranked, ["total_revenue"], False)
    ranked = ranked.reset_index(drop=True)

    window = over(ranked, partition_by)["total_revenue"]
    ranked["revenue_rank"] = window.rank(method="min", ascending=False).astype(int)
    ranked["dense_rank"] = window.rank(method="dense", ascending=False).astype(int)
    ranked["row_number"] = over(ranked, partition_by).cumcount() + 1
    return ranked[RANK_COLUMNS]


# ---------------------------------------------------------------------------
# Running total
# ---------------------------------------------------------------------------

def running_total(transactions: pd.DataFrame, partition_by: str | None = None) -> pd.DataFrame:
    """SUM(amount_paid) OVER (ORDER BY transaction_date ROWS UNBOUNDED PRECEDING).

    With partition_by (e.g. "customer_id") the sum restarts per partition;
    rows stay in date order either way.
    """
    _check_partition(transactions, partition_by)
    if transactions.empty:
        return pd.DataFrame(columns=RUNNING_TOTAL_COLUMNS)

    rows = stable_sort(transactions, ["transaction_date"]).reset_index(drop=True)
    rows["running_total"] = over(rows, partition_by)["amount_paid"].cumsum().round(2)
    return rows[RUNNING_TOTAL_COLUMNS]


# ---------------------------------------------------------------------------
# Previous-period value
# ---------------------------------------------------------------------------

def previous_period_totals(transactions: pd.DataFrame, period: str = "day") -> pd.DataFrame:
    """Totals per day (or month) with LAG/LEAD of the total.

    previous_total is null for the first period, next_total for the last.
    """
    if period not in PERIODS:
        raise ValueError(f"Unknown period: {period!r}. Valid: {list(PERIODS)}")
    if transactions.empty:
        return pd.DataFrame(columns=PERIOD_COLUMNS)

    dates = transactions["transaction_date"]
    key = dates.dt.to_period("M").astype(str) if period == "month" else dates.dt.normalize()

    totals = transactions.assign(period=key).groupby("period", sort=True).agg(
        transaction_count=("transaction_id", "count"),
        total_amount=("amount_paid", "sum"),
    ).reset_index()
    totals["total_amount"] = totals["total_amount"].round(2)

    totals["previous_total"] = totals["total_amount"].shift(1)
    totals["next_total"] = totals["total_amount"].shift(-1)
    totals["change"] = (totals["total_amount"] - totals["previous_total"]).round(2)
    totals["change_pct"] = [
        round(p, 1) if p is not None else None
        for p in map(pct_change, totals["total_amount"], totals["previous_total"])
    ]
    totals["change_pct"] = totals["change_pct"].astype("float64")
    return totals[PERIOD_COLUMNS]


# ---------------------------------------------------------------------------
# Quartiles
# ---------------------------------------------------------------------------

def spend_quartiles(
    customers: pd.DataFrame,
    transactions: pd.DataFrame,
    buckets: int = QUARTILE_BUCKETS,
    partition_by: str | None = None,
) -> pd.DataFrame:
    """NTILE(buckets) OVER (ORDER BY total_spend) per customer.

    Customers without transactions, and transactions without a customer,
    are left out. Bucket 1 holds the lowest spenders.
    """
    if buckets < 1:
        raise ValueError(f"buckets must be >= 1, got {buckets}")
    _check_partition(customers, partition_by)

    tx = transactions.dropna(subset=["customer_id"])
    if tx.empty:
        return pd.DataFrame(columns=QUARTILE_COLUMNS)

    totals = tx.groupby("customer_id", sort=False).agg(
        transaction_count=("transaction_id", "count"),
        total_spend=("amount_paid", "sum"),
    ).reset_index()
    totals["total_spend"] = totals["total_spend"].round(2)

    spend = join_tables(customers[["customer_id", "customer_name", "region"]], totals,
                        on="customer_id", how="inner")
    order = [partition_by, "total_spend"] if partition_by else ["total_spend"]
    spend = stable_sort(spend, order).reset_index(drop=True)

    spend["spend_quartile"] = over(spend, partition_by)["total_spend"].transform(
        lambda s: ntile(len(s), buckets)
    ).astype(int)
    return spend[QUARTILE_COLUMNS]
