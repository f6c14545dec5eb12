"""
Query catalog — every named join/window query with its columns and runner.

Shared by the CLI, the API and the workbook report so all three surfaces
present the same results the same way.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

import pandas as pd

from billing_analytics.analytics.joins import (
    customer_activity,
    customer_ledger,
    same_region_pairs,
    service_activity,
    transaction_details,
)
from billing_analytics.analytics.windows import (
    previous_period_totals,
    rank_services,
    running_total,
    spend_quartiles,
)
from billing_analytics.data.schemas import PeriodFilter
from billing_analytics.data.store import DataStore
from billing_analytics.errors import UnknownQueryError
from billing_analytics.excel.writer import ColSpec

Runner = Callable[[DataStore, Optional[PeriodFilter]], pd.DataFrame]


@dataclass(frozen=True)
class QuerySpec:
    name: str
    title: str
    description: str
    columns: list[ColSpec]
    runner: Runner

    def run(self, store: DataStore, period: PeriodFilter | None = None) -> pd.DataFrame:
        return self.runner(store, period)


# ---------------------------------------------------------------------------
# Column layouts
# ---------------------------------------------------------------------------

CUSTOMER_COLS = [
    ("customer_id", "id", "Customer ID"),
    ("customer_name", "text", "Customer"),
    ("region", "text", "Region"),
]
SERVICE_COLS = [
    ("service_id", "id", "Service ID"),
    ("service_name", "text", "Service"),
    ("service_type", "text", "Type"),
    ("monthly_fee", "currency", "Monthly Fee"),
]
CUSTOMER_TXN_COLS = CUSTOMER_COLS + [
    ("transaction_id", "id", "Txn ID"),
    ("service_id", "id", "Service ID"),
    ("transaction_date", "date", "Date"),
    ("amount_paid", "currency", "Amount Paid"),
]
SERVICE_TXN_COLS = SERVICE_COLS + [
    ("transaction_id", "id", "Txn ID"),
    ("customer_id", "id", "Customer ID"),
    ("transaction_date", "date", "Date"),
    ("amount_paid", "currency", "Amount Paid"),
]
DETAIL_COLS = [
    ("transaction_id", "id", "Txn ID"),
    ("transaction_date", "date", "Date"),
    ("customer_name", "text", "Customer"),
    ("region", "text", "Region"),
    ("service_name", "text", "Service"),
    ("service_type", "text", "Type"),
    ("amount_paid", "currency", "Amount Paid"),
]
PAIR_COLS = [
    ("customer_a_id", "id", "ID A"),
    ("customer_a", "text", "Customer A"),
    ("customer_b_id", "id", "ID B"),
    ("customer_b", "text", "Customer B"),
    ("region", "text", "Region"),
]
RANK_COLS = [
    ("revenue_rank", "number", "Rank"),
    ("dense_rank", "number", "Dense Rank"),
    ("row_number", "number", "Row #"),
    ("service_name", "text", "Service"),
    ("service_type", "text", "Type"),
    ("transaction_count", "number", "Transactions"),
    ("total_revenue", "currency", "Total Revenue"),
]
RUNNING_COLS = [
    ("transaction_id", "id", "Txn ID"),
    ("transaction_date", "date", "Date"),
    ("customer_id", "id", "Customer ID"),
    ("service_id", "id", "Service ID"),
    ("amount_paid", "currency", "Amount Paid"),
    ("running_total", "currency", "Running Total"),
]
PERIOD_TAIL_COLS = [
    ("transaction_count", "number", "Transactions"),
    ("total_amount", "currency", "Total"),
    ("previous_total", "currency", "Previous Total"),
    ("next_total", "currency", "Next Total"),
    ("change", "currency", "Change"),
    ("change_pct", "percent", "Change %"),
]
QUARTILE_COLS = [
    ("spend_quartile", "number", "Quartile"),
    ("customer_name", "text", "Customer"),
    ("region", "text", "Region"),
    ("transaction_count", "number", "Transactions"),
    ("total_spend", "currency", "Total Spend"),
]


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

def _txns(store: DataStore, period: PeriodFilter | None) -> pd.DataFrame:
    return store.get_transactions(period)


QUERIES: dict[str, QuerySpec] = {q.name: q for q in [
    QuerySpec(
        "inner_join", "Inner Join",
        "Transactions with their customer and service; rows that do not resolve on both sides are dropped.",
        DETAIL_COLS,
        lambda s, p: transaction_details(s.customers, s.services, _txns(s, p)),
    ),
    QuerySpec(
        "left_join", "Left Join",
        "Every customer with each of their transactions; customers without any show nulls.",
        CUSTOMER_TXN_COLS,
        lambda s, p: customer_activity(s.customers, _txns(s, p)),
    ),
    QuerySpec(
        "customers_without_transactions", "Customers Without Transactions",
        "Left join filtered to customers that have no transactions.",
        CUSTOMER_COLS,
        lambda s, p: customer_activity(s.customers, _txns(s, p), unmatched_only=True),
    ),
    QuerySpec(
        "right_join", "Right Join",
        "Every service with each of its transactions; services never purchased show nulls.",
        SERVICE_TXN_COLS,
        lambda s, p: service_activity(s.services, _txns(s, p)),
    ),
    QuerySpec(
        "services_without_transactions", "Services Without Transactions",
        "Right join filtered to services that were never purchased.",
        SERVICE_COLS,
        lambda s, p: service_activity(s.services, _txns(s, p), unmatched_only=True),
    ),
    QuerySpec(
        "full_join", "Full Join",
        "Every customer and every transaction, null-padded on whichever side has no match.",
        CUSTOMER_TXN_COLS,
        lambda s, p: customer_ledger(s.customers, _txns(s, p)),
    ),
    QuerySpec(
        "self_join", "Self Join",
        "Pairs of different customers registered in the same region.",
        PAIR_COLS,
        lambda s, p: same_region_pairs(s.customers),
    ),
    QuerySpec(
        "rank", "Service Revenue Rank",
        "Services ranked by total revenue; tied services share a rank.",
        RANK_COLS,
        lambda s, p: rank_services(s.services, _txns(s, p)),
    ),
    QuerySpec(
        "running_total", "Running Total",
        "Transactions in date order with the cumulative amount billed so far.",
        RUNNING_COLS,
        lambda s, p: running_total(_txns(s, p)),
    ),
    QuerySpec(
        "previous_period", "Previous Day Totals",
        "Daily totals next to the previous and next day's totals.",
        [("period", "date", "Date")] + PERIOD_TAIL_COLS,
        lambda s, p: previous_period_totals(_txns(s, p), period="day"),
    ),
    QuerySpec(
        "monthly_totals", "Monthly Totals",
        "Monthly totals next to the previous and next month's totals.",
        [("period", "text", "Month")] + PERIOD_TAIL_COLS,
        lambda s, p: previous_period_totals(_txns(s, p), period="month"),
    ),
    QuerySpec(
        "quartiles", "Spend Quartiles",
        "Customers split into four spend buckets, lowest spenders in bucket 1.",
        QUARTILE_COLS,
        lambda s, p: spend_quartiles(s.customers, _txns(s, p)),
    ),
]}


def get_query(name: str) -> QuerySpec:
    try:
        return QUERIES[name]
    except KeyError:
        raise UnknownQueryError(name, list(QUERIES)) from None


def run_query(store: DataStore, name: str, period: PeriodFilter | None = None) -> pd.DataFrame:
    """Run a catalog query by name."""
    return get_query(name).run(store, period)
