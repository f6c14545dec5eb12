"""
Join analytics — inner, left, right, full and self joins over the billing tables.

Every join returns rows in a deterministic order: left-table load order,
then right-table load order (right joins lead with the right table).
A null key never matches anything, as in SQL.
"""
from __future__ import annotations

import numpy as np
import pandas as pd

from billing_analytics.analytics.common import stable_sort

JOIN_TYPES = ("inner", "left", "right", "outer")

DETAIL_COLUMNS = [
    "transaction_id", "transaction_date", "customer_id", "customer_name", "region",
    "service_id", "service_name", "service_type", "amount_paid",
]
CUSTOMER_ACTIVITY_COLUMNS = [
    "customer_id", "customer_name", "region",
    "transaction_id", "service_id", "transaction_date", "amount_paid",
]
SERVICE_ACTIVITY_COLUMNS = [
    "service_id", "service_name", "service_type", "monthly_fee",
    "transaction_id", "customer_id", "transaction_date", "amount_paid",
]
PAIR_COLUMNS = ["customer_a_id", "customer_a", "customer_b_id", "customer_b", "region"]


def _null_padded(df: pd.DataFrame, like: pd.DataFrame) -> pd.DataFrame:
    """df laid out with like's columns; columns df lacks are all-null in like's dtypes."""
    cols = {}
    for col in like.columns:
        if col in df.columns:
            cols[col] = df[col]
        else:
            dtype = like[col].dtype
            if isinstance(dtype, np.dtype) and dtype.kind in "iub":
                dtype = np.dtype("float64")     # numpy ints/bools cannot hold NaN
            cols[col] = pd.Series(np.nan if dtype.kind == "f" else None, index=df.index, dtype=dtype)
    return pd.DataFrame(cols, index=df.index)


def join_tables(
    left: pd.DataFrame,
    right: pd.DataFrame,
    on: str,
    how: str = "inner",
    unmatched_only: bool = False,
    suffixes: tuple[str, str] = ("", "_right"),
) -> pd.DataFrame:
    """SQL-style join of two frames on a single key column.

    unmatched_only keeps only the rows that found no partner: left-only rows
    for a left join, right-only rows for a right join, either for a full join.
    """
    if how not in JOIN_TYPES:
        raise ValueError(f"Unknown join type: {how!r}. Valid: {list(JOIN_TYPES)}")
    if unmatched_only and how == "inner":
        raise ValueError("An inner join has no unmatched rows")

    left = left.assign(_left_pos=np.arange(len(left)))
    right = right.assign(_right_pos=np.arange(len(right)))
    left_null = left[on].isna()
    right_null = right[on].isna()

    joined = left[~left_null].merge(
        right[~right_null], on=on, how=how, suffixes=suffixes, indicator=True,
    )
    joined["_merge"] = joined["_merge"].astype(str)

    # Null keys never match; they survive only on the preserved side
    extras = []
    if how in ("left", "outer") and left_null.any():
        extras.append(_null_padded(left[left_null].assign(_merge="left_only"), joined))
    if how in ("right", "outer") and right_null.any():
        extras.append(_null_padded(right[right_null].assign(_merge="right_only"), joined))
    if extras:
        joined = pd.concat([joined, *extras], ignore_index=True)

    if unmatched_only:
        if how == "left":
            joined = joined[joined["_merge"] == "left_only"]
        elif how == "right":
            joined = joined[joined["_merge"] == "right_only"]
        else:
            joined = joined[joined["_merge"] != "both"]

    order = ["_right_pos", "_left_pos"] if how == "right" else ["_left_pos", "_right_pos"]
    joined = stable_sort(joined, order)
    return joined.drop(columns=["_left_pos", "_right_pos", "_merge"]).reset_index(drop=True)


# ---------------------------------------------------------------------------
# Billing joins
# ---------------------------------------------------------------------------

def transaction_details(
    customers: pd.DataFrame,
    services: pd.DataFrame,
    transactions: pd.DataFrame,
) -> pd.DataFrame:
    """INNER JOIN: transactions whose customer and service both resolve."""
    rows = join_tables(transactions, customers, on="customer_id", how="inner")
    rows = join_tables(rows, services, on="service_id", how="inner")
    return rows[DETAIL_COLUMNS]


def customer_activity(
    customers: pd.DataFrame,
    transactions: pd.DataFrame,
    unmatched_only: bool = False,
) -> pd.DataFrame:
    """LEFT JOIN: every customer, with their transactions or nulls.

    unmatched_only=True lists only customers without transactions.
    """
    rows = join_tables(customers, transactions, on="customer_id", how="left",
                       unmatched_only=unmatched_only)
    return rows[CUSTOMER_ACTIVITY_COLUMNS]


def service_activity(
    services: pd.DataFrame,
    transactions: pd.DataFrame,
    unmatched_only: bool = False,
) -> pd.DataFrame:
    """RIGHT JOIN (transactions → services): every service, with its transactions or nulls."""
    rows = join_tables(transactions, services, on="service_id", how="right",
                       unmatched_only=unmatched_only)
    return rows[SERVICE_ACTIVITY_COLUMNS]


def customer_ledger(customers: pd.DataFrame, transactions: pd.DataFrame) -> pd.DataFrame:
    """FULL OUTER JOIN: every customer and every transaction, null-padded where unmatched."""
    rows = join_tables(customers, transactions, on="customer_id", how="outer")
    return rows[CUSTOMER_ACTIVITY_COLUMNS]


def same_region_pairs(customers: pd.DataFrame, include_mirrored: bool = False) -> pd.DataFrame:
    """SELF JOIN: pairs of different customers in the same region.

    Each pair is emitted once with the lower customer_id first, unless
    include_mirrored is set, in which case (B, A) is emitted as well.
    """
    base = customers[["customer_id", "customer_name", "region"]].assign(_pos=np.arange(len(customers)))
    base = base[base["region"].notna()]
    if base.empty:
        return pd.DataFrame(columns=PAIR_COLUMNS)

    pairs = base.merge(base, on="region", suffixes=("_a", "_b"))
    pairs = pairs[pairs["customer_id_a"] != pairs["customer_id_b"]]
    if not include_mirrored:
        pairs = pairs[pairs["customer_id_a"] < pairs["customer_id_b"]]

    pairs = stable_sort(pairs, ["_pos_a", "_pos_b"])
    pairs = pairs.rename(columns={
        "customer_id_a": "customer_a_id",
        "customer_name_a": "customer_a",
        "customer_id_b": "customer_b_id",
        "customer_name_b": "customer_b",
    })
    return pairs[PAIR_COLUMNS].reset_index(drop=True)
