"""
Safe math and window helpers used across all analytics modules.
"""
from __future__ import annotations

import datetime as dt
import math

import numpy as np
import pandas as pd


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide safely, returning default if denominator is zero or NaN."""
    if denominator == 0 or pd.isna(denominator):
        return default
    result = numerator / denominator
    return default if pd.isna(result) else result


def pct_change(current: float, previous: float) -> float | None:
    """Percentage change from previous to current. Returns None if previous is 0 or missing."""
    if pd.isna(previous) or previous == 0 or pd.isna(current):
        return None
    return (current - previous) / abs(previous) * 100


def over(df: pd.DataFrame, partition_by: str | None = None):
    """Group rows into window partitions, keeping row order.

    With no partition column the whole frame is one partition.
    Null partition keys form their own partition, as in SQL.
    """
    if partition_by is None:
        return df.groupby(lambda _: 0, sort=False)
    return df.groupby(partition_by, sort=False, dropna=False)


def stable_sort(df: pd.DataFrame, by: list[str], ascending: list[bool] | bool = True) -> pd.DataFrame:
    """Sort with insertion order as the final tie-break."""
    return df.sort_values(by, ascending=ascending, kind="mergesort", na_position="last")


def ntile(n: int, buckets: int) -> np.ndarray:
    """Bucket numbers (1-based) for n ordered rows, like SQL NTILE(buckets).

    Bucket sizes differ by at most one; the first n % buckets buckets
    take one extra row.
    """
    if buckets < 1:
        raise ValueError(f"buckets must be >= 1, got {buckets}")
    base, extra = divmod(n, buckets)
    sizes = [base + 1 if i < extra else base for i in range(buckets)]
    return np.repeat(np.arange(1, buckets + 1), sizes)


def sanitize_for_json(obj):
    """Recursively convert numpy/pandas types to native Python for JSON serialization.

    Missing values (NaN, NaT, pd.NA) become None; dates become ISO strings.
    """
    if isinstance(obj, dict):
        return {str(k): sanitize_for_json(v) for k, v in obj.items() if k is not None}
    if isinstance(obj, (list, tuple)):
        return [sanitize_for_json(v) for v in obj]
    if isinstance(obj, np.ndarray):
        return sanitize_for_json(obj.tolist())
    if pd.api.types.is_scalar(obj) and pd.isna(obj):
        return None
    if isinstance(obj, pd.Timestamp):
        return obj.date().isoformat()
    if isinstance(obj, (dt.date, dt.datetime)):
        return obj.isoformat()
    if isinstance(obj, pd.Period):
        return str(obj)
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, (np.floating, float)):
        v = float(obj)
        return None if (math.isnan(v) or math.isinf(v)) else v
    return obj
