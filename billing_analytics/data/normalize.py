"""
Column mapping and type parsing for the three billing tables.
"""
from __future__ import annotations

import pandas as pd

from billing_analytics.config import COLUMN_ALIASES, TABLE_CONFIG
from billing_analytics.errors import SchemaError


# ---------------------------------------------------------------------------
# Column normalisation
# ---------------------------------------------------------------------------

def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Strip header whitespace and rename exported aliases to internal names."""
    df = df.rename(columns=lambda c: str(c).strip())
    return df.rename(columns=COLUMN_ALIASES)


def parse_currency(series: pd.Series) -> pd.Series:
    """'$1,050.00' / Decimal / float → float64. Unparseable values become NaN."""
    cleaned = series.astype(str).str.replace(r"[\$,\s]", "", regex=True)
    return pd.to_numeric(cleaned, errors="coerce").astype("float64")


def parse_ids(series: pd.Series, name: str) -> pd.Series:
    """Whole-number ids → nullable Int64. Blank cells become <NA>.

    A value that is present but not a whole number (C99, 1.5) raises
    SchemaError instead of turning into a null reference.
    """
    numeric = pd.to_numeric(series, errors="coerce")
    present = series.notna() & series.astype(str).str.strip().ne("")
    bad = present & (numeric.isna() | (numeric % 1 != 0))
    if bad.any():
        values = series[bad].astype(str).unique().tolist()
        more = f" (+{len(values) - 10} more)" if len(values) > 10 else ""
        raise SchemaError(f"{name}: unparsable id value(s): {values[:10]}{more}")
    return numeric.astype("Int64")


def normalize_table(df: pd.DataFrame, table: str) -> pd.DataFrame:
    """Rename columns and parse ids, dates, currency and labels for one table.

    Missing columns are left missing; validation reports them.
    """
    cfg = TABLE_CONFIG[table]
    df = normalize_columns(df.copy())

    for col in cfg["id_cols"]:
        if col in df.columns:
            df[col] = parse_ids(df[col], f"{table}.{col}")

    for col in cfg["date_cols"]:
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], errors="coerce").dt.normalize()

    for col in cfg["currency_cols"]:
        if col in df.columns:
            df[col] = parse_currency(df[col])

    # Clean strings
    for col in df.columns:
        if col not in cfg["id_cols"] and pd.api.types.is_string_dtype(df[col]):
            df[col] = df[col].str.strip()

    ordered = [c for c in cfg["columns"] if c in df.columns]
    extra = [c for c in df.columns if c not in ordered]
    return df[ordered + extra].reset_index(drop=True)
