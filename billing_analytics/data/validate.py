"""
Load-time integrity checks for the billing tables.

Structural problems and broken references abort the load by raising;
suspicious-but-legal data is reported as a warning.
"""
from __future__ import annotations

import pandas as pd

from billing_analytics.config import TABLE_CONFIG
from billing_analytics.errors import DuplicateKeyError, MissingReferenceError, SchemaError


def log_warning(message: str, warnings: list[str]) -> None:
    print(f"[WARNING] {message}")
    warnings.append(message)


# ------------------------------------------------------------
# BASE VALIDATIONS (ALL TABLES)
# ------------------------------------------------------------

def validate_columns(df: pd.DataFrame, table: str) -> None:
    missing = [c for c in TABLE_CONFIG[table]["columns"] if c not in df.columns]
    if missing:
        raise SchemaError(f"{table}: missing required column(s): {missing}")

    duplicated = df.columns[df.columns.duplicated()].tolist()
    if duplicated:
        raise SchemaError(f"{table}: duplicate column names detected: {duplicated}")


def validate_primary_key(df: pd.DataFrame, table: str) -> None:
    """Primary key must be present and unique."""
    pk = TABLE_CONFIG[table]["primary_key"]

    null_count = int(df[pk].isna().sum())
    if null_count:
        raise DuplicateKeyError(f"{table}: {null_count} row(s) with null primary key `{pk}`")

    dupes = df.loc[df[pk].duplicated(), pk].unique().tolist()
    if dupes:
        raise DuplicateKeyError(f"{table}: duplicated primary key value(s) in `{pk}`: {dupes}")


def validate_required_values(df: pd.DataFrame, table: str) -> None:
    """Dates and amounts must be present and parseable."""
    cfg = TABLE_CONFIG[table]
    for col in cfg["date_cols"]:
        bad = int(df[col].isna().sum())
        if bad:
            raise SchemaError(f"{table}: {bad} missing or unparsable date value(s) in `{col}`")
    for col in cfg["currency_cols"]:
        bad = int(df[col].isna().sum())
        if bad:
            raise SchemaError(f"{table}: {bad} missing or unparsable amount(s) in `{col}`")


# ------------------------------------------------------------
# CROSS-TABLE VALIDATIONS
# ------------------------------------------------------------

def validate_references(tables: dict[str, pd.DataFrame]) -> None:
    """Every non-null foreign key must resolve to an existing parent row."""
    for table, cfg in TABLE_CONFIG.items():
        df = tables[table]
        for col, (ref_table, ref_key) in cfg["references"].items():
            keys = df[col].dropna()
            known = set(tables[ref_table][ref_key].dropna().tolist())
            orphans = keys[~keys.isin(known)]
            if not orphans.empty:
                missing = sorted(int(v) for v in orphans.unique())
                raise MissingReferenceError(table, col, ref_table, missing)


# ------------------------------------------------------------
# MAIN ENTRY
# ------------------------------------------------------------

def validate_tables(tables: dict[str, pd.DataFrame]) -> list[str]:
    """Run every check. Raises on the first fatal problem, returns warnings."""
    warnings: list[str] = []

    missing_tables = [t for t in TABLE_CONFIG if t not in tables]
    if missing_tables:
        raise SchemaError(f"Missing required table(s): {missing_tables}")

    for table in TABLE_CONFIG:
        df = tables[table]
        validate_columns(df, table)
        validate_primary_key(df, table)
        validate_required_values(df, table)

    validate_references(tables)

    transactions = tables["transactions"]
    negative = int((transactions["amount_paid"] < 0).sum())
    if negative:
        log_warning(f"transactions: {negative} negative amount(s) (refunds) in `amount_paid`", warnings)

    unassigned = int(transactions["customer_id"].isna().sum())
    if unassigned:
        log_warning(f"transactions: {unassigned} row(s) without a customer_id", warnings)

    return warnings
