"""
CSV discovery, loading, and deduplication for the billing tables.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from billing_analytics.config import DATA_FOLDER, TABLE_CONFIG
from billing_analytics.data.normalize import normalize_table
from billing_analytics.errors import SchemaError


# ---------------------------------------------------------------------------
# CSV discovery
# ---------------------------------------------------------------------------

def discover_table_files(data_dir: Path, table: str) -> list[Path]:
    """All CSVs belonging to a logical table, matched by prefix: <prefix>*.csv"""
    if not data_dir.exists():
        return []
    prefix = TABLE_CONFIG[table]["file_prefix"]
    return sorted(p for p in data_dir.glob(f"{prefix}*.csv") if p.is_file())


# ---------------------------------------------------------------------------
# Loading & dedup
# ---------------------------------------------------------------------------

def load_single_csv(filepath: Path, table: str) -> pd.DataFrame:
    """Load one CSV and normalise columns and types."""
    try:
        df = pd.read_csv(filepath)
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise SchemaError(f"{table}: failed to read {filepath.name}: {exc}") from exc
    print(f"  Loaded {table}: {filepath.name} ({len(df):,} rows)")
    return normalize_table(df, table)


def load_table(data_dir: Path, table: str) -> pd.DataFrame | None:
    """Concatenate every file of a logical table; exact duplicate rows are dropped.

    Returns None when the table has no files.
    """
    files = discover_table_files(data_dir, table)
    if not files:
        return None

    chunks = [load_single_csv(f, table) for f in files]
    df = pd.concat(chunks, ignore_index=True) if len(chunks) > 1 else chunks[0]

    pre = len(df)
    df = df.drop_duplicates(keep="first").reset_index(drop=True)
    dropped = pre - len(df)
    if len(files) > 1 or dropped:
        print(f"  {table}: combined {len(files)} file(s) → {len(df):,} rows (dedup -{dropped:,})")
    return df


def load_tables(data_dir: Path = DATA_FOLDER) -> dict[str, pd.DataFrame] | None:
    """Load all three tables from data_dir.

    Returns None when no table has any file (caller decides on a fallback).
    Raises SchemaError when only some of the tables are present.
    """
    tables = {}
    for table in TABLE_CONFIG:
        df = load_table(data_dir, table)
        if df is not None:
            tables[table] = df

    if not tables:
        return None

    missing = [t for t in TABLE_CONFIG if t not in tables]
    if missing:
        raise SchemaError(f"Missing table file(s) in {data_dir}: {missing}")
    return tables


def write_tables(tables: dict[str, pd.DataFrame], out_dir: Path) -> list[Path]:
    """Write tables as <prefix>.csv files that load_tables() reads back."""
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for table, df in tables.items():
        path = out_dir / f"{TABLE_CONFIG[table]['file_prefix']}.csv"
        out = df.copy()
        for col in TABLE_CONFIG[table]["date_cols"]:
            out[col] = out[col].dt.strftime("%Y-%m-%d")
        out.to_csv(path, index=False)
        written.append(path)
    return written
