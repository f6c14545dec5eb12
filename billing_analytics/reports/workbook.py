"""
Join & Window Workbook — every catalog query on its own styled sheet.
"""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from billing_analytics.data.schemas import PeriodFilter
from billing_analytics.data.store import DataStore
from billing_analytics.excel.writer import ExcelWriter
from billing_analytics.reports.catalog import QUERIES, get_query


def generate_excel(
    store: DataStore,
    output_path: str | Path,
    period: PeriodFilter | None = None,
    names: list[str] | None = None,
) -> Path:
    specs = [get_query(n) for n in names] if names else list(QUERIES.values())
    period_label = period.label if period else "All Time"
    ew = ExcelWriter()

    # Summary
    ws = ew.add_sheet("Summary")
    row = ew.write_title(
        ws, "BILLING ANALYTICS",
        f"Join & Window Report  |  {store.date_range(period)}  |  {period_label}  |  "
        f"Generated {pd.Timestamp.now():%B %d, %Y}",
    )
    row = ew.write_section(ws, row, "DATASET")
    row = ew.write_kpi_row(ws, row, [
        (len(store.customers), "CUSTOMERS", "number"),
        (len(store.services), "SERVICES", "number"),
        (len(store.get_transactions(period)), "TRANSACTIONS", "number"),
        (store.total_billed(period), "TOTAL BILLED", "currency"),
    ])
    row = ew.write_section(ws, row, "QUERY GUIDE")
    ew.write_legend(ws, row, [(spec.title, spec.description) for spec in specs])

    # One sheet per query
    for spec in specs:
        sheet = ew.add_sheet(spec.title)
        ew.write_section(sheet, 1, spec.title)
        ew.write_table(sheet, 3, spec.columns, spec.run(store, period))

    return ew.save(output_path)
