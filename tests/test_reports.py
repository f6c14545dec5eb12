import datetime as dt

import pandas as pd
import pytest
from openpyxl import load_workbook

from billing_analytics.errors import UnknownQueryError
from billing_analytics.reports.catalog import QUERIES, get_query, run_query
from billing_analytics.reports.text import format_value, render_report, render_table
from billing_analytics.reports.workbook import generate_excel

COLUMNS = [
    ("customer_id", "id", "ID"),
    ("customer_name", "text", "Customer"),
    ("amount_paid", "currency", "Amount"),
]


# ---------------------------------------------------------------------------
# Text formatting
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("value,col_type,expected", [
    (None, "text", "NULL"),
    (float("nan"), "currency", "NULL"),
    (pd.NA, "id", "NULL"),
    (1050.5, "currency", "1,050.50"),
    (1234, "number", "1,234"),
    (12.345, "percent", "12.3%"),
    (pd.Timestamp("2024-03-05"), "date", "2024-03-05"),
    (dt.date(2024, 3, 5), "date", "2024-03-05"),
    (7.0, "id", "7"),
])
def test_format_value(value, col_type, expected):
    assert format_value(value, col_type) == expected


def test_render_table_alignment_and_footer():
    text = render_table(COLUMNS, [
        {"customer_id": 1, "customer_name": "Alice", "amount_paid": 10},
        {"customer_id": 12, "customer_name": "Bo", "amount_paid": None},
    ])
    lines = text.splitlines()
    assert lines[0] == "ID  Customer  Amount"
    assert lines[1] == "--  --------  ------"
    assert lines[2] == " 1  Alice      10.00"
    assert lines[3] == "12  Bo          NULL"
    assert lines[-1] == "(2 rows)"


def test_render_table_empty_and_single_row():
    assert render_table(COLUMNS, []).splitlines()[-1] == "(0 rows)"
    one = render_table(COLUMNS, pd.DataFrame([{"customer_id": 1, "customer_name": "A", "amount_paid": 1}]))
    assert one.splitlines()[-1] == "(1 row)"


def test_render_table_truncates_long_values():
    columns = [("customer_name", "text", "Customer")]
    rows = [{"customer_name": "x" * 60}, {"customer_name": "y" * 10}]
    lines = render_table(columns, rows, max_width=10).splitlines()
    assert lines[2] == "x" * 9 + "…"
    assert lines[3] == "y" * 10


def test_render_table_without_width_limit():
    text = render_table([("customer_name", "text", "Customer")], [{"customer_name": "x" * 60}], max_width=None)
    assert text.splitlines()[2] == "x" * 60


def test_render_report():
    out = render_report("Billing", "All Time", [("RANK", "body")])
    lines = out.splitlines()
    assert lines[0] == "=" * 70
    assert lines[1] == "  BILLING"
    assert lines[-2:] == ["RANK", "body"]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

def test_catalog_names():
    assert list(QUERIES) == [
        "inner_join", "left_join", "customers_without_transactions",
        "right_join", "services_without_transactions", "full_join", "self_join",
        "rank", "running_total", "previous_period", "monthly_totals", "quartiles",
    ]


@pytest.mark.parametrize("name", list(QUERIES))
def test_every_query_provides_its_columns(seed_store, name):
    spec = get_query(name)
    df = spec.run(seed_store)
    assert not df.empty
    for key, _, _ in spec.columns:
        assert key in df.columns
    footer = render_table(spec.columns, df).splitlines()[-1]
    assert footer in (f"({len(df)} rows)", "(1 row)")


def test_run_query_row_counts(seed_store):
    assert len(run_query(seed_store, "inner_join")) == 13
    assert len(run_query(seed_store, "left_join")) == 14
    assert len(run_query(seed_store, "right_join")) == 15
    assert len(run_query(seed_store, "full_join")) == 15
    assert len(run_query(seed_store, "self_join")) == 4


def test_unknown_query():
    with pytest.raises(UnknownQueryError, match="Valid"):
        get_query("cross_join")


# ---------------------------------------------------------------------------
# Workbook
# ---------------------------------------------------------------------------

def test_generate_excel_writes_every_query(seed_store, tmp_path):
    path = generate_excel(seed_store, tmp_path / "out" / "report.xlsx")
    assert path.exists()

    wb = load_workbook(path)
    assert wb.sheetnames[0] == "Summary"
    assert wb.sheetnames[1:] == [spec.title for spec in QUERIES.values()]

    summary = wb["Summary"]
    assert summary["A1"].value == "BILLING ANALYTICS"

    rank = wb["Service Revenue Rank"]
    assert rank.cell(row=3, column=1).value == "Rank"
    assert rank.cell(row=4, column=4).value == "Unlimited Data"


def test_generate_excel_selected_queries_and_nulls(seed_store, tmp_path):
    path = generate_excel(seed_store, tmp_path / "report.xlsx", names=["full_join"])
    wb = load_workbook(path)
    assert wb.sheetnames == ["Summary", "Full Join"]

    sheet = wb["Full Join"]
    last = sheet.max_row
    assert sheet.cell(row=last, column=4).value == 1010
    assert sheet.cell(row=last, column=1).value is None
