import pandas as pd
import pytest

from billing_analytics.data.store import DataStore
from billing_analytics.data.validate import validate_tables
from billing_analytics.errors import (
    BillingDataError,
    DuplicateKeyError,
    MissingReferenceError,
    SchemaError,
)

CUSTOMERS = [(1, "Alice", "East", "2023-01-01"), (2, "Brian", "West", "2023-01-02")]
SERVICES = [(10, "Voice", "Voice", 10), (20, "Data", "Data", 35)]


def test_seed_tables_pass_with_one_warning(tables):
    warnings = validate_tables(tables)
    assert warnings == ["transactions: 1 row(s) without a customer_id"]


def test_unknown_customer_aborts_load(make_tables):
    tables = make_tables(CUSTOMERS, SERVICES, [
        (1, 1, 10, "2024-01-01", 10),
        (2, 99, 10, "2024-01-02", 10),
        (3, 42, 20, "2024-01-03", 35),
    ])
    with pytest.raises(MissingReferenceError) as info:
        validate_tables(tables)

    err = info.value
    assert (err.table, err.column, err.referenced_table) == ("transactions", "customer_id", "customers")
    assert err.missing == [42, 99]
    assert "customer_id" in str(err)
    assert isinstance(err, BillingDataError)


def test_unknown_service_aborts_load(make_tables):
    tables = make_tables(CUSTOMERS, SERVICES, [(1, 1, 30, "2024-01-01", 10)])
    with pytest.raises(MissingReferenceError, match="services"):
        validate_tables(tables)


def test_missing_reference_message_truncates_long_lists():
    err = MissingReferenceError("transactions", "customer_id", "customers", list(range(1, 13)))
    assert str(err).endswith("(+2 more)")


def test_store_load_keeps_nothing_on_failure(make_tables):
    store = DataStore()
    tables = make_tables(CUSTOMERS, SERVICES, [(1, 7, 10, "2024-01-01", 10)])
    with pytest.raises(MissingReferenceError):
        store.set_tables(tables)
    assert not store.is_loaded
    assert store.transactions.empty


def test_null_customer_is_allowed(make_tables):
    tables = make_tables(CUSTOMERS, SERVICES, [(1, None, 10, "2024-01-01", 10)])
    assert len(validate_tables(tables)) == 1


def test_duplicate_primary_key(make_tables):
    tables = make_tables(CUSTOMERS + [(2, "Again", "East", "2023-01-03")], SERVICES)
    with pytest.raises(DuplicateKeyError, match="customer_id"):
        validate_tables(tables)


def test_null_primary_key(make_tables):
    tables = make_tables(CUSTOMERS, SERVICES + [(None, "Ghost", "Data", 1)])
    with pytest.raises(DuplicateKeyError, match="null primary key"):
        validate_tables(tables)


def test_missing_column(make_tables):
    tables = make_tables(CUSTOMERS, SERVICES)
    tables["customers"] = tables["customers"].drop(columns=["region"])
    with pytest.raises(SchemaError, match="region"):
        validate_tables(tables)


def test_unparsable_date(make_tables):
    tables = make_tables(CUSTOMERS, SERVICES, [(1, 1, 10, "not-a-date", 10)])
    with pytest.raises(SchemaError, match="transaction_date"):
        validate_tables(tables)


def test_unparsable_amount(make_tables):
    tables = make_tables(CUSTOMERS, SERVICES, [(1, 1, 10, "2024-01-01", "ten")])
    with pytest.raises(SchemaError, match="amount_paid"):
        validate_tables(tables)


def test_negative_amount_is_a_warning(make_tables, capsys):
    tables = make_tables(CUSTOMERS, SERVICES, [(1, 1, 10, "2024-01-01", -5)])
    warnings = validate_tables(tables)
    assert warnings == ["transactions: 1 negative amount(s) (refunds) in `amount_paid`"]
    assert "[WARNING]" in capsys.readouterr().out


def test_missing_table():
    with pytest.raises(SchemaError, match="Missing required table"):
        validate_tables({"customers": pd.DataFrame()})
