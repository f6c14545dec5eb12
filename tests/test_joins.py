import pandas as pd
import pytest

from billing_analytics.analytics.joins import (
    CUSTOMER_ACTIVITY_COLUMNS,
    DETAIL_COLUMNS,
    PAIR_COLUMNS,
    customer_activity,
    customer_ledger,
    join_tables,
    same_region_pairs,
    service_activity,
    transaction_details,
)


# ---------------------------------------------------------------------------
# Seed dataset
# ---------------------------------------------------------------------------

def test_inner_join_drops_transaction_without_customer(tables):
    rows = transaction_details(tables["customers"], tables["services"], tables["transactions"])
    assert list(rows.columns) == DETAIL_COLUMNS
    assert len(rows) == 13
    assert 1010 not in rows["transaction_id"].tolist()
    assert rows["customer_name"].notna().all()
    assert rows["service_name"].notna().all()


def test_inner_join_keeps_transaction_order(tables):
    rows = transaction_details(tables["customers"], tables["services"], tables["transactions"])
    assert rows["transaction_id"].tolist() == [
        1001, 1002, 1003, 1004, 1005, 1006, 1007, 1008, 1009, 1011, 1012, 1013, 1014,
    ]


def test_left_join_keeps_every_customer(tables):
    rows = customer_activity(tables["customers"], tables["transactions"])
    assert list(rows.columns) == CUSTOMER_ACTIVITY_COLUMNS
    assert len(rows) == 14
    assert set(rows["customer_id"]) == set(tables["customers"]["customer_id"])

    hassan = rows[rows["customer_id"] == 8]
    assert len(hassan) == 1
    assert pd.isna(hassan["transaction_id"].iloc[0])
    assert pd.isna(hassan["amount_paid"].iloc[0])


def test_left_join_groups_rows_by_customer(tables):
    rows = customer_activity(tables["customers"], tables["transactions"])
    alice = rows[rows["customer_id"] == 1]["transaction_id"].tolist()
    assert alice == [1001, 1004, 1012]
    assert rows["customer_id"].tolist()[:3] == [1, 1, 1]


def test_customers_without_transactions(tables):
    rows = customer_activity(tables["customers"], tables["transactions"], unmatched_only=True)
    assert rows["customer_name"].tolist() == ["Hassan Ali"]


def test_right_join_keeps_every_service(tables):
    rows = service_activity(tables["services"], tables["transactions"])
    assert len(rows) == 15
    assert rows["service_id"].tolist() == [
        101, 101, 101, 102, 102, 102, 102, 103, 103, 104, 104, 105, 105, 105, 106,
    ]
    assert rows["transaction_id"].tolist()[:3] == [1001, 1007, 1013]
    roaming = rows.iloc[-1]
    assert roaming["service_name"] == "International Roaming"
    assert pd.isna(roaming["transaction_id"])


def test_services_without_transactions(tables):
    rows = service_activity(tables["services"], tables["transactions"], unmatched_only=True)
    assert rows["service_id"].tolist() == [106]


def test_full_join_has_both_unmatched_sides(tables):
    rows = customer_ledger(tables["customers"], tables["transactions"])
    assert len(rows) == 15

    hassan = rows.iloc[13]
    assert hassan["customer_name"] == "Hassan Ali"
    assert pd.isna(hassan["transaction_id"])

    orphan = rows.iloc[14]
    assert orphan["transaction_id"] == 1010
    assert pd.isna(orphan["customer_id"])
    assert pd.isna(orphan["customer_name"])


@pytest.mark.parametrize("left,right", [("customers", "transactions"), ("services", "transactions")])
def test_full_join_row_count_identity(tables, left, right):
    key = "customer_id" if left == "customers" else "service_id"
    counts = {
        how: len(join_tables(tables[left], tables[right], on=key, how=how))
        for how in ("inner", "left", "right", "outer")
    }
    assert counts["outer"] == counts["left"] + counts["right"] - counts["inner"]


def test_inner_join_bounded_by_inputs(tables):
    rows = transaction_details(tables["customers"], tables["services"], tables["transactions"])
    assert len(rows) <= len(tables["transactions"])
    assert rows["customer_id"].nunique() <= tables["customers"]["customer_id"].nunique()


def test_self_join_pairs_by_region(tables):
    rows = same_region_pairs(tables["customers"])
    assert list(rows.columns) == PAIR_COLUMNS
    assert list(rows.itertuples(index=False, name=None)) == [
        (1, "Alice Mwangi", 2, "Brian Otieno", "East"),
        (3, "Carol Njeri", 5, "Esther Wanjiru", "West"),
        (4, "David Kamau", 7, "Grace Achieng", "North"),
        (6, "Felix Mutua", 8, "Hassan Ali", "South"),
    ]


def test_self_join_with_mirrored_pairs(tables):
    rows = same_region_pairs(tables["customers"], include_mirrored=True)
    assert len(rows) == 8
    assert (rows["customer_a_id"] != rows["customer_b_id"]).all()


# ---------------------------------------------------------------------------
# Hand-built frames
# ---------------------------------------------------------------------------

def test_self_join_small_example():
    customers = pd.DataFrame({
        "customer_id": [1, 2, 3],
        "customer_name": ["A", "B", "C"],
        "region": ["East", "East", "West"],
    })
    pairs = same_region_pairs(customers)
    assert list(pairs.itertuples(index=False, name=None)) == [(1, "A", 2, "B", "East")]

    mirrored = same_region_pairs(customers, include_mirrored=True)
    assert mirrored[["customer_a", "customer_b"]].values.tolist() == [["A", "B"], ["B", "A"]]


def test_self_join_ignores_null_region():
    customers = pd.DataFrame({
        "customer_id": [1, 2],
        "customer_name": ["A", "B"],
        "region": [None, None],
    })
    pairs = same_region_pairs(customers)
    assert pairs.empty
    assert list(pairs.columns) == PAIR_COLUMNS


def test_null_keys_never_match():
    left = pd.DataFrame({"k": pd.array([1, None], dtype="Int64"), "a": ["x", "y"]})
    right = pd.DataFrame({"k": pd.array([None, 1], dtype="Int64"), "b": ["p", "q"]})

    inner = join_tables(left, right, on="k", how="inner")
    assert inner[["a", "b"]].values.tolist() == [["x", "q"]]

    outer = join_tables(left, right, on="k", how="outer")
    assert len(outer) == 3
    assert outer["a"].tolist()[:2] == ["x", "y"]
    assert outer["b"].tolist()[0] == "q"
    assert outer["b"].tolist()[2] == "p"


def test_right_join_orders_by_right_table():
    left = pd.DataFrame({"k": [2, 1, 2], "a": ["l0", "l1", "l2"]})
    right = pd.DataFrame({"k": [1, 2, 3], "b": ["r0", "r1", "r2"]})
    rows = join_tables(left, right, on="k", how="right")
    assert rows["b"].tolist() == ["r0", "r1", "r1", "r2"]
    assert rows["a"].tolist()[:3] == ["l1", "l0", "l2"]
    assert pd.isna(rows["a"].iloc[3])


def test_join_with_no_transactions(tables):
    empty = tables["transactions"].iloc[0:0]
    assert transaction_details(tables["customers"], tables["services"], empty).empty
    assert len(customer_activity(tables["customers"], empty)) == 8
    assert len(service_activity(tables["services"], empty)) == 6
    assert len(customer_ledger(tables["customers"], empty)) == 8


def test_invalid_join_type():
    df = pd.DataFrame({"k": [1]})
    with pytest.raises(ValueError, match="Unknown join type"):
        join_tables(df, df, on="k", how="cross")


def test_inner_join_has_no_unmatched_rows():
    df = pd.DataFrame({"k": [1]})
    with pytest.raises(ValueError):
        join_tables(df, df, on="k", how="inner", unmatched_only=True)
