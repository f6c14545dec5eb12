"""
Embedded sample dataset, used when the data folder holds no CSV exports.

Shaped to exercise every query: a customer with no transactions (Hassan Ali),
a service with no transactions (International Roaming), a prepaid payment
with no customer (1010), two services tied on revenue (Unlimited Data and
Fiber Home 100 at 135.00) and dates shared by several transactions.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import asdict
from decimal import Decimal

import pandas as pd

from billing_analytics.data.normalize import normalize_table
from billing_analytics.data.schemas import Customer, Service, Transaction

D = dt.date

CUSTOMERS = [
    Customer(1, "Alice Mwangi", "East", D(2023, 1, 15)),
    Customer(2, "Brian Otieno", "East", D(2023, 2, 20)),
    Customer(3, "Carol Njeri", "West", D(2023, 3, 5)),
    Customer(4, "David Kamau", "North", D(2023, 4, 11)),
    Customer(5, "Esther Wanjiru", "West", D(2023, 5, 30)),
    Customer(6, "Felix Mutua", "South", D(2023, 6, 18)),
    Customer(7, "Grace Achieng", "North", D(2023, 7, 22)),
    Customer(8, "Hassan Ali", "South", D(2023, 8, 9)),
]

SERVICES = [
    Service(101, "Basic Voice", "Voice", Decimal("10.00")),
    Service(102, "Unlimited Data", "Data", Decimal("35.00")),
    Service(103, "Family Bundle", "Bundle", Decimal("50.00")),
    Service(104, "SMS Pack", "Messaging", Decimal("5.00")),
    Service(105, "Fiber Home 100", "Broadband", Decimal("45.00")),
    Service(106, "International Roaming", "Roaming", Decimal("20.00")),
]

TRANSACTIONS = [
    Transaction(1001, 1, 101, D(2024, 1, 5), Decimal("10.00")),
    Transaction(1002, 2, 102, D(2024, 1, 5), Decimal("35.00")),
    Transaction(1003, 3, 103, D(2024, 1, 12), Decimal("50.00")),
    Transaction(1004, 1, 102, D(2024, 1, 20), Decimal("35.00")),
    Transaction(1005, 4, 105, D(2024, 2, 2), Decimal("45.00")),
    Transaction(1006, 5, 104, D(2024, 2, 2), Decimal("5.00")),
    Transaction(1007, 2, 101, D(2024, 2, 15), Decimal("10.00")),
    Transaction(1008, 3, 105, D(2024, 2, 28), Decimal("45.00")),
    Transaction(1009, 6, 103, D(2024, 3, 3), Decimal("50.00")),
    Transaction(1010, None, 104, D(2024, 3, 3), Decimal("5.00")),
    Transaction(1011, 7, 102, D(2024, 3, 10), Decimal("35.00")),
    Transaction(1012, 1, 105, D(2024, 3, 18), Decimal("45.00")),
    Transaction(1013, 5, 101, D(2024, 3, 25), Decimal("10.00")),
    Transaction(1014, 4, 102, D(2024, 3, 25), Decimal("30.00")),   # partial payment
]


def _records_frame(records: list) -> pd.DataFrame:
    return pd.DataFrame([asdict(r) for r in records])


def seed_tables() -> dict[str, pd.DataFrame]:
    """Seed records as normalised DataFrames, typed exactly like CSV loads."""
    return {
        "customers": normalize_table(_records_frame(CUSTOMERS), "customers"),
        "services": normalize_table(_records_frame(SERVICES), "services"),
        "transactions": normalize_table(_records_frame(TRANSACTIONS), "transactions"),
    }
