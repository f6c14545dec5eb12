"""Shared fixtures: the seed-backed store and small hand-built tables."""

import pandas as pd
import pytest

from billing_analytics.data.normalize import normalize_table
from billing_analytics.data.seed import seed_tables
from billing_analytics.data.store import DataStore


@pytest.fixture
def tables():
    """Fresh seed tables (safe to mutate)."""
    return seed_tables()


@pytest.fixture
def seed_store():
    return DataStore().load(None)


@pytest.fixture
def make_tables():
    """Build normalised tables from plain row lists."""

    def _make(customers=(), services=(), transactions=()):
        return {
            "customers": normalize_table(pd.DataFrame(
                list(customers),
                columns=["customer_id", "customer_name", "region", "registration_date"],
            ), "customers"),
            "services": normalize_table(pd.DataFrame(
                list(services),
                columns=["service_id", "service_name", "service_type", "monthly_fee"],
            ), "services"),
            "transactions": normalize_table(pd.DataFrame(
                list(transactions),
                columns=["transaction_id", "customer_id", "service_id", "transaction_date", "amount_paid"],
            ), "transactions"),
        }

    return _make


@pytest.fixture
def write_csvs(tmp_path):
    """Write {filename: DataFrame} into a temp data folder and return it."""

    def _write(frames: dict):
        for name, df in frames.items():
            df.to_csv(tmp_path / name, index=False)
        return tmp_path

    return _write
