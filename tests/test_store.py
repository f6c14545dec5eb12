import datetime as dt

import pytest

from billing_analytics.data.schemas import PeriodFilter, PeriodType
from billing_analytics.reports.catalog import run_query


class TestPeriodFilter:
    def test_month(self):
        p = PeriodFilter(PeriodType.MONTH, year=2024, month=2)
        assert p.resolve() == (dt.date(2024, 2, 1), dt.date(2024, 2, 29))
        assert p.label == "February 2024"

    def test_quarter(self):
        p = PeriodFilter(PeriodType.QUARTER, year=2024, quarter=4)
        assert p.resolve() == (dt.date(2024, 10, 1), dt.date(2024, 12, 31))
        assert p.label == "Q4 2024"

    def test_year_and_all(self):
        assert PeriodFilter(PeriodType.YEAR, year=2024).label == "2024"
        assert PeriodFilter().resolve() == (None, None)
        assert PeriodFilter().label == "All Time"

    def test_custom(self):
        p = PeriodFilter(PeriodType.CUSTOM, start_date=dt.date(2024, 1, 10))
        assert p.resolve() == (dt.date(2024, 1, 10), None)
        assert p.label == "2024-01-10 to ?"


class TestStoreFiltering:
    def test_month_filter(self, seed_store):
        df = seed_store.get_transactions(PeriodFilter(PeriodType.MONTH, year=2024, month=3))
        assert df["transaction_id"].tolist() == [1009, 1010, 1011, 1012, 1013, 1014]

    def test_quarter_filter_keeps_everything(self, seed_store):
        df = seed_store.get_transactions(PeriodFilter(PeriodType.QUARTER, year=2024, quarter=1))
        assert len(df) == 14

    def test_custom_range_is_inclusive(self, seed_store):
        period = PeriodFilter(PeriodType.CUSTOM, start_date=dt.date(2024, 1, 12), end_date=dt.date(2024, 2, 2))
        df = seed_store.get_transactions(period)
        assert df["transaction_id"].tolist() == [1003, 1004, 1005, 1006]

    def test_year_without_data(self, seed_store):
        period = PeriodFilter(PeriodType.YEAR, year=2023)
        assert seed_store.get_transactions(period).empty
        assert seed_store.date_range(period) == "N/A"
        assert seed_store.total_billed(period) == 0.0

    def test_filter_does_not_mutate_store(self, seed_store):
        seed_store.get_transactions(PeriodFilter(PeriodType.MONTH, year=2024, month=1))
        assert len(seed_store.transactions) == 14

    def test_metadata(self, seed_store):
        assert seed_store.source == "seed"
        assert seed_store.regions() == ["East", "North", "South", "West"]
        assert seed_store.service_types() == ["Broadband", "Bundle", "Data", "Messaging", "Roaming", "Voice"]
        assert seed_store.date_range() == "2024-01-05 to 2024-03-25"
        assert seed_store.total_billed() == 410.0


class TestPeriodQueries:
    def test_running_total_restarts_with_period(self, seed_store):
        march = PeriodFilter(PeriodType.MONTH, year=2024, month=3)
        rows = run_query(seed_store, "running_total", march)
        assert rows["running_total"].iloc[-1] == pytest.approx(175.0)

    def test_empty_period_gives_empty_window_results(self, seed_store):
        period = PeriodFilter(PeriodType.YEAR, year=2023)
        for name in ("inner_join", "rank", "running_total", "previous_period", "quartiles"):
            assert run_query(seed_store, name, period).empty

    def test_empty_period_left_join_shows_all_customers(self, seed_store):
        period = PeriodFilter(PeriodType.YEAR, year=2023)
        rows = run_query(seed_store, "customers_without_transactions", period)
        assert len(rows) == 8
