"""Data loading, validation, and the in-memory table store."""
from .loader import discover_table_files, load_tables, write_tables
from .store import DataStore
from .schemas import Customer, Service, Transaction, PeriodFilter, PeriodType
from .seed import seed_tables
from .validate import validate_tables
