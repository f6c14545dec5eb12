"""
Billing Analytics — Configuration: paths, table layout, column aliases.
"""
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths — override with BILLING_DATA_DIR env var
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("BILLING_DATA_DIR", str(Path.cwd() / "data")))
DATA_FOLDER = _data_dir
REPORTS_FOLDER = _data_dir / "reports"

# ---------------------------------------------------------------------------
# Table layout — file prefix, keys, typed columns, foreign keys
# ---------------------------------------------------------------------------
TABLE_CONFIG = {
    "customers": {
        "file_prefix": "customers",
        "primary_key": "customer_id",
        "columns": ["customer_id", "customer_name", "region", "registration_date"],
        "id_cols": ["customer_id"],
        "date_cols": ["registration_date"],
        "currency_cols": [],
        "references": {},
    },
    "services": {
        "file_prefix": "services",
        "primary_key": "service_id",
        "columns": ["service_id", "service_name", "service_type", "monthly_fee"],
        "id_cols": ["service_id"],
        "date_cols": [],
        "currency_cols": ["monthly_fee"],
        "references": {},
    },
    "transactions": {
        "file_prefix": "transactions",
        "primary_key": "transaction_id",
        "columns": ["transaction_id", "customer_id", "service_id", "transaction_date", "amount_paid"],
        "id_cols": ["transaction_id", "customer_id", "service_id"],
        "date_cols": ["transaction_date"],
        "currency_cols": ["amount_paid"],
        # column -> (referenced table, referenced key)
        "references": {
            "customer_id": ("customers", "customer_id"),
            "service_id": ("services", "service_id"),
        },
    },
}

# ---------------------------------------------------------------------------
# Header aliases seen in exported CSVs → internal names
# ---------------------------------------------------------------------------
COLUMN_ALIASES = {
    "Customer ID": "customer_id",
    "CustomerID": "customer_id",
    "Customer Name": "customer_name",
    "Name": "customer_name",
    "Region": "region",
    "Registration Date": "registration_date",
    "Service ID": "service_id",
    "ServiceID": "service_id",
    "Service Name": "service_name",
    "Service Type": "service_type",
    "Monthly Fee": "monthly_fee",
    "Transaction ID": "transaction_id",
    "TransactionID": "transaction_id",
    "Transaction Date": "transaction_date",
    "Amount Paid": "amount_paid",
    "Amount": "amount_paid",
}

# ---------------------------------------------------------------------------
# Analytics / presentation constants
# ---------------------------------------------------------------------------
QUARTILE_BUCKETS = 4
NULL_DISPLAY = "NULL"
DATE_FORMAT = "%Y-%m-%d"
