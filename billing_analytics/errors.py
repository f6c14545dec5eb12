"""
Load-time and lookup errors.
"""
from __future__ import annotations


class BillingDataError(Exception):
    """Base class for anything that aborts loading the billing tables."""


class SchemaError(BillingDataError):
    """A table file or required column is missing, or values cannot be parsed."""


class DuplicateKeyError(BillingDataError):
    """A primary key is null or appears more than once."""


class MissingReferenceError(BillingDataError):
    """A transaction points at a customer or service that does not exist."""

    def __init__(self, table: str, column: str, referenced_table: str, missing: list) -> None:
        self.table = table
        self.column = column
        self.referenced_table = referenced_table
        self.missing = missing
        shown = ", ".join(str(v) for v in missing[:10])
        more = f" (+{len(missing) - 10} more)" if len(missing) > 10 else ""
        super().__init__(
            f"{table}.{column}: {len(missing)} value(s) not found in "
            f"{referenced_table}: {shown}{more}"
        )


class UnknownQueryError(LookupError):
    """No query is registered under the requested name."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(f"Unknown query: {name!r}. Valid: {available}")
