"""Billing Analytics — SQL-style joins and window computations over a telecom billing schema."""

__version__ = "1.0.0"
