"""
Test Fixtures Module
====================
Contains sample sheet tables and a fake data store.
"""

from .sample_tables import (
    INVENTORY_TABLE,
    TRANSACTIONS_TABLE,
    EXPENSES_TABLE,
    SAMPLE_TABLES,
    FakeDataStore,
    ReadOnlyDataStore,
)

__all__ = [
    "INVENTORY_TABLE",
    "TRANSACTIONS_TABLE",
    "EXPENSES_TABLE",
    "SAMPLE_TABLES",
    "FakeDataStore",
    "ReadOnlyDataStore",
]
