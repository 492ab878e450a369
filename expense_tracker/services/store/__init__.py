"""
Store Services Package

Provides the abstract expense store interface and the REST implementation.
The REST client is the only backend today, but the dashboard depends on the
interface so another backend can be dropped in.
"""

from expense_tracker.services.store.interface import (
    ConnectivityError,
    ExpenseStoreInterface,
    NotFoundError,
    StoreError,
    ValidationError,
)
from expense_tracker.services.store.rest_client import RestExpenseStore

__all__ = [
    # Interface
    "ExpenseStoreInterface",
    # Exceptions
    "ConnectivityError",
    "NotFoundError",
    "StoreError",
    "ValidationError",
    # REST implementation
    "RestExpenseStore",
]
