"""Services package."""

from expense_tracker.services.store import (
    ConnectivityError,
    ExpenseStoreInterface,
    NotFoundError,
    RestExpenseStore,
    StoreError,
    ValidationError,
)

__all__ = [
    "ConnectivityError",
    "ExpenseStoreInterface",
    "NotFoundError",
    "RestExpenseStore",
    "StoreError",
    "ValidationError",
]
