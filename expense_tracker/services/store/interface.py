"""
Abstract Expense Store Interface

DESIGN DECISION: The dashboard talks to the remote expense collection only
through this interface. This allows us to:
1. Swap the REST backend without touching the dashboard
2. Use an in-memory store for testing
3. Keep the aggregation logic decoupled from transport

The interface is intentionally small - list, create, delete.
There is no update: the dashboard never edits a record in place.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_tracker.models.expense import Expense, ExpenseDraft, ValidationIssue


class ExpenseStoreInterface(ABC):
    """
    Abstract interface for the remote expense collection.

    Any store implementation (REST API, in-memory fake, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def list_expenses(self) -> list[Expense]:
        """
        Fetch the full record set.

        Full replace semantics: no pagination, no partial results.
        Order is whatever the store returns.

        Returns:
            Every expense the store holds

        Raises:
            ConnectivityError: If the store is unreachable or answers non-2xx
        """
        pass

    @abstractmethod
    async def create_expense(self, draft: ExpenseDraft) -> Expense:
        """
        Create a new expense.

        Args:
            draft: The proposed expense (no id)

        Returns:
            The created expense with its store-assigned id

        Raises:
            ValidationError: If required fields are missing (checked before sending)
            ConnectivityError: If the store is unreachable or answers non-2xx
        """
        pass

    @abstractmethod
    async def delete_expense(self, expense_id: str) -> None:
        """
        Delete an expense by id.

        Args:
            expense_id: The store-assigned identifier

        Raises:
            NotFoundError: If no expense has this id
            ConnectivityError: If the store is unreachable or answers non-2xx
        """
        pass


class StoreError(Exception):
    """Base exception for store operations."""
    pass


class ConnectivityError(StoreError):
    """Store unreachable or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ValidationError(StoreError):
    """Draft rejected because required fields are missing or invalid."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        self.issues = issues or []
        super().__init__(message)


class NotFoundError(StoreError):
    """Delete targeted an id the store does not have."""

    def __init__(self, expense_id: str):
        self.expense_id = expense_id
        super().__init__(f"Expense not found: {expense_id}")
