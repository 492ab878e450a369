"""
Shared fixtures.

No real API calls in tests: the dashboard flow runs against an
in-memory store that implements the same interface as the REST client.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.config import DashboardSettings
from expense_tracker.models.audit import AuditEvent
from expense_tracker.models.expense import Expense, ExpenseDraft
from expense_tracker.services.store.interface import (
    ConnectivityError,
    ExpenseStoreInterface,
    NotFoundError,
)


class FakeExpenseStore(ExpenseStoreInterface):
    """In-memory store; newest records first, like the real API."""

    def __init__(self, expenses: Optional[list[Expense]] = None):
        self.records = list(expenses or [])
        self.calls: list[str] = []
        self.fail_list = False
        self.fail_create: Optional[Exception] = None
        self.fail_delete = False
        self._next_id = 1

    async def list_expenses(self) -> list[Expense]:
        self.calls.append("list")
        if self.fail_list:
            raise ConnectivityError("store unreachable")
        return list(self.records)

    async def create_expense(self, draft: ExpenseDraft) -> Expense:
        self.calls.append("create")
        if self.fail_create is not None:
            raise self.fail_create
        expense = Expense(id=f"fake-{self._next_id}", **draft.model_dump())
        self._next_id += 1
        self.records.insert(0, expense)
        return expense

    async def delete_expense(self, expense_id: str) -> None:
        self.calls.append("delete")
        if self.fail_delete:
            raise ConnectivityError("store unreachable", status_code=503)
        for idx, expense in enumerate(self.records):
            if expense.id == expense_id:
                del self.records[idx]
                return
        raise NotFoundError(expense_id)


class RecordingAuditLogger(AuditLogger):
    """Audit logger that also keeps every event for assertions."""

    def __init__(self):
        super().__init__()
        self.events: list[AuditEvent] = []

    async def log(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return await super().log(event)


def make_expense(
    expense_id: str = "1",
    title: str = "Lunch",
    amount: str = "100",
    category: str = "Food",
    description: Optional[str] = None,
    date: Optional[datetime] = None,
) -> Expense:
    return Expense(
        id=expense_id,
        title=title,
        amount=Decimal(amount),
        category=category,
        description=description,
        date=date or datetime(2024, 3, 5, 12, 30),
    )


@pytest.fixture
def sample_expenses() -> list[Expense]:
    return [
        make_expense("1", "Uber ride", "250", "Transport", "Airport drop"),
        make_expense("2", "Dinner", "500", "Food", "With friends"),
        make_expense("3", "Groceries", "300", "Food"),
        make_expense("4", "Movie night", "150", "Entertainment", "IMAX"),
        make_expense("5", "Tuition", "800", "Education"),
        make_expense("6", "Gadget", "200", "Gizmos"),
    ]


@pytest.fixture
def fake_store(sample_expenses) -> FakeExpenseStore:
    return FakeExpenseStore(sample_expenses)


@pytest.fixture
def audit_logger() -> RecordingAuditLogger:
    return RecordingAuditLogger()


@pytest.fixture
def dashboard_settings() -> DashboardSettings:
    return DashboardSettings(
        default_budget=Decimal("5000"),
        recent_limit=5,
        notification_seconds=3,
    )
