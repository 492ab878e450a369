"""
Main Orchestrator for Expense Tracker

This module ties the store client, the validator, the audit log and the
aggregation engine together behind the operations the dashboard calls:
1. Refresh (fetch the full record set)
2. Add (validate -> create -> refresh)
3. Delete (confirm -> delete -> refresh)
4. Views and export (pure derivations of the current record set)

DESIGN DECISION: The orchestrator is the single place where store errors
are caught. Each failure is audited and turned into a transient
Notification; nothing is retried and nothing is patched locally.

- A failed refresh keeps the previous list (stale beats blank)
- A failed create or delete leaves the list untouched
- Every successful mutation is followed by a full refresh
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from expense_tracker.aggregation import (
    build_export_snapshot,
    build_summary,
    category_breakdown,
    export_filename,
    filter_expenses,
    recent_expenses,
)
from expense_tracker.audit import AuditLogger, create_correlation_id
from expense_tracker.config import DashboardSettings, get_settings
from expense_tracker.models.audit import AuditEventType
from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    CategoryBreakdown,
    DashboardState,
    DashboardSummary,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    Notification,
)
from expense_tracker.services.store import (
    ExpenseStoreInterface,
    NotFoundError,
    RestExpenseStore,
    StoreError,
    ValidationError,
)
from expense_tracker.validation import ExpenseValidator


class ExpenseDashboardFlow:
    """
    Orchestrates every store operation the dashboard performs.

    Holds the record set from the last successful fetch. The list is only
    ever replaced wholesale by refresh(); it is never merged or patched.
    """

    def __init__(
        self,
        store: ExpenseStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[ExpenseValidator] = None,
        settings: Optional[DashboardSettings] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger or AuditLogger()
        self._validator = validator or ExpenseValidator()
        self._settings = settings or get_settings().dashboard
        self._expenses: tuple[Expense, ...] = ()
        self._has_loaded = False

    @property
    def expenses(self) -> tuple[Expense, ...]:
        """The record set from the last successful fetch, in store order."""
        return self._expenses

    @property
    def has_loaded(self) -> bool:
        """True once at least one fetch has succeeded."""
        return self._has_loaded

    def _notify(self, message: str, kind: str) -> Notification:
        return Notification(
            message=message,
            kind=kind,
            duration_seconds=self._settings.notification_seconds,
        )

    async def refresh(self, correlation_id: Optional[UUID] = None) -> Notification:
        """
        Replace the record set with the store's current one.

        On failure the previous list is kept and an error notification is returned.
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            expenses = await self._store.list_expenses()
        except StoreError as e:
            await self._audit_logger.log_load_failed(
                error_message=str(e),
                kept_count=len(self._expenses),
                correlation_id=correlation_id,
            )
            return self._notify("Failed to load expenses!", "error")

        self._expenses = tuple(expenses)
        self._has_loaded = True
        await self._audit_logger.log_expenses_loaded(
            count=len(self._expenses),
            correlation_id=correlation_id,
        )
        return self._notify("Expenses loaded successfully!", "success")

    async def add_expense(
        self,
        title: Any,
        amount: Any,
        category: Any = ExpenseCategory.FOOD.value,
        description: Any = None,
        date: Optional[datetime] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Notification, Optional[Expense]]:
        """
        Validate raw form input and create the expense.

        An invalid form is rejected here; no request is sent.

        Returns:
            (notification, created_expense) - created_expense is None on failure
        """
        correlation_id = correlation_id or create_correlation_id()

        draft, result = self._validator.parse_form(
            title=title,
            amount=amount,
            category=category,
            description=description,
            date=date,
        )
        if draft is None or result.has_errors:
            await self._audit_logger.log_validation_failed(
                issues=[
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in result.issues
                    if i.severity == "error"
                ],
                correlation_id=correlation_id,
            )
            return self._notify(self._validator.get_user_friendly_summary(result), "error"), None

        return await self.submit_draft(draft, correlation_id=correlation_id)

    async def submit_draft(
        self,
        draft: ExpenseDraft,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Notification, Optional[Expense]]:
        """
        Send an already-built draft to the store, then refresh.

        Returns:
            (notification, created_expense) - created_expense is None on failure
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            created = await self._store.create_expense(draft)
        except ValidationError as e:
            await self._audit_logger.log_validation_failed(
                issues=[
                    {"field": i.field, "type": i.issue_type, "message": i.message}
                    for i in e.issues
                ] or [{"field": "expense", "type": "rejected", "message": str(e)}],
                correlation_id=correlation_id,
            )
            return self._notify(str(e), "error"), None
        except StoreError as e:
            await self._audit_logger.log_store_error(
                event_type=AuditEventType.CREATE_FAILED,
                error=e,
                correlation_id=correlation_id,
            )
            return self._notify("Error adding expense!", "error"), None

        await self._audit_logger.log_expense_created(
            expense_id=created.id,
            title=created.title,
            amount=str(created.amount),
            category=created.category,
            correlation_id=correlation_id,
        )
        await self.refresh(correlation_id=correlation_id)
        return self._notify("Expense added successfully! 💰", "success"), created

    async def delete_expense(
        self,
        expense_id: str,
        confirmed: bool,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[Notification]:
        """
        Delete an expense the user has explicitly confirmed.

        Without confirmation nothing happens and None is returned.
        A missing id is treated as already deleted, not as a failure.
        """
        if not confirmed:
            return None

        correlation_id = correlation_id or create_correlation_id()

        try:
            await self._store.delete_expense(expense_id)
        except NotFoundError:
            await self._audit_logger.log_expense_already_deleted(
                expense_id=expense_id,
                correlation_id=correlation_id,
            )
            await self.refresh(correlation_id=correlation_id)
            return self._notify("Expense was already deleted.", "warning")
        except StoreError as e:
            await self._audit_logger.log_store_error(
                event_type=AuditEventType.DELETE_FAILED,
                error=e,
                expense_id=expense_id,
                correlation_id=correlation_id,
            )
            return self._notify("Error deleting expense!", "error")

        await self._audit_logger.log_expense_deleted(
            expense_id=expense_id,
            correlation_id=correlation_id,
        )
        await self.refresh(correlation_id=correlation_id)
        return self._notify("Expense deleted! 🗑️", "success")

    # -------------------------------------------------------------------------
    # Derived views
    # -------------------------------------------------------------------------

    def summary(self, budget: Decimal) -> DashboardSummary:
        return build_summary(
            self._expenses,
            budget,
            average_days=self._settings.average_daily_days,
        )

    def breakdown(self) -> list[CategoryBreakdown]:
        return category_breakdown(self._expenses)

    def filtered(
        self,
        category: str = ALL_CATEGORIES,
        search_term: str = "",
    ) -> list[Expense]:
        return filter_expenses(self._expenses, category=category, search_term=search_term)

    def recent(
        self,
        category: str = ALL_CATEGORIES,
        search_term: str = "",
        limit: Optional[int] = None,
    ) -> list[Expense]:
        """The first few filtered records, for the dashboard's recent list."""
        return recent_expenses(
            self.filtered(category=category, search_term=search_term),
            limit=self._settings.recent_limit if limit is None else limit,
        )

    def export(self, exported_at: Optional[datetime] = None) -> tuple[str, str]:
        """
        Serialize the current record set for download.

        Returns:
            (filename, json_text)
        """
        snapshot = build_export_snapshot(self._expenses, exported_at=exported_at)
        return export_filename(snapshot.export_date), snapshot.to_json()

    async def record_export(self, filename: str) -> Notification:
        """Audit a completed download of the export snapshot."""
        await self._audit_logger.log_data_exported(
            total_transactions=len(self._expenses),
            filename=filename,
        )
        return self._notify("Data exported successfully!", "success")


def create_initial_state(settings: Optional[DashboardSettings] = None) -> DashboardState:
    """Seed a session's UI state from the configured defaults."""
    settings = settings or get_settings().dashboard
    return DashboardState(
        budget=settings.default_budget,
        currency=settings.default_currency,
        dark_mode=settings.dark_mode,
        notifications_enabled=settings.notifications_enabled,
    )


def create_app_components() -> tuple[ExpenseDashboardFlow, RestExpenseStore]:
    """
    Factory function to create all application components.

    Returns:
        (dashboard_flow, store)
    """
    settings = get_settings()
    store = RestExpenseStore(settings.store_api)
    audit_logger = AuditLogger()

    dashboard_flow = ExpenseDashboardFlow(
        store=store,
        audit_logger=audit_logger,
        settings=settings.dashboard,
    )

    return dashboard_flow, store
