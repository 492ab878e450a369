"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing between the store, the engine and the UI conforms to these schemas.
"""

from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    CATEGORY_STYLES,
    CURRENCY_NAMES,
    CURRENCY_SYMBOLS,
    DEFAULT_CATEGORY_STYLE,
    CategoryBreakdown,
    CategoryStyle,
    Currency,
    DashboardState,
    DashboardSummary,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    ExportSnapshot,
    Notification,
    ValidationIssue,
    ValidationResult,
    style_for,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "ALL_CATEGORIES",
    "CATEGORY_STYLES",
    "CURRENCY_NAMES",
    "CURRENCY_SYMBOLS",
    "DEFAULT_CATEGORY_STYLE",
    "CategoryBreakdown",
    "CategoryStyle",
    "Currency",
    "DashboardState",
    "DashboardSummary",
    "Expense",
    "ExpenseCategory",
    "ExpenseDraft",
    "ExportSnapshot",
    "Notification",
    "ValidationIssue",
    "ValidationResult",
    "style_for",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
