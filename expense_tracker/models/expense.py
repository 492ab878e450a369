"""
Core Data Models for Expense Tracker

These models define the schemas for all data flowing through the dashboard.
They are designed to:
1. Enforce the record invariants at the boundary (non-negative amounts, stable ids)
2. Tolerate what the remote store sends (unknown categories, missing dates)
3. Be serializable for the export snapshot and session state

DESIGN DECISION: Records coming back from the store are frozen.
The aggregation engine only reads and derives; nothing mutates a record
after it has been parsed.
"""

import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Categories offered by the add-expense form.

    DESIGN DECISION: The server stores category as free text, so
    Expense.category stays a plain string. This enum is the set the
    client knows how to style; anything else falls back to a default style.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    HEALTHCARE = "Healthcare"
    EDUCATION = "Education"
    OTHER = "Other"

    @classmethod
    def is_known(cls, label: str) -> bool:
        """Check whether a label belongs to the fixed category set."""
        return label in cls._value2member_map_


class Currency(str, Enum):
    """Display currencies. Amounts are never converted between them."""
    INR = "INR"
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"


# Filter sentinel meaning "do not filter by category"
ALL_CATEGORIES = "All"

CURRENCY_SYMBOLS: dict[str, str] = {
    Currency.INR.value: "₹",
    Currency.USD.value: "$",
    Currency.EUR.value: "€",
    Currency.GBP.value: "£",
}

CURRENCY_NAMES: dict[str, str] = {
    Currency.INR.value: "Indian Rupee",
    Currency.USD.value: "US Dollar",
    Currency.EUR.value: "Euro",
    Currency.GBP.value: "British Pound",
}


def _to_decimal(value: Any) -> Any:
    """Route floats through str so 12.3 becomes Decimal('12.3'), not its binary expansion."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip())
        except InvalidOperation:
            return value  # let pydantic report it
    return value


# =============================================================================
# CORE EXPENSE MODELS
# =============================================================================

class Expense(BaseModel):
    """
    A single spending event as returned by the store.

    The id is assigned by the store and never changes. Records are
    immutable once parsed. Length limits are only checked on drafts;
    whatever the store already holds is accepted.
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        frozen=True,
        populate_by_name=True,
    )

    id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("id", "_id"),
        description="Opaque identifier assigned by the store"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Amount spent (display currency only)"
    )
    category: str = Field(
        default=ExpenseCategory.OTHER.value,
        description="Category label; unknown labels are allowed"
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional free-text note"
    )
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the expense happened"
    )

    @field_validator('id', mode='before')
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Numeric ids from the store are kept as opaque strings."""
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Any:
        return _to_decimal(v)

    @field_validator('category', mode='before')
    @classmethod
    def default_blank_category(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return ExpenseCategory.OTHER.value
        return v

    @field_validator('date', mode='before')
    @classmethod
    def default_missing_date(cls, v: Any) -> Any:
        """A record without a date is treated as created now."""
        if v is None or v == "":
            return datetime.now()
        return v

    @property
    def is_known_category(self) -> bool:
        return ExpenseCategory.is_known(self.category)

    def to_export_dict(self) -> dict:
        """Convert to a JSON-friendly dict for the export snapshot."""
        data = {
            "id": self.id,
            "title": self.title,
            "amount": float(self.amount),
            "category": self.category,
            "date": self.date.isoformat(),
        }
        if self.description is not None:
            data["description"] = self.description
        return data


class ExpenseDraft(BaseModel):
    """
    An expense the user wants to create.

    CRITICAL: This is PROPOSED data, NOT verified.
    Fields are loosely typed on purpose so that an incomplete form can still
    be represented; ExpenseValidator decides whether it may be sent.
    The draft carries no id - the store assigns one.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(
        default="",
        description="What the money was spent on"
    )
    amount: Optional[Decimal] = Field(
        default=None,
        description="Amount spent"
    )
    category: str = Field(
        default=ExpenseCategory.FOOD.value,
        description="Category label"
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional free-text note"
    )
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the expense happened (defaults to submission time)"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def coerce_amount(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return _to_decimal(v)

    def to_request_body(self) -> dict:
        """
        Build the JSON body for POST /expenses.

        Amount is sent as a number and the description is omitted when blank.
        """
        body = {
            "title": self.title,
            "amount": float(self.amount) if self.amount is not None else None,
            "category": self.category,
            "date": self.date.isoformat(),
        }
        if self.description:
            body["description"] = self.description
        return body


# =============================================================================
# CATEGORY STYLING
# =============================================================================

class CategoryStyle(BaseModel):
    """Colour and icon used to render a category badge."""
    model_config = ConfigDict(frozen=True)

    color: str
    icon: str
    bg: str
    dark_bg: str

    def background(self, dark_mode: bool) -> str:
        return self.dark_bg if dark_mode else self.bg


CATEGORY_STYLES: dict[str, CategoryStyle] = {
    ExpenseCategory.FOOD.value: CategoryStyle(color="#FF6B6B", icon="🍕", bg="#FFF5F5", dark_bg="#2A1A1A"),
    ExpenseCategory.TRANSPORT.value: CategoryStyle(color="#4ECDC4", icon="🚗", bg="#F0FFFD", dark_bg="#1A2A28"),
    ExpenseCategory.SHOPPING.value: CategoryStyle(color="#45B7D1", icon="🛍️", bg="#F0F8FF", dark_bg="#1A242A"),
    ExpenseCategory.BILLS.value: CategoryStyle(color="#96CEB4", icon="📄", bg="#F8FFF9", dark_bg="#1A2A21"),
    ExpenseCategory.ENTERTAINMENT.value: CategoryStyle(color="#FECA57", icon="🎬", bg="#FFFBF0", dark_bg="#2A241A"),
    ExpenseCategory.HEALTHCARE.value: CategoryStyle(color="#CF9FFF", icon="🏥", bg="#F9F3FF", dark_bg="#2A1A2A"),
    ExpenseCategory.EDUCATION.value: CategoryStyle(color="#FF9FF3", icon="📚", bg="#FFF0FC", dark_bg="#2A1A27"),
    ExpenseCategory.OTHER.value: CategoryStyle(color="#778BEB", icon="📦", bg="#F8F9FF", dark_bg="#1A1F2A"),
}

DEFAULT_CATEGORY_STYLE = CategoryStyle(color="#999", icon="📌", bg="#F8F9FA", dark_bg="#2A2A2A")


def style_for(category: str) -> CategoryStyle:
    """Look up the style for a category, falling back for unknown labels."""
    return CATEGORY_STYLES.get(category, DEFAULT_CATEGORY_STYLE)


# =============================================================================
# DERIVED VIEW MODELS
# =============================================================================

class CategoryBreakdown(BaseModel):
    """One row of the analytics 'Category Distribution' card."""
    model_config = ConfigDict(frozen=True)

    category: str
    total: Decimal = Field(ge=0)
    percentage: Decimal = Field(
        ge=0,
        description="Share of total spend, 0-100"
    )
    style: CategoryStyle


class DashboardSummary(BaseModel):
    """
    Everything the stat cards and budget bar need.

    Built from one snapshot of the record set; never updated in place.
    """
    model_config = ConfigDict(frozen=True)

    total: Decimal
    budget: Decimal
    remaining: Decimal = Field(
        ...,
        description="budget - total; negative means overspend"
    )
    usage: Decimal = Field(
        ...,
        description="total / budget * 100; 0 when budget is 0"
    )
    transaction_count: int = Field(ge=0)
    average_daily_spend: Decimal
    category_totals: dict[str, Decimal] = Field(default_factory=dict)
    status: str = Field(
        ...,
        pattern="^(healthy|warning|critical)$"
    )

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0


class ExportSnapshot(BaseModel):
    """
    One-way export of the current record set.

    There is no import counterpart.
    """

    expenses: list[Expense] = Field(default_factory=list)
    total_expenses: Decimal
    total_transactions: int = Field(ge=0)
    export_date: datetime

    def to_dict(self) -> dict:
        return {
            "expenses": [expense.to_export_dict() for expense in self.expenses],
            "summary": {
                "totalExpenses": float(self.total_expenses),
                "totalTransactions": self.total_transactions,
                "exportDate": self.export_date.isoformat(),
            },
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)


# =============================================================================
# PRESENTATION STATE
# =============================================================================

class DashboardState(BaseModel):
    """
    Per-session UI state.

    Owned by the presentation layer and passed explicitly into the
    render functions instead of living in module globals.
    """
    model_config = ConfigDict(validate_assignment=True)

    active_tab: str = Field(
        default="dashboard",
        pattern="^(dashboard|expenses|analytics|settings)$"
    )
    dark_mode: bool = False
    currency: str = Currency.INR.value
    budget: Decimal = Decimal("50000")
    filter_category: str = ALL_CATEGORIES
    search_term: str = ""
    notifications_enabled: bool = True

    @property
    def currency_symbol(self) -> str:
        return CURRENCY_SYMBOLS.get(self.currency, "")


class Notification(BaseModel):
    """
    A transient, self-dismissing message shown after a store operation.

    Purely cosmetic: dismissing it has no effect on state.
    """
    model_config = ConfigDict(frozen=True)

    message: str
    kind: str = Field(
        default="success",
        pattern="^(success|error|warning|info)$"
    )
    duration_seconds: int = Field(default=3, ge=1)

    @property
    def icon(self) -> str:
        return {
            "success": "✅",
            "error": "❌",
            "warning": "⚠️",
            "info": "ℹ️",
        }[self.kind]

    @property
    def is_error(self) -> bool:
        return self.kind == "error"


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in a draft."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Result of checking a draft before it is sent to the store."""

    validated_at: datetime = Field(
        default_factory=datetime.now
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
