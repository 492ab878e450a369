"""
Expense Aggregation Engine

DESIGN DECISION: Every number on the dashboard is DERIVED.
The engine takes the record set from the last successful fetch and computes
totals, budget usage, category breakdowns and filtered views from it.

GUARANTEES:
- Pure functions: no I/O, no mutation of the input records
- Total: every function accepts any well-typed input, including an empty one
- Order-preserving: filters keep the store's order, nothing is re-sorted by date

Amounts are Decimal throughout. Rounding only happens in the format_* helpers.
"""

import json
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from expense_tracker.models.expense import (
    ALL_CATEGORIES,
    CURRENCY_SYMBOLS,
    CategoryBreakdown,
    DashboardSummary,
    Expense,
    ExportSnapshot,
    style_for,
)


Number = Union[Decimal, int, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")
TWO_PLACES = Decimal("0.01")
ONE_PLACE = Decimal("0.1")

DEFAULT_AVERAGE_DAYS = 30
DEFAULT_RECENT_LIMIT = 5

# Budget bar colour thresholds (percent used)
WARNING_USAGE = Decimal("60")
CRITICAL_USAGE = Decimal("80")


def _as_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


# =============================================================================
# TOTALS & BUDGET
# =============================================================================

def total_spend(expenses: Iterable[Expense]) -> Decimal:
    """Sum of every amount. An empty record set totals 0."""
    return sum((expense.amount for expense in expenses), ZERO)


def transaction_count(expenses: Sequence[Expense]) -> int:
    return len(expenses)


def remaining_budget(total: Decimal, budget: Number) -> Decimal:
    """
    budget - total.

    Negative means overspend; that is a valid result, not an error.
    """
    return _as_decimal(budget) - total


def budget_usage(total: Decimal, budget: Number) -> Decimal:
    """
    Percent of the budget consumed: total / budget * 100.

    A zero budget has no meaningful ratio, so usage is reported as 0.
    Overspend is still visible through remaining_budget() going negative.
    """
    budget = _as_decimal(budget)
    if budget == 0:
        return ZERO
    return total / budget * HUNDRED


def budget_status(usage: Decimal) -> str:
    """Colour band for the budget bar: healthy, warning (>60%) or critical (>80%)."""
    if usage > CRITICAL_USAGE:
        return "critical"
    if usage > WARNING_USAGE:
        return "warning"
    return "healthy"


def progress_width(usage: Decimal) -> Decimal:
    """Usage clamped to 0-100 for drawing a progress bar."""
    return min(max(usage, ZERO), HUNDRED)


def average_daily_spend(total: Decimal, days: int = DEFAULT_AVERAGE_DAYS) -> Decimal:
    """Total spread over a fixed number of days (30 by default)."""
    if days <= 0:
        return ZERO
    return total / Decimal(days)


# =============================================================================
# CATEGORIES
# =============================================================================

def category_totals(expenses: Iterable[Expense]) -> dict[str, Decimal]:
    """
    Sum of amounts per category.

    Only categories present in the input get an entry. Keys keep the
    order in which each category was first seen.
    """
    totals: dict[str, Decimal] = {}
    for expense in expenses:
        totals[expense.category] = totals.get(expense.category, ZERO) + expense.amount
    return totals


def category_percentages(expenses: Sequence[Expense]) -> dict[str, Decimal]:
    """
    Share of total spend per category, 0-100.

    When total spend is 0 every present category reports 0.
    """
    totals = category_totals(expenses)
    overall = sum(totals.values(), ZERO)
    if overall == 0:
        return {category: ZERO for category in totals}
    return {
        category: amount / overall * HUNDRED
        for category, amount in totals.items()
    }


def category_breakdown(expenses: Sequence[Expense]) -> list[CategoryBreakdown]:
    """Category rows for the analytics view, largest total first."""
    totals = category_totals(expenses)
    percentages = category_percentages(expenses)
    rows = [
        CategoryBreakdown(
            category=category,
            total=amount,
            percentage=percentages[category],
            style=style_for(category),
        )
        for category, amount in totals.items()
    ]
    # sorted() is stable, so equal totals keep first-seen order
    return sorted(rows, key=lambda row: row.total, reverse=True)


# =============================================================================
# FILTERING
# =============================================================================

def matches_search(expense: Expense, search_term: str) -> bool:
    """
    Case-insensitive substring match on title or description.

    An empty term matches everything. A missing description never matches.
    """
    if not search_term:
        return True
    term = search_term.lower()
    if term in expense.title.lower():
        return True
    return bool(expense.description) and term in expense.description.lower()


def matches_category(expense: Expense, category: str) -> bool:
    return category == ALL_CATEGORIES or expense.category == category


def filter_expenses(
    expenses: Iterable[Expense],
    category: str = ALL_CATEGORIES,
    search_term: str = "",
) -> list[Expense]:
    """
    Records matching both the category filter and the search term.

    Keeps input order. Filtering the result again with the same
    arguments returns the same list.
    """
    return [
        expense
        for expense in expenses
        if matches_category(expense, category) and matches_search(expense, search_term)
    ]


def recent_expenses(
    expenses: Sequence[Expense],
    limit: int = DEFAULT_RECENT_LIMIT,
) -> list[Expense]:
    """
    The first `limit` records in store order.

    No date sort happens here; the store decides what "recent" means.
    """
    if limit <= 0:
        return []
    return list(expenses[:limit])


# =============================================================================
# SUMMARY
# =============================================================================

def build_summary(
    expenses: Sequence[Expense],
    budget: Number,
    average_days: int = DEFAULT_AVERAGE_DAYS,
) -> DashboardSummary:
    """Compute every stat-card value from one snapshot of the records."""
    budget = _as_decimal(budget)
    total = total_spend(expenses)
    usage = budget_usage(total, budget)
    return DashboardSummary(
        total=total,
        budget=budget,
        remaining=remaining_budget(total, budget),
        usage=usage,
        transaction_count=transaction_count(expenses),
        average_daily_spend=average_daily_spend(total, average_days),
        category_totals=category_totals(expenses),
        status=budget_status(usage),
    )


# =============================================================================
# DISPLAY FORMATTING
# =============================================================================

def currency_symbol(currency: str) -> str:
    """Symbol for a currency code; unknown codes get no symbol."""
    return CURRENCY_SYMBOLS.get(currency, "")


def format_amount(amount: Number, currency: str = "INR") -> str:
    """
    Symbol + amount with exactly two decimals.

    No thousands separators and no locale rules: 1234.5 -> '₹1234.50'.
    """
    quantized = _as_decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return f"{currency_symbol(currency)}{quantized:f}"


def format_percentage(value: Number) -> str:
    """One decimal place, without the % sign: 62.5 -> '62.5'."""
    quantized = _as_decimal(value).quantize(ONE_PLACE, rounding=ROUND_HALF_UP)
    return f"{quantized:f}"


def format_short_date(value: datetime) -> str:
    """Day and short month, as in the recent list: '5 Mar'."""
    return f"{value.day} {value.strftime('%b')}"


def format_long_date(value: datetime) -> str:
    """Full date for the expenses table: '05/03/2024'."""
    return value.strftime("%d/%m/%Y")


# =============================================================================
# EXPORT
# =============================================================================

def data_size_kb(expenses: Iterable[Expense]) -> Decimal:
    """Size of the serialized record set in KB (two decimals)."""
    payload = json.dumps([expense.to_export_dict() for expense in expenses], ensure_ascii=False)
    size = Decimal(len(payload)) / Decimal(1024)
    return size.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def build_export_snapshot(
    expenses: Sequence[Expense],
    exported_at: Optional[datetime] = None,
) -> ExportSnapshot:
    """
    Snapshot of the full record set plus total, count and timestamp.

    This is a one-way export; nothing reads it back.
    """
    return ExportSnapshot(
        expenses=list(expenses),
        total_expenses=total_spend(expenses),
        total_transactions=transaction_count(expenses),
        export_date=exported_at or datetime.now(timezone.utc),
    )


def export_filename(exported_at: datetime) -> str:
    return f"expenses-{exported_at.date().isoformat()}.json"
