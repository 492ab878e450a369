"""Expense aggregation package."""

from expense_tracker.aggregation.engine import (
    average_daily_spend,
    budget_status,
    budget_usage,
    build_export_snapshot,
    build_summary,
    category_breakdown,
    category_percentages,
    category_totals,
    currency_symbol,
    data_size_kb,
    export_filename,
    filter_expenses,
    format_amount,
    format_long_date,
    format_percentage,
    format_short_date,
    matches_category,
    matches_search,
    progress_width,
    recent_expenses,
    remaining_budget,
    total_spend,
    transaction_count,
)

__all__ = [
    "average_daily_spend",
    "budget_status",
    "budget_usage",
    "build_export_snapshot",
    "build_summary",
    "category_breakdown",
    "category_percentages",
    "category_totals",
    "currency_symbol",
    "data_size_kb",
    "export_filename",
    "filter_expenses",
    "format_amount",
    "format_long_date",
    "format_percentage",
    "format_short_date",
    "matches_category",
    "matches_search",
    "progress_width",
    "recent_expenses",
    "remaining_budget",
    "total_spend",
    "transaction_count",
]
