"""
HTML snippets for the dashboard.

Titles and categories come from the store, so they are escaped before
being placed into markup that Streamlit renders with unsafe_allow_html.
"""

import html

from expense_tracker.aggregation import format_short_date
from expense_tracker.models.expense import Expense, style_for


def category_badge_html(category: str, dark_mode: bool) -> str:
    style = style_for(category)
    return (
        f'<span class="category-badge" style="background:{style.background(dark_mode)};'
        f'color:{style.color}">{style.icon} {html.escape(category)}</span>'
    )


def recent_row_html(expense: Expense, dark_mode: bool) -> str:
    """Title, category badge and short date for one 'Recent Expenses' row."""
    return (
        f"**{html.escape(expense.title)}**  \n"
        f"{category_badge_html(expense.category, dark_mode)} "
        f"&nbsp; {format_short_date(expense.date)}"
    )
