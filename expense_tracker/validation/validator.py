"""
Client-side Expense Validation

DESIGN DECISION: A create request is only sent when the draft has a title
and an amount. These checks run before any network call so a bad form
never reaches the store.

Two kinds of issues are reported:
- ERRORS block the request (missing title, missing/non-numeric/negative/out-of-range amount)
- WARNINGS are shown but don't block (unknown category, date far in the future)

IMPORTANT: Validation NEVER silently fixes issues.
"""

import math
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from expense_tracker.models.expense import (
    ExpenseCategory,
    ExpenseDraft,
    ValidationIssue,
    ValidationResult,
)


MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
FUTURE_DATE_TOLERANCE = timedelta(days=1)


class ExpenseValidator:
    """
    Validates expense drafts before they are sent to the store.

    Works on typed drafts (validate) and on raw form input (parse_form),
    where the amount may still be an arbitrary string.
    """

    def validate(self, draft: ExpenseDraft) -> ValidationResult:
        """
        Check a draft.

        Returns:
            ValidationResult with all issues found
        """
        issues = []

        if not draft.title:
            issues.append(ValidationIssue(
                field="title",
                issue_type="missing",
                message="Title is required",
                severity="error",
                suggested_fix="Describe what the money was spent on",
            ))
        elif len(draft.title) > MAX_TITLE_LENGTH:
            issues.append(ValidationIssue(
                field="title",
                issue_type="invalid_value",
                message=f"Title is longer than {MAX_TITLE_LENGTH} characters",
                severity="error",
            ))

        issues.extend(self._check_amount(draft.amount))

        if draft.description and len(draft.description) > MAX_DESCRIPTION_LENGTH:
            issues.append(ValidationIssue(
                field="description",
                issue_type="invalid_value",
                message=f"Description is longer than {MAX_DESCRIPTION_LENGTH} characters",
                severity="error",
            ))

        if not ExpenseCategory.is_known(draft.category):
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=f"'{draft.category}' is not a standard category",
                severity="warning",
                suggested_fix="It will be shown with the default style",
            ))

        if draft.date.tzinfo is None and draft.date > datetime.now() + FUTURE_DATE_TOLERANCE:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({draft.date.date()}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        return ValidationResult(issues=issues)

    def _check_amount(self, amount: Optional[Decimal]) -> list[ValidationIssue]:
        if amount is None:
            return [ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
                suggested_fix="Enter how much was spent",
            )]
        if amount < 0:
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount cannot be negative",
                severity="error",
            )]
        # The request body carries the amount as a JSON number
        as_float = float(amount)
        if not math.isfinite(as_float) or (as_float == 0 and amount != 0):
            return [ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=f"Amount {amount} is out of range",
                severity="error",
                suggested_fix="Enter a realistic amount, e.g. 249.50",
            )]
        return []

    def parse_form(
        self,
        title: Any,
        amount: Any,
        category: Any = ExpenseCategory.FOOD.value,
        description: Any = None,
        date: Optional[datetime] = None,
    ) -> tuple[Optional[ExpenseDraft], ValidationResult]:
        """
        Turn raw form values into a draft.

        A non-numeric amount is reported as an issue instead of raising.

        Returns:
            (draft, result) - draft is None when the amount could not be parsed
        """
        parsed_amount: Optional[Decimal] = None
        if amount is not None and str(amount).strip():
            try:
                parsed_amount = Decimal(str(amount).strip())
            except InvalidOperation:
                parsed_amount = None
            # NaN and Infinity parse as Decimal but are not amounts
            if parsed_amount is None or not parsed_amount.is_finite():
                return None, ValidationResult(issues=[ValidationIssue(
                    field="amount",
                    issue_type="invalid_format",
                    message=f"Amount '{amount}' is not a number",
                    severity="error",
                    suggested_fix="Use digits with an optional decimal point, e.g. 249.50",
                )])

        fields = {
            "title": str(title or ""),
            "amount": parsed_amount,
            "category": str(category or ExpenseCategory.FOOD.value),
            "description": str(description) if description else None,
        }
        if date is not None:
            fields["date"] = date

        draft = ExpenseDraft(**fields)
        return draft, self.validate(draft)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        One-line summary suitable for a transient notification.
        """
        if result.is_valid and not result.warnings:
            return "All checks passed"

        errors = [i for i in result.issues if i.severity == "error"]
        missing = [i.field for i in errors if i.issue_type == "missing"]
        if missing and len(missing) == len(errors):
            return f"Please fill {' and '.join(missing)}!"

        if errors:
            return "; ".join(issue.message for issue in errors)
        return "; ".join(result.warnings)
