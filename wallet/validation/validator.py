"""
New-Expense Validation

Checks run in a fixed order:
1. name  - must be non-empty after trimming whitespace
2. amount - must parse to a finite number greater than zero, at most
   MAX_AMOUNT, with no more than two decimal places
3. period - when the caller selected a month, it must look like YYYY-MM

Date and category pass through untouched: the date is free text the user
typed, and unknown categories are allowed.

IMPORTANT: Validation NEVER silently fixes input.
It reports every problem so the form can show them together.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from wallet.models.expense import ValidationIssue, ValidationResult, is_period


# Largest amount whose cents survive the JSON number round trip
MAX_AMOUNT = Decimal("999999999999.99")
CENTS = Decimal("0.01")


class ValidationError(Exception):
    """User input was rejected."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


class InvalidAmount(ValidationError):
    """Amount is empty, not a number, or not greater than zero."""
    pass


def parse_amount(raw: Any) -> Optional[Decimal]:
    """
    Parse user input into a Decimal.

    Returns None for anything that is not a finite number. Floats go
    through str() so 3.5 becomes Decimal('3.5'), not its binary expansion.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    else:
        text = str(raw).strip()
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    if not value.is_finite():
        return None
    return value


class ExpenseValidator:
    """Validates the fields of the new-expense form."""

    def validate(
        self,
        name: Any,
        amount: Any,
        period: Optional[str] = None,
    ) -> ValidationResult:
        """
        Validate form input.

        Returns:
            ValidationResult with issues in field order; clean_name and
            parsed_amount are filled for the fields that passed
        """
        issues = []

        clean_name = str(name).strip() if name is not None else ""
        if not clean_name:
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Please enter what the expense was for",
                suggested_fix="Type a short name, e.g. 'Coffee'",
            ))

        parsed = parse_amount(amount)
        if parsed is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing" if not str(amount or "").strip() else "not_a_number",
                message="The amount must be a valid number greater than 0",
                suggested_fix="Use digits and a dot, e.g. 3.50",
            ))
        elif parsed <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="not_positive",
                message="The amount must be a valid number greater than 0",
            ))
        elif parsed > MAX_AMOUNT:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_large",
                message=f"The amount cannot be more than {MAX_AMOUNT}",
            ))
        elif parsed != parsed.quantize(CENTS):
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_precise",
                message="The amount can have at most two decimal places",
                suggested_fix="Round to cents, e.g. 3.50",
            ))

        if period is not None and not is_period(period):
            issues.append(ValidationIssue(
                field="period",
                issue_type="invalid_format",
                message=f"Month '{period}' is not in YYYY-MM format",
            ))

        return ValidationResult(
            issues=issues,
            clean_name=clean_name or None,
            parsed_amount=parsed if not any(i.field == "amount" for i in issues) else None,
        )

    def raise_for_issues(self, result: ValidationResult) -> None:
        """
        Raise the exception matching the first error, carrying all issues.

        Raises:
            InvalidAmount: If the first error is about the amount
            ValidationError: For any other first error
        """
        errors = [issue for issue in result.issues if issue.severity == "error"]
        if not errors:
            return

        first = errors[0]
        if first.field == "amount":
            raise InvalidAmount(first.message, result.issues)
        raise ValidationError(first.message, result.issues)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """
        Summary of validation results for the form.
        """
        if result.is_valid:
            return "✅ Ready to save."

        lines = ["❌ Please fix the following:"]
        for issue in result.issues:
            lines.append(f"   • {issue.message}")
            if issue.suggested_fix:
                lines.append(f"     💡 {issue.suggested_fix}")
        return "\n".join(lines)
