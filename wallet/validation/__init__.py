"""Input validation package."""

from wallet.validation.validator import (
    ExpenseValidator,
    InvalidAmount,
    ValidationError,
    parse_amount,
)

__all__ = ["ExpenseValidator", "InvalidAmount", "ValidationError", "parse_amount"]
