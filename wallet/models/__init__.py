"""
Data Models Package

This package contains all Pydantic models used in Mi Billetera.
All data flowing through the system must conform to these schemas.
"""

from wallet.models.expense import (
    CATEGORY_DISPLAY,
    CategoryDisplay,
    CategoryTotal,
    DeleteConfirmation,
    ExpenseCategory,
    ExpenseRecord,
    MonthlySummary,
    NoticeLevel,
    UserNotice,
    ValidationIssue,
    ValidationResult,
    category_display,
    is_period,
    new_expense_id,
    period_for,
    period_label,
)
from wallet.models.auth import AuthOutcome, BiometricResult, GateState
from wallet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "CATEGORY_DISPLAY",
    "CategoryDisplay",
    "CategoryTotal",
    "DeleteConfirmation",
    "ExpenseCategory",
    "ExpenseRecord",
    "MonthlySummary",
    "NoticeLevel",
    "UserNotice",
    "ValidationIssue",
    "ValidationResult",
    "category_display",
    "is_period",
    "new_expense_id",
    "period_for",
    "period_label",
    # Auth models
    "AuthOutcome",
    "BiometricResult",
    "GateState",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
