"""
Core Data Models for Mi Billetera

These models define the schemas for every expense flowing through the app.
They are designed to:
1. Enforce type safety at runtime
2. Provide clear validation error messages
3. Serialize to the exact persisted layout
4. Carry display metadata (icons, colors) next to the data

DESIGN DECISION: Amounts are Decimal in memory and JSON numbers on disk.
Sums keep full precision; rounding only happens when formatting for display.
"""

import re
import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


PERIOD_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    Stored records may carry any string; values outside this set are kept
    verbatim and rendered with the fallback display.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    BOOKS = "Books"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    OTHER = "Other"

    @classmethod
    def lookup(cls, value: str) -> Optional["ExpenseCategory"]:
        """Resolve a stored category string, including legacy Spanish labels."""
        if not value:
            return None
        normalized = value.strip().lower()
        for category in cls:
            if category.value.lower() == normalized:
                return category
        return LEGACY_CATEGORY_ALIASES.get(normalized)


# Labels written by the first release of the app
LEGACY_CATEGORY_ALIASES = {
    "comida": ExpenseCategory.FOOD,
    "transporte": ExpenseCategory.TRANSPORT,
    "libros": ExpenseCategory.BOOKS,
    "entretenimiento": ExpenseCategory.ENTERTAINMENT,
    "salud": ExpenseCategory.HEALTH,
    "otros": ExpenseCategory.OTHER,
}


class CategoryDisplay(BaseModel):
    """How a category is rendered in lists and charts."""
    model_config = ConfigDict(frozen=True)

    label: str
    icon: str
    color: str
    recognized: bool = True


CATEGORY_DISPLAY = {
    ExpenseCategory.FOOD: CategoryDisplay(label="Food", icon="🍔", color="#e67e22"),
    ExpenseCategory.TRANSPORT: CategoryDisplay(label="Transport", icon="🚌", color="#3498db"),
    ExpenseCategory.BOOKS: CategoryDisplay(label="Books", icon="📚", color="#9b59b6"),
    ExpenseCategory.ENTERTAINMENT: CategoryDisplay(label="Entertainment", icon="🎮", color="#e74c3c"),
    ExpenseCategory.HEALTH: CategoryDisplay(label="Health", icon="💊", color="#2ecc71"),
    ExpenseCategory.OTHER: CategoryDisplay(label="Other", icon="📦", color="#95a5a6"),
}

FALLBACK_ICON = "📌"
FALLBACK_COLOR = "#7f8c8d"


def category_display(category: str) -> CategoryDisplay:
    """Display metadata for a stored category, falling back for unknown values."""
    known = ExpenseCategory.lookup(category)
    if known is not None:
        return CATEGORY_DISPLAY[known]
    return CategoryDisplay(
        label=category or "Uncategorized",
        icon=FALLBACK_ICON,
        color=FALLBACK_COLOR,
        recognized=False,
    )


# =============================================================================
# PERIOD HELPERS
# =============================================================================

def period_for(day: dt.date) -> str:
    """Month key (YYYY-MM) for a calendar date."""
    return day.strftime("%Y-%m")


def is_period(value: str) -> bool:
    """Check that a string is a well-formed YYYY-MM month key."""
    return bool(value) and PERIOD_PATTERN.match(value) is not None


def period_label(period: str) -> str:
    """Human-readable month (e.g., 'May 2024'); unparseable keys are returned as-is."""
    try:
        return dt.datetime.strptime(period, "%Y-%m").strftime("%B %Y")
    except ValueError:
        return period


def new_expense_id() -> str:
    """Collision-free identifier for a new record."""
    return uuid4().hex


# =============================================================================
# CORE EXPENSE MODEL
# =============================================================================

class ExpenseRecord(BaseModel):
    """
    One user-entered expense.

    Field order matches the persisted object layout:
    {id, name, amount, date, category, period}
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=new_expense_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    name: str = Field(
        ...,
        min_length=1,
        description="What the money was spent on"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive magnitude, currency agnostic"
    )
    date: str = Field(
        ...,
        min_length=1,
        description="Calendar date as typed by the user (not validated)"
    )
    category: str = Field(
        default=ExpenseCategory.OTHER.value,
        description="Category label; unknown values are allowed"
    )
    period: str = Field(
        ...,
        min_length=1,
        description="Month bucket (YYYY-MM) the expense belongs to"
    )

    @property
    def display(self) -> CategoryDisplay:
        return category_display(self.category)

    def to_storage_dict(self) -> dict[str, Any]:
        """
        Convert to the persisted object shape.

        Amounts become JSON numbers: integers when integral, floats otherwise.

        Raises:
            ValueError: If the amount would not read back as the same value
        """
        if self.amount == self.amount.to_integral_value():
            amount: Any = int(self.amount)
        else:
            amount = float(self.amount)
        if Decimal(repr(amount)) != self.amount:
            raise ValueError(f"Amount {self.amount} cannot be stored exactly")
        return {
            "id": self.id,
            "name": self.name,
            "amount": amount,
            "date": self.date,
            "category": self.category,
            "period": self.period,
        }

    @classmethod
    def from_storage_dict(cls, data: dict[str, Any], today: dt.date) -> "ExpenseRecord":
        """
        Build a record from a persisted object.

        Fills forward-compatible defaults for fields older data may lack:
        - period: inferred from the date prefix, else the current month
        - category: Other
        """
        raw_date = str(data.get("date") or "")
        period = data.get("period")
        if not period:
            prefix = raw_date[:7]
            period = prefix if is_period(prefix) else period_for(today)

        amount = data.get("amount")
        if isinstance(amount, float):
            amount = Decimal(repr(amount))

        return cls(
            id=str(data["id"]),
            name=data.get("name"),
            amount=amount,
            date=raw_date or today.isoformat(),
            category=data.get("category") or ExpenseCategory.OTHER.value,
            period=period,
        )


# =============================================================================
# DERIVED VIEW MODELS
# =============================================================================

class CategoryTotal(BaseModel):
    """Per-category share of a set of expenses."""

    category: str
    total: Decimal = Field(ge=0)
    percentage: Decimal = Field(ge=0, le=100)
    count: int = Field(ge=0)


class MonthlySummary(BaseModel):
    """Everything the statistics screen shows for one period."""

    period: str
    records: list[ExpenseRecord] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    breakdown: dict[str, CategoryTotal] = Field(default_factory=dict)

    @property
    def count(self) -> int:
        return len(self.records)

    @property
    def label(self) -> str:
        return period_label(self.period)


class DeleteConfirmation(BaseModel):
    """
    Pending delete awaiting an explicit confirm/cancel.

    The token is single-use.
    """
    model_config = ConfigDict(frozen=True)

    token: str = Field(default_factory=lambda: uuid4().hex)
    expense_id: str
    expense_name: str
    requested_at: dt.datetime = Field(default_factory=dt.datetime.now)


class NoticeLevel(str, Enum):
    """How loudly a notice is shown."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class UserNotice(BaseModel):
    """A dismissable, non-fatal message for the user."""

    level: NoticeLevel = NoticeLevel.INFO
    title: str
    message: str


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in user input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_a_number', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of validating a new-expense form.

    On success carries the cleaned name and parsed amount.
    """

    issues: list[ValidationIssue] = Field(default_factory=list)
    clean_name: Optional[str] = None
    parsed_amount: Optional[Decimal] = None

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
