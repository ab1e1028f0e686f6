"""
Ledger Aggregations

Pure functions over lists of expenses:
- No I/O operations
- No side effects
- Recomputed on every read, never cached across mutations

All sums are Decimal at full precision. Rounding to cents happens only in
format_amount, for display.
"""

from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from wallet.models.expense import CategoryTotal, ExpenseRecord, MonthlySummary, period_for


CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")
HUNDRED = Decimal("100")


def filter_by_period(records: Iterable[ExpenseRecord], period: str) -> list[ExpenseRecord]:
    """Records belonging to `period`, keeping ledger order (newest first)."""
    return [record for record in records if record.period == period]


def total_for(records: Iterable[ExpenseRecord]) -> Decimal:
    """Sum of amounts at full precision."""
    return sum((record.amount for record in records), Decimal("0"))


def format_amount(amount: Decimal) -> str:
    """Two-decimal display string, rounding half up ('3.5' -> '3.50')."""
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


def format_percentage(percentage: Decimal) -> str:
    """One-decimal display string ('74.468...' -> '74.5')."""
    return str(percentage.quantize(TENTHS, rounding=ROUND_HALF_UP))


def category_breakdown(records: Sequence[ExpenseRecord]) -> dict[str, CategoryTotal]:
    """
    Per-category totals and share of the grand total.

    Categories without records are omitted. A zero grand total yields an
    empty breakdown instead of dividing by zero. Ordered by total,
    largest first; ties keep first-seen order.
    """
    grand_total = total_for(records)
    if grand_total == 0:
        return {}

    sums: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    counts: dict[str, int] = defaultdict(int)
    for record in records:
        sums[record.category] += record.amount
        counts[record.category] += 1

    ordered = sorted(sums.items(), key=lambda item: item[1], reverse=True)

    return {
        category: CategoryTotal(
            category=category,
            total=total,
            percentage=total / grand_total * HUNDRED,
            count=counts[category],
        )
        for category, total in ordered
    }


def available_periods(records: Iterable[ExpenseRecord], today: date) -> list[str]:
    """
    Distinct periods present, most recent first.

    The current month is always included so a new month can be selected
    before anything was spent in it.
    """
    periods = {record.period for record in records}
    periods.add(period_for(today))
    return sorted(periods, reverse=True)


def monthly_summary(
    records: Sequence[ExpenseRecord],
    period: str,
) -> MonthlySummary:
    """Records, total and breakdown for one period."""
    selected = filter_by_period(records, period)
    return MonthlySummary(
        period=period,
        records=selected,
        total=total_for(selected),
        breakdown=category_breakdown(selected),
    )


def totals_by_period(
    records: Iterable[ExpenseRecord],
    periods: Optional[Iterable[str]] = None,
) -> dict[str, Decimal]:
    """
    Total per period, most recent first.

    When `periods` is given, each listed period appears (zero if empty).
    """
    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    for period in periods or ():
        totals[period] += 0
    for record in records:
        totals[record.period] += record.amount
    return dict(sorted(totals.items(), reverse=True))
