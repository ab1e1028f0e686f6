"""
Tests for ledger aggregations (pure functions).
"""

from datetime import date
from decimal import Decimal

from wallet.models.expense import ExpenseRecord
from wallet.queries import (
    available_periods,
    category_breakdown,
    filter_by_period,
    format_amount,
    format_percentage,
    monthly_summary,
    total_for,
    totals_by_period,
)


def record(name, amount, category, period):
    return ExpenseRecord(
        name=name,
        amount=Decimal(amount),
        date=f"{period}-01",
        category=category,
        period=period,
    )


LEDGER = [
    record("Bus", "1.20", "Transport", "2024-05"),
    record("Coffee", "3.50", "Food", "2024-05"),
    record("Novel", "12", "Books", "2024-04"),
    record("Cinema", "8.75", "Entertainment", "2024-04"),
    record("Pharmacy", "5.05", "Health", "2023-12"),
]


class TestFilteringAndTotals:
    """Tests for filter_by_period and total_for."""

    def test_filter_keeps_order(self):
        selected = filter_by_period(LEDGER, "2024-05")
        assert [r.name for r in selected] == ["Bus", "Coffee"]

    def test_filter_unknown_period_is_empty(self):
        assert filter_by_period(LEDGER, "2020-01") == []

    def test_total_for_empty_is_zero(self):
        assert total_for([]) == Decimal("0")

    def test_total_for_is_exact(self):
        assert total_for(filter_by_period(LEDGER, "2024-05")) == Decimal("4.70")

    def test_period_totals_sum_to_overall_total(self):
        periods = {r.period for r in LEDGER}
        per_period = sum((total_for(filter_by_period(LEDGER, p)) for p in periods), Decimal("0"))
        assert per_period == total_for(LEDGER)

    def test_format_amount(self):
        assert format_amount(Decimal("3.5")) == "3.50"
        assert format_amount(Decimal("4.705")) == "4.71"
        assert format_amount(Decimal("0")) == "0.00"

    def test_format_percentage(self):
        assert format_percentage(Decimal("74.468")) == "74.5"
        assert format_percentage(Decimal("100")) == "100.0"


class TestCategoryBreakdown:
    """Tests for category_breakdown."""

    def test_empty_when_no_records(self):
        assert category_breakdown([]) == {}

    def test_percentages_for_month(self):
        breakdown = category_breakdown(filter_by_period(LEDGER, "2024-05"))

        assert list(breakdown) == ["Food", "Transport"]
        assert breakdown["Food"].total == Decimal("3.50")
        assert format_percentage(breakdown["Food"].percentage) == "74.5"
        assert format_percentage(breakdown["Transport"].percentage) == "25.5"

    def test_percentages_sum_to_hundred(self):
        breakdown = category_breakdown(LEDGER)
        total = sum((share.percentage for share in breakdown.values()), Decimal("0"))
        assert abs(total - Decimal("100")) < Decimal("0.0001")

    def test_counts_per_category(self):
        ledger = LEDGER + [record("Tea", "2", "Food", "2024-05")]
        breakdown = category_breakdown(ledger)
        assert breakdown["Food"].count == 2
        assert breakdown["Books"].count == 1

    def test_unknown_categories_are_grouped_as_stored(self):
        breakdown = category_breakdown([record("Vet", "30", "Pets", "2024-05")])
        assert breakdown["Pets"].percentage == Decimal("100")


class TestPeriods:
    """Tests for available_periods, monthly_summary and totals_by_period."""

    def test_available_periods_descending_with_current(self):
        periods = available_periods(LEDGER, date(2024, 6, 2))
        assert periods == ["2024-06", "2024-05", "2024-04", "2023-12"]

    def test_available_periods_no_duplicates(self):
        periods = available_periods(LEDGER, date(2024, 5, 20))
        assert periods == ["2024-05", "2024-04", "2023-12"]

    def test_monthly_summary(self):
        summary = monthly_summary(LEDGER, "2024-04")
        assert summary.count == 2
        assert summary.total == Decimal("20.75")
        assert list(summary.breakdown) == ["Books", "Entertainment"]

    def test_monthly_summary_empty_period(self):
        summary = monthly_summary(LEDGER, "2022-01")
        assert summary.total == Decimal("0")
        assert summary.breakdown == {}

    def test_totals_by_period(self):
        totals = totals_by_period(LEDGER, ["2024-06"])
        assert list(totals) == ["2024-06", "2024-05", "2024-04", "2023-12"]
        assert totals["2024-06"] == Decimal("0")
        assert sum(totals.values(), Decimal("0")) == total_for(LEDGER)
