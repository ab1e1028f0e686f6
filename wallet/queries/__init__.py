"""Ledger aggregation package."""

from wallet.queries.aggregations import (
    available_periods,
    category_breakdown,
    filter_by_period,
    format_amount,
    format_percentage,
    monthly_summary,
    total_for,
    totals_by_period,
)

__all__ = [
    "available_periods",
    "category_breakdown",
    "filter_by_period",
    "format_amount",
    "format_percentage",
    "monthly_summary",
    "total_for",
    "totals_by_period",
]
