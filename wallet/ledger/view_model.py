"""
Ledger View-Model

This module owns the in-memory ledger and every rule for changing it.

Flow for each mutation:
1. Validate input (add only)
2. Build the new full collection
3. Persist the full collection
4. Only then swap it into memory

DESIGN DECISION: Memory is updated after the write succeeds, never before.
If the medium fails, the screen keeps showing the last persisted state
and the StorageUnavailable error goes up to the UI as a warning.

Derived views (period filter, totals, breakdown) are recomputed on every
read. Nothing derived is cached across mutations.
"""

from datetime import date as Date
from decimal import Decimal
from typing import Callable, Optional, Sequence, Union

from wallet.audit import AuditLogger, get_logger
from wallet.models.expense import (
    CategoryTotal,
    DeleteConfirmation,
    ExpenseCategory,
    ExpenseRecord,
    MonthlySummary,
    NoticeLevel,
    UserNotice,
    period_for,
)
from wallet.queries import aggregations
from wallet.services.storage import LedgerStorageInterface, StorageUnavailable
from wallet.validation import ExpenseValidator


logger = get_logger(__name__)


class LedgerViewModel:
    """
    Add, delete and summarize expenses.

    Create one per session, call initialize() once, then route every
    change through add_expense / confirm_delete.
    """

    def __init__(
        self,
        storage: LedgerStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
        today: Optional[Callable[[], Date]] = None,
    ):
        self._storage = storage
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger
        self._today = today or Date.today

        self._records: list[ExpenseRecord] = []
        self._pending_deletes: dict[str, DeleteConfirmation] = {}
        self._notices: list[UserNotice] = []
        self._initialized = False

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def records(self) -> list[ExpenseRecord]:
        """Copy of the ledger, newest first."""
        return list(self._records)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def current_period(self) -> str:
        return period_for(self._today())

    def get_expense(self, expense_id: str) -> Optional[ExpenseRecord]:
        for record in self._records:
            if record.id == expense_id:
                return record
        return None

    def pop_notices(self) -> list[UserNotice]:
        """Return and clear pending user notices."""
        notices, self._notices = self._notices, []
        return notices

    async def initialize(self) -> list[ExpenseRecord]:
        """
        Load the ledger once at startup.

        A failed load never crashes the app: the ledger starts empty and a
        warning notice is queued for the user.
        """
        try:
            records = await self._storage.load()
        except StorageUnavailable as e:
            records = []
            self._notices.append(UserNotice(
                level=NoticeLevel.WARNING,
                title="Error",
                message="Your expenses could not be loaded.",
            ))
            if self._audit_logger:
                await self._audit_logger.log_ledger_load_failed(self._storage.storage_key, str(e))
        else:
            if self._audit_logger:
                await self._audit_logger.log_ledger_loaded(len(records), self._storage.storage_key)

        self._records = list(records)
        self._initialized = True
        return self.records

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def _persist(self, records: list[ExpenseRecord], operation: str) -> None:
        try:
            await self._storage.save(records)
        except StorageUnavailable as e:
            logger.warning("ledger_mutation_not_applied", operation=operation, error=str(e))
            if self._audit_logger:
                await self._audit_logger.log_save_failed(operation, str(e))
            raise
        self._records = records

    async def add_expense(
        self,
        name: str,
        amount: Union[str, Decimal, float, int],
        date: Optional[str] = None,
        category: Union[ExpenseCategory, str] = ExpenseCategory.FOOD,
        period: Optional[str] = None,
    ) -> ExpenseRecord:
        """
        Validate, prepend and persist a new expense.

        Args:
            name: What the money was spent on (trimmed)
            amount: Raw form input; must parse to a number > 0
            date: Free-text date; defaults to today (YYYY-MM-DD) when blank
            category: Any category label; unknown values are kept as typed
            period: Selected month (YYYY-MM); defaults to the current month

        Raises:
            ValidationError: If the name is empty (or the period malformed)
            InvalidAmount: If the amount is not a positive number
            StorageUnavailable: If the ledger could not be saved
        """
        result = self._validator.validate(name, amount, period)
        if not result.is_valid:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    [{"field": i.field, "type": i.issue_type} for i in result.issues]
                )
            self._validator.raise_for_issues(result)

        today = self._today()
        category_value = category.value if isinstance(category, ExpenseCategory) else str(category)

        record = ExpenseRecord(
            name=result.clean_name,
            amount=result.parsed_amount,
            date=(date or "").strip() or today.isoformat(),
            category=category_value,
            period=period or period_for(today),
        )

        await self._persist([record] + self._records, "add")

        if self._audit_logger:
            await self._audit_logger.log_expense_added(
                expense_id=record.id,
                name=record.name,
                amount=aggregations.format_amount(record.amount),
                category=record.category,
                period=record.period,
            )
        return record

    async def delete_expense(self, expense_id: str) -> bool:
        """
        Remove an expense and persist.

        Idempotent: an unknown id changes nothing and returns False.

        Raises:
            StorageUnavailable: If the ledger could not be saved
        """
        remaining = [record for record in self._records if record.id != expense_id]
        if len(remaining) == len(self._records):
            return False

        await self._persist(remaining, "delete")

        if self._audit_logger:
            await self._audit_logger.log_expense_deleted(expense_id, len(remaining))
        return True

    async def request_delete(self, expense_id: str) -> Optional[DeleteConfirmation]:
        """
        First phase of a delete: returns a token the user must confirm.

        Returns None if the expense does not exist.
        """
        record = self.get_expense(expense_id)
        if record is None:
            return None

        confirmation = DeleteConfirmation(expense_id=record.id, expense_name=record.name)
        self._pending_deletes[confirmation.token] = confirmation
        if self._audit_logger:
            await self._audit_logger.log_delete_requested(record.id, confirmation.token)
        return confirmation

    async def confirm_delete(self, token: str) -> bool:
        """
        Second phase of a delete.

        Unknown or already-used tokens are a no-op returning False. If the
        save fails the token is spent; the user asks again.
        """
        confirmation = self._pending_deletes.pop(token, None)
        if confirmation is None:
            return False
        return await self.delete_expense(confirmation.expense_id)

    async def cancel_delete(self, token: str) -> bool:
        """Drop a pending delete without touching the ledger."""
        confirmation = self._pending_deletes.pop(token, None)
        if confirmation is None:
            return False
        if self._audit_logger:
            await self._audit_logger.log_delete_cancelled(confirmation.expense_id)
        return True

    # -------------------------------------------------------------------------
    # Derived views (recomputed on every call)
    # -------------------------------------------------------------------------

    def filter_by_period(
        self,
        period: str,
        records: Optional[Sequence[ExpenseRecord]] = None,
    ) -> list[ExpenseRecord]:
        return aggregations.filter_by_period(
            self._records if records is None else records, period
        )

    def total_for(self, records: Optional[Sequence[ExpenseRecord]] = None) -> Decimal:
        return aggregations.total_for(self._records if records is None else records)

    def format_total(self, records: Optional[Sequence[ExpenseRecord]] = None) -> str:
        """Total rounded to cents for display, e.g. '4.70'."""
        return aggregations.format_amount(self.total_for(records))

    def category_breakdown(
        self,
        records: Optional[Sequence[ExpenseRecord]] = None,
    ) -> dict[str, CategoryTotal]:
        return aggregations.category_breakdown(
            self._records if records is None else records
        )

    def available_periods(
        self,
        records: Optional[Sequence[ExpenseRecord]] = None,
    ) -> list[str]:
        return aggregations.available_periods(
            self._records if records is None else records, self._today()
        )

    def monthly_summary(self, period: Optional[str] = None) -> MonthlySummary:
        """Statistics for `period` (default: the current month)."""
        return aggregations.monthly_summary(self._records, period or self.current_period)

    def totals_by_period(self) -> dict[str, Decimal]:
        """Total per available period, most recent first."""
        return aggregations.totals_by_period(self._records, self.available_periods())
