"""
Tests for the ledger view-model (add, delete, derived views).
"""

import asyncio
import json
from decimal import Decimal

import pytest

from wallet.audit import AuditLogger
from wallet.ledger import LedgerViewModel
from wallet.models.expense import ExpenseCategory, NoticeLevel
from wallet.services.storage import (
    DEFAULT_STORAGE_KEY,
    FileKeyValueStore,
    InMemoryKeyValueStore,
    JsonLedgerStorage,
    StorageUnavailable,
)
from wallet.validation import InvalidAmount, ValidationError

from tests.conftest import FailingKeyValueStore


class RecordingLogger:
    """Captures structlog-style calls."""

    def __init__(self):
        self.events = []

    def info(self, event, **kw):
        self.events.append(("info", kw["event_type"]))

    def warning(self, event, **kw):
        self.events.append(("warning", kw["event_type"]))

    def error(self, event, **kw):
        self.events.append(("error", kw["event_type"]))

    @property
    def types(self):
        return [event_type for _, event_type in self.events]


def make_ledger(storage, today, audit_logger=None):
    ledger = LedgerViewModel(storage, audit_logger=audit_logger, today=today)
    asyncio.run(ledger.initialize())
    return ledger


def persisted(medium):
    return json.loads(medium.snapshot()[DEFAULT_STORAGE_KEY])


class TestInitialize:
    """Tests for the startup load."""

    def test_empty_store(self, storage, today):
        ledger = make_ledger(storage, today)
        assert ledger.is_initialized
        assert ledger.records == []
        assert ledger.pop_notices() == []

    def test_loads_persisted_records(self, medium, storage, today):
        first = make_ledger(storage, today)
        asyncio.run(first.add_expense("Coffee", "3.50", "2024-05-01", "Food", "2024-05"))

        reopened = make_ledger(JsonLedgerStorage(medium, today=today), today)

        assert [r.name for r in reopened.records] == ["Coffee"]

    def test_load_failure_starts_empty_with_notice(self, today):
        recorder = RecordingLogger()
        storage = JsonLedgerStorage(FailingKeyValueStore(), today=today)

        ledger = make_ledger(storage, today, AuditLogger(recorder))

        assert ledger.records == []
        notices = ledger.pop_notices()
        assert len(notices) == 1
        assert notices[0].level == NoticeLevel.WARNING
        assert notices[0].message == "Your expenses could not be loaded."
        assert ledger.pop_notices() == []
        assert recorder.types == ["ledger_load_failed"]


class TestAddExpense:
    """Tests for add_expense."""

    def test_add_prepends_and_persists(self, medium, storage, today):
        ledger = make_ledger(storage, today)
        asyncio.run(ledger.add_expense("Coffee", "3.50", "2024-05-01", "Food", "2024-05"))
        bus = asyncio.run(ledger.add_expense("Bus", "1.20", "2024-05-02", "Transport", "2024-05"))

        assert len(ledger.records) == 2
        assert ledger.records[0] == bus
        assert [item["name"] for item in persisted(medium)] == ["Bus", "Coffee"]

    def test_add_trims_name_and_parses_amount(self, storage, today):
        ledger = make_ledger(storage, today)
        record = asyncio.run(ledger.add_expense("  Lunch ", " 7.25 "))
        assert record.name == "Lunch"
        assert record.amount == Decimal("7.25")

    def test_add_defaults(self, storage, today):
        ledger = make_ledger(storage, today)
        record = asyncio.run(ledger.add_expense("Lunch", "7"))
        assert record.date == "2024-05-15"
        assert record.period == "2024-05"
        assert record.category == ExpenseCategory.FOOD.value

    def test_add_accepts_enum_and_free_text_category(self, storage, today):
        ledger = make_ledger(storage, today)
        health = asyncio.run(ledger.add_expense("Pills", "4", category=ExpenseCategory.HEALTH))
        pets = asyncio.run(ledger.add_expense("Vet", "30", category="Pets"))
        assert health.category == "Health"
        assert pets.category == "Pets"

    def test_date_is_not_validated(self, storage, today):
        ledger = make_ledger(storage, today)
        record = asyncio.run(ledger.add_expense("Trip", "50", date="2099-13-45"))
        assert record.date == "2099-13-45"

    def test_empty_name_rejected_store_unchanged(self, medium, storage, today):
        ledger = make_ledger(storage, today)

        with pytest.raises(ValidationError):
            asyncio.run(ledger.add_expense(name="", amount="10"))

        assert ledger.records == []
        assert medium.snapshot() == {}

    @pytest.mark.parametrize("amount", ["", "abc", "0", "-5"])
    def test_bad_amount_rejected(self, storage, today, amount):
        ledger = make_ledger(storage, today)
        with pytest.raises(InvalidAmount):
            asyncio.run(ledger.add_expense("Coffee", amount))
        assert ledger.records == []

    def test_bad_period_rejected(self, storage, today):
        ledger = make_ledger(storage, today)
        with pytest.raises(ValidationError):
            asyncio.run(ledger.add_expense("Coffee", "1", period="May"))

    def test_save_failure_keeps_previous_state(self, today):
        medium = FailingKeyValueStore(fail_reads=False, fail_writes=False)
        recorder = RecordingLogger()
        ledger = make_ledger(JsonLedgerStorage(medium, today=today), today, AuditLogger(recorder))
        asyncio.run(ledger.add_expense("Coffee", "3.50"))

        medium.fail_writes = True
        with pytest.raises(StorageUnavailable):
            asyncio.run(ledger.add_expense("Bus", "1.20"))

        assert [r.name for r in ledger.records] == ["Coffee"]
        assert "save_failed" in recorder.types

    def test_audit_events(self, storage, today):
        recorder = RecordingLogger()
        ledger = make_ledger(storage, today, AuditLogger(recorder))

        asyncio.run(ledger.add_expense("Coffee", "3.50"))
        with pytest.raises(ValidationError):
            asyncio.run(ledger.add_expense("", "1"))

        assert recorder.types == ["ledger_loaded", "expense_added", "validation_failed"]


class TestDelete:
    """Tests for delete_expense and the two-phase delete."""

    def test_delete_is_idempotent(self, medium, storage, today):
        ledger = make_ledger(storage, today)
        coffee = asyncio.run(ledger.add_expense("Coffee", "3.50"))

        assert asyncio.run(ledger.delete_expense(coffee.id)) is True
        assert asyncio.run(ledger.delete_expense(coffee.id)) is False
        assert ledger.records == []
        assert persisted(medium) == []

    def test_delete_unknown_id_does_not_touch_storage(self, today):
        medium = FailingKeyValueStore(fail_reads=False, fail_writes=True)
        ledger = make_ledger(JsonLedgerStorage(medium, today=today), today)

        assert asyncio.run(ledger.delete_expense("missing")) is False
        assert medium.write_attempts == 0

    def test_request_then_confirm(self, storage, today):
        ledger = make_ledger(storage, today)
        coffee = asyncio.run(ledger.add_expense("Coffee", "3.50"))

        confirmation = asyncio.run(ledger.request_delete(coffee.id))
        assert confirmation.expense_name == "Coffee"
        assert len(ledger.records) == 1

        assert asyncio.run(ledger.confirm_delete(confirmation.token)) is True
        assert ledger.records == []

    def test_token_is_single_use(self, storage, today):
        ledger = make_ledger(storage, today)
        coffee = asyncio.run(ledger.add_expense("Coffee", "3.50"))
        confirmation = asyncio.run(ledger.request_delete(coffee.id))

        asyncio.run(ledger.confirm_delete(confirmation.token))

        assert asyncio.run(ledger.confirm_delete(confirmation.token)) is False

    def test_cancel_keeps_record(self, storage, today):
        ledger = make_ledger(storage, today)
        coffee = asyncio.run(ledger.add_expense("Coffee", "3.50"))
        confirmation = asyncio.run(ledger.request_delete(coffee.id))

        assert asyncio.run(ledger.cancel_delete(confirmation.token)) is True
        assert asyncio.run(ledger.confirm_delete(confirmation.token)) is False
        assert ledger.get_expense(coffee.id) == coffee

    def test_request_unknown_id(self, storage, today):
        ledger = make_ledger(storage, today)
        assert asyncio.run(ledger.request_delete("missing")) is None

    def test_delete_save_failure_keeps_record(self, today):
        medium = FailingKeyValueStore(fail_reads=False, fail_writes=False)
        ledger = make_ledger(JsonLedgerStorage(medium, today=today), today)
        coffee = asyncio.run(ledger.add_expense("Coffee", "3.50"))

        medium.fail_writes = True
        with pytest.raises(StorageUnavailable):
            asyncio.run(ledger.delete_expense(coffee.id))

        assert ledger.get_expense(coffee.id) == coffee


class TestDerivedViews:
    """Tests for totals, breakdowns and periods through the view-model."""

    def test_coffee_and_bus_month(self, storage, today):
        ledger = make_ledger(storage, today)

        coffee = asyncio.run(ledger.add_expense("Coffee", 3.50, "2024-05-01", "Food", "2024-05"))
        assert len(ledger.records) == 1
        assert ledger.format_total(ledger.filter_by_period("2024-05")) == "3.50"

        asyncio.run(ledger.add_expense("Bus", 1.20, "2024-05-02", "Transport", "2024-05"))
        may = ledger.filter_by_period("2024-05")
        assert ledger.format_total(may) == "4.70"
        breakdown = ledger.category_breakdown(may)
        assert breakdown["Food"].total == Decimal("3.5")
        assert breakdown["Food"].percentage.quantize(Decimal("0.1")) == Decimal("74.5")
        assert breakdown["Transport"].total == Decimal("1.2")
        assert breakdown["Transport"].percentage.quantize(Decimal("0.1")) == Decimal("25.5")

        asyncio.run(ledger.delete_expense(coffee.id))
        may = ledger.filter_by_period("2024-05")
        assert ledger.format_total(may) == "1.20"
        breakdown = ledger.category_breakdown(may)
        assert list(breakdown) == ["Transport"]
        assert breakdown["Transport"].percentage.quantize(Decimal("0.1")) == Decimal("100.0")

    def test_views_follow_mutations(self, storage, today):
        ledger = make_ledger(storage, today)
        asyncio.run(ledger.add_expense("Novel", "12", category="Books", period="2024-04"))
        assert ledger.monthly_summary("2024-04").total == Decimal("12")

        asyncio.run(ledger.add_expense("Comic", "3", category="Books", period="2024-04"))
        assert ledger.monthly_summary("2024-04").total == Decimal("15")

    def test_monthly_summary_defaults_to_current_month(self, storage, today):
        ledger = make_ledger(storage, today)
        asyncio.run(ledger.add_expense("Lunch", "7"))
        summary = ledger.monthly_summary()
        assert summary.period == "2024-05"
        assert summary.count == 1

    def test_available_periods_and_totals(self, storage, today):
        ledger = make_ledger(storage, today)
        asyncio.run(ledger.add_expense("Novel", "12", period="2024-03"))
        asyncio.run(ledger.add_expense("Lunch", "7"))

        assert ledger.available_periods() == ["2024-05", "2024-03"]
        totals = ledger.totals_by_period()
        assert totals == {"2024-05": Decimal("7"), "2024-03": Decimal("12")}
        assert sum(totals.values(), Decimal("0")) == ledger.total_for()

    def test_records_is_a_copy(self, storage, today):
        ledger = make_ledger(storage, today)
        asyncio.run(ledger.add_expense("Lunch", "7"))
        ledger.records.clear()
        assert len(ledger.records) == 1


class TestStoredAmounts:
    """What is kept in memory is what comes back after a restart."""

    @pytest.mark.parametrize("amount", ["1e-400", "1e5000", "0.12345678901234567891"])
    def test_unstorable_amount_rejected(self, medium, storage, today, amount):
        ledger = make_ledger(storage, today)
        asyncio.run(ledger.add_expense("Coffee", "3.50"))
        before = medium.snapshot()

        with pytest.raises(InvalidAmount):
            asyncio.run(ledger.add_expense("Dust", amount))

        assert [r.name for r in ledger.records] == ["Coffee"]
        assert medium.snapshot() == before

    def test_reopened_ledger_matches_memory(self, medium, storage, today):
        ledger = make_ledger(storage, today)
        asyncio.run(ledger.add_expense("Coffee", "3.50"))
        asyncio.run(ledger.add_expense("Laptop", "999999999999.99"))
        asyncio.run(ledger.add_expense("Gum", "0.01"))

        reopened = make_ledger(JsonLedgerStorage(medium, today=today), today)

        assert [r.amount for r in reopened.records] == [r.amount for r in ledger.records]
        assert reopened.total_for() == ledger.total_for()

    def test_unreadable_file_starts_empty(self, tmp_path, today):
        (tmp_path / "expenses_data.json").write_bytes(b"\xff\xfe[garbage")
        storage = JsonLedgerStorage(FileKeyValueStore(tmp_path), today=today)

        ledger = make_ledger(storage, today)

        assert ledger.records == []
        assert ledger.pop_notices()[0].message == "Your expenses could not be loaded."
