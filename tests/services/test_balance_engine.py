"""
Tests for the balance engine.

The engine is pure, so these tests use plain objects instead
of database rows.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from client_ledger.exceptions import ComputationInvariantViolation
from client_ledger.models.enums import SortField, SortOrder
from client_ledger.services import balance_engine
from client_ledger.services.balance_engine import (
    check_final_balance,
    compute_balances,
    final_balance,
    to_decimal,
)


@dataclass
class Line:
    id: int
    date: date
    debit_amount: Decimal
    credit_amount: Decimal
    created_at: datetime


BASE_TIME = datetime(2024, 3, 1, 9, 0, 0)


def line(id, on, debit=0, credit=0, created_offset=None):
    """Build a line. created_at follows id unless an offset is given."""
    offset = id if created_offset is None else created_offset
    return Line(
        id=id,
        date=date.fromisoformat(on),
        debit_amount=Decimal(str(debit)),
        credit_amount=Decimal(str(credit)),
        created_at=BASE_TIME + timedelta(minutes=offset),
    )


def balances_by_id(rows):
    return {r.id: r.balance_after for r in rows}


@pytest.fixture
def three_lines():
    # Deliberately out of order
    return [
        line(3, "2024-01-10", debit=300),
        line(1, "2024-01-01", debit=500),
        line(2, "2024-01-05", credit=200),
    ]


class TestBasics:

    def test_empty_input_returns_empty_list(self):
        assert compute_balances([]) == []

    def test_single_debit(self):
        rows = compute_balances([line(1, "2024-01-01", debit=100)])
        assert rows[0].balance_after == Decimal("100")

    def test_single_credit(self):
        rows = compute_balances([line(1, "2024-01-01", credit=100)])
        assert rows[0].balance_after == Decimal("-100")

    def test_output_keeps_every_transaction(self, three_lines):
        rows = compute_balances(three_lines)
        assert len(rows) == 3
        assert {r.id for r in rows} == {1, 2, 3}
        assert {id(r.transaction) for r in rows} == {id(t) for t in three_lines}

    def test_input_list_is_not_modified(self, three_lines):
        before = [t.id for t in three_lines]
        compute_balances(three_lines, "date", "desc")
        assert [t.id for t in three_lines] == before


class TestChronologicalScenario:

    def test_balances_in_date_order(self, three_lines):
        rows = compute_balances(three_lines, SortField.DATE, SortOrder.ASC)
        assert [r.id for r in rows] == [1, 2, 3]
        assert [r.balance_after for r in rows] == [
            Decimal("500"), Decimal("300"), Decimal("600"),
        ]

    def test_descending_display_keeps_balances(self, three_lines):
        rows = compute_balances(three_lines, SortField.DATE, SortOrder.DESC)
        assert [r.id for r in rows] == [3, 2, 1]
        assert [r.balance_after for r in rows] == [
            Decimal("600"), Decimal("300"), Decimal("500"),
        ]

    def test_accepts_plain_strings(self, three_lines):
        by_enum = compute_balances(three_lines, SortField.DATE, SortOrder.DESC)
        by_str = compute_balances(three_lines, "date", "desc")
        assert by_enum == by_str

    def test_recompute_after_removing_middle_entry(self, three_lines):
        remaining = [t for t in three_lines if t.id != 2]
        rows = compute_balances(remaining)
        assert [r.balance_after for r in rows] == [
            Decimal("500"), Decimal("800"),
        ]


class TestOrdering:

    def test_asc_and_desc_give_same_balance_per_id(self, three_lines):
        for field in SortField:
            asc = compute_balances(three_lines, field, SortOrder.ASC)
            desc = compute_balances(three_lines, field, SortOrder.DESC)
            assert balances_by_id(asc) == balances_by_id(desc)
            assert [r.id for r in desc] == [r.id for r in reversed(asc)]

    def test_backdated_entry_changes_date_order_not_created_order(self):
        # Entered last, but dated first
        lines = [
            line(1, "2024-02-01", debit=100),
            line(2, "2024-02-10", debit=50),
            line(3, "2024-01-15", credit=30),
        ]

        by_date = balances_by_id(compute_balances(lines, SortField.DATE))
        assert by_date == {
            3: Decimal("-30"), 1: Decimal("70"), 2: Decimal("120"),
        }

        by_created = balances_by_id(
            compute_balances(lines, SortField.CREATED_AT)
        )
        assert by_created == {
            1: Decimal("100"), 2: Decimal("150"), 3: Decimal("120"),
        }

    def test_same_date_ties_broken_by_id(self):
        lines = [
            line(7, "2024-01-01", credit=40),
            line(2, "2024-01-01", debit=100),
            line(5, "2024-01-01", debit=10),
        ]
        rows = compute_balances(lines)
        assert [r.id for r in rows] == [2, 5, 7]
        assert [r.balance_after for r in rows] == [
            Decimal("100"), Decimal("110"), Decimal("70"),
        ]

    def test_ties_are_deterministic_regardless_of_input_order(self):
        lines = [
            line(1, "2024-01-01", debit=10, created_offset=0),
            line(2, "2024-01-01", credit=5, created_offset=0),
            line(3, "2024-01-01", debit=20, created_offset=0),
        ]
        expected = compute_balances(lines, SortField.CREATED_AT)
        for shuffled in (lines[::-1], [lines[1], lines[2], lines[0]]):
            assert compute_balances(shuffled, SortField.CREATED_AT) == expected

    def test_repeated_calls_are_identical(self, three_lines):
        first = compute_balances(three_lines, "created_at", "desc")
        second = compute_balances(three_lines, "created_at", "desc")
        assert first == second

    def test_unknown_sort_field_rejected(self, three_lines):
        with pytest.raises(ValueError):
            compute_balances(three_lines, "amount")

    def test_unknown_sort_order_rejected(self, three_lines):
        with pytest.raises(ValueError):
            compute_balances(three_lines, "date", "sideways")


class TestArithmetic:

    def test_final_balance_equals_net_sum(self):
        lines = [
            line(i, f"2024-01-{(i % 28) + 1:02d}",
                 debit=(i * 37) % 500 if i % 3 else 0,
                 credit=(i * 13) % 300 if i % 3 == 0 else 0)
            for i in range(1, 200)
        ]
        rows = compute_balances(lines)
        expected = sum(l.debit_amount for l in lines) - sum(
            l.credit_amount for l in lines
        )
        assert rows[-1].balance_after == expected
        assert final_balance(lines) == expected

    def test_no_float_drift(self):
        # 0.1 added a thousand times drifts in binary floating point
        lines = [
            Line(i, date(2024, 1, 1), 0.1, 0, BASE_TIME)
            for i in range(1, 1001)
        ]
        rows = compute_balances(lines)
        assert rows[-1].balance_after == Decimal("100")

    def test_mixed_cents(self):
        lines = [
            line(1, "2024-01-01", debit="1999.99"),
            line(2, "2024-01-02", credit="0.01"),
            line(3, "2024-01-03", credit="1000.10"),
        ]
        rows = compute_balances(lines)
        assert [r.balance_after for r in rows] == [
            Decimal("1999.99"), Decimal("1999.98"), Decimal("999.88"),
        ]

    def test_both_sides_on_one_entry(self):
        rows = compute_balances([line(1, "2024-01-01", debit=100, credit=40)])
        assert rows[0].balance_after == Decimal("60")

    def test_none_amount_counts_as_zero(self):
        entry = Line(1, date(2024, 1, 1), None, Decimal("25"), BASE_TIME)
        assert compute_balances([entry])[0].balance_after == Decimal("-25")

    def test_to_decimal(self):
        assert to_decimal(None) == Decimal("0")
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal("12.50") == Decimal("12.50")


class TestInvariantCheck:

    def test_mismatch_raises(self):
        entry = line(1, "2024-01-01", debit=100)
        wrong = [balance_engine.TransactionWithBalance(entry, Decimal("99"))]
        with pytest.raises(ComputationInvariantViolation):
            check_final_balance(wrong, [entry])

    def test_engine_fails_loudly_on_bad_arithmetic(self, monkeypatch):
        monkeypatch.setattr(
            balance_engine, "net_amount", lambda t: Decimal("1")
        )
        monkeypatch.setattr(
            balance_engine, "final_balance", lambda ts: Decimal("0")
        )
        with pytest.raises(ComputationInvariantViolation):
            compute_balances([line(1, "2024-01-01", debit=5)])
