"""
Unit tests for the due-date sweep.

These tests verify:
1. Overdue detection relative to a reference date
2. Installments leave the sweep once paid
3. Due-on and upcoming windows
4. Overdue summaries
"""

from datetime import date, timedelta

from credit_ledger.domain.entities import Credit, PaymentMethod
from credit_ledger.service.ledger import (
    apply,
    create_schedule,
    find_due_on,
    find_overdue,
    find_upcoming,
    summarize_overdue,
)


AS_OF = date(2025, 6, 1)


def make_credit(first_due: date, total: int = 900, count: int = 3) -> Credit:
    return Credit(
        customer_document="45678912",
        total_cents=total,
        start_date=first_due - timedelta(days=30),
        installments=create_schedule(total, count, first_due, 30),
    )


class TestFindOverdue:
    """Tests for find_overdue."""

    def test_includes_past_due_pending_installment(self):
        credit = make_credit(AS_OF - timedelta(days=10))

        overdue = find_overdue(credit.installments, AS_OF)

        assert [inst.number for inst in overdue] == [1]

    def test_due_today_not_included(self):
        credit = make_credit(AS_OF)

        assert find_overdue(credit.installments, AS_OF) == []

    def test_excluded_after_full_payment(self):
        credit = make_credit(AS_OF - timedelta(days=10))
        assert len(find_overdue(credit.installments, AS_OF)) == 1

        apply(credit, 300, AS_OF, PaymentMethod.CASH, "cashier")

        assert find_overdue(credit.installments, AS_OF) == []

    def test_partial_payment_keeps_installment_overdue(self):
        credit = make_credit(AS_OF - timedelta(days=10))

        apply(credit, 100, AS_OF, PaymentMethod.CASH, "cashier")

        overdue = find_overdue(credit.installments, AS_OF)
        assert len(overdue) == 1
        assert overdue[0].pending_cents == 200

    def test_ordered_by_due_date_across_credits(self):
        older = make_credit(AS_OF - timedelta(days=50))
        newer = make_credit(AS_OF - timedelta(days=5))

        overdue = find_overdue(newer.installments + older.installments, AS_OF)

        due_dates = [inst.due_date for inst in overdue]
        assert due_dates == sorted(due_dates)

    def test_reference_date_defaults_to_today(self):
        today = date.today()
        past = make_credit(today - timedelta(days=10))
        future = make_credit(today + timedelta(days=10))

        overdue = find_overdue(past.installments + future.installments)

        assert [inst.credit_id for inst in overdue] == [past.id]
        assert overdue[0].credit_id == older.id


class TestWindows:
    """Tests for find_due_on and find_upcoming."""

    def test_due_on_exact_date(self):
        credit = make_credit(AS_OF)

        assert [i.number for i in find_due_on(credit.installments, AS_OF)] == [1]
        assert find_due_on(credit.installments, AS_OF + timedelta(days=1)) == []

    def test_upcoming_window_is_inclusive(self):
        credit = make_credit(AS_OF + timedelta(days=7))

        assert [i.number for i in find_upcoming(credit.installments, AS_OF, 7)] == [1]
        assert find_upcoming(credit.installments, AS_OF, 6) == []

    def test_upcoming_skips_paid(self):
        credit = make_credit(AS_OF + timedelta(days=2))
        apply(credit, 300, AS_OF, PaymentMethod.CASH, "cashier")

        assert find_upcoming(credit.installments, AS_OF, 7) == []


class TestSummary:
    """Tests for summarize_overdue."""

    def test_summary_totals(self):
        first = make_credit(AS_OF - timedelta(days=40))
        second = make_credit(AS_OF - timedelta(days=3))

        summary = summarize_overdue(first.installments + second.installments, AS_OF)

        assert summary.as_of == AS_OF
        assert summary.installment_count == 3
        assert summary.credit_count == 2
        assert summary.pending_cents == 900

    def test_empty_summary(self):
        summary = summarize_overdue([], AS_OF)

        assert summary.installment_count == 0
        assert summary.credit_count == 0
        assert summary.pending_cents == 0
