"""
Unit tests for credit aggregate rules.

These tests verify:
1. Outstanding recomputation
2. The void transition and its guards
3. Consistency checks and installment counters
"""

import pytest
from datetime import date, datetime

from credit_ledger.domain.entities import Credit, CreditState, PaymentMethod
from credit_ledger.domain.exceptions import (
    AllocationInvariantError,
    InvalidStateTransitionError,
)
from credit_ledger.service.ledger import (
    apply,
    assert_consistent,
    complete_if_settled,
    create_schedule,
    next_due_date,
    overdue_count,
    paid_count,
    pending_count,
    recompute_outstanding,
    void,
)


def make_credit(total: int = 1000, count: int = 3) -> Credit:
    return Credit(
        customer_document="20123456789",
        total_cents=total,
        start_date=date(2025, 1, 1),
        installments=create_schedule(total, count, date(2025, 2, 1), 30),
        created_by="seller",
    )


# =============================================================================
# Outstanding
# =============================================================================

class TestOutstanding:
    """Tests for recompute_outstanding."""

    def test_new_credit_owes_full_total(self):
        credit = make_credit()

        assert credit.outstanding_cents == 1000
        assert recompute_outstanding(credit.installments) == 1000

    def test_recompute_is_idempotent(self):
        credit = make_credit()
        apply(credit, 400, date(2025, 2, 1), PaymentMethod.CARD, "cashier")

        first = recompute_outstanding(credit.installments)
        second = recompute_outstanding(credit.installments)

        assert first == second == 600

    def test_installments_inherit_credit_id(self):
        credit = make_credit()

        assert all(inst.credit_id == credit.id for inst in credit.installments)


# =============================================================================
# Void
# =============================================================================

class TestVoid:
    """Tests for the ACTIVE -> VOID transition."""

    def test_void_zeroes_pending_and_outstanding(self):
        credit = make_credit()

        void(credit, "manager", reason="sale returned")

        assert credit.state == CreditState.VOID
        assert credit.outstanding_cents == 0
        assert all(inst.pending_cents == 0 for inst in credit.installments)

    def test_void_records_who_and_why(self):
        credit = make_credit()
        now = datetime(2025, 3, 1, 12, 0, 0)

        void(credit, "manager", reason="sale returned", now=now)

        assert credit.voided_by == "manager"
        assert credit.void_reason == "sale returned"
        assert credit.voided_at == now

    def test_void_keeps_amounts_already_paid(self):
        credit = make_credit()
        apply(credit, 500, date(2025, 2, 1), PaymentMethod.CASH, "cashier")

        void(credit, "manager")

        assert credit.paid_cents == 500

    def test_void_from_completed_is_rejected(self):
        credit = make_credit()
        apply(credit, 1000, date(2025, 2, 1), PaymentMethod.CASH, "cashier")

        with pytest.raises(InvalidStateTransitionError):
            void(credit, "manager")

        assert credit.state == CreditState.COMPLETED

    def test_void_twice_is_rejected(self):
        credit = make_credit()
        void(credit, "manager")

        with pytest.raises(InvalidStateTransitionError):
            void(credit, "manager")


# =============================================================================
# Consistency and Counters
# =============================================================================

class TestConsistency:
    """Tests for assert_consistent and the counting helpers."""

    def test_consistent_credit_passes(self):
        credit = make_credit()
        apply(credit, 700, date(2025, 2, 1), PaymentMethod.CASH, "cashier")

        assert_consistent(credit)

    def test_drifted_outstanding_detected(self):
        credit = make_credit()
        credit.outstanding_cents = 999

        with pytest.raises(AllocationInvariantError):
            assert_consistent(credit)

    def test_negative_pending_detected(self):
        credit = make_credit()
        credit.installments[0].pending_cents = -1
        credit.outstanding_cents = recompute_outstanding(credit.installments)

        with pytest.raises(AllocationInvariantError):
            assert_consistent(credit)

    def test_completed_with_balance_detected(self):
        credit = make_credit()
        credit.state = CreditState.COMPLETED

        with pytest.raises(AllocationInvariantError):
            assert_consistent(credit)

    def test_complete_if_settled_only_at_zero(self):
        credit = make_credit()

        assert complete_if_settled(credit) is False
        assert credit.state == CreditState.ACTIVE

        for inst in credit.installments:
            inst.paid_cents, inst.pending_cents = inst.amount_cents, 0
        credit.outstanding_cents = 0

        assert complete_if_settled(credit) is True
        assert credit.state == CreditState.COMPLETED

    def test_counters(self):
        credit = make_credit()
        apply(credit, 400, date(2025, 2, 1), PaymentMethod.CASH, "cashier")

        assert paid_count(credit) == 1
        assert pending_count(credit) == 2
        assert overdue_count(credit, date(2025, 3, 15)) == 1
        assert next_due_date(credit) == date(2025, 3, 3)

    def test_partial_payment_then_void_counts_no_paid_installment(self):
        credit = make_credit()
        apply(credit, 100, date(2025, 2, 1), PaymentMethod.CASH, "cashier")

        void(credit, "manager")

        assert paid_count(credit) == 0
        assert pending_count(credit) == 0

    def test_fully_paid_installment_still_counted_after_void(self):
        credit = make_credit()
        apply(credit, 400, date(2025, 2, 1), PaymentMethod.CASH, "cashier")

        void(credit, "manager")

        assert paid_count(credit) == 1

    def test_next_due_date_none_when_settled(self):
        credit = make_credit()
        apply(credit, 1000, date(2025, 2, 1), PaymentMethod.CASH, "cashier")

        assert next_due_date(credit) is None
