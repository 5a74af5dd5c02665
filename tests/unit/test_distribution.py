"""
Unit tests for the payment distribution engine.

These tests verify:
1. Oldest-first allocation with partial payments
2. Exact and over-payments, excess reporting and completion
3. Rejections leave the credit untouched
4. Overpayment policy
5. Ledger invariants after every application
"""

import pytest
from datetime import date, timedelta

from credit_ledger.domain.entities import (
    Credit,
    CreditState,
    Installment,
    PaymentMethod,
)
from credit_ledger.domain.exceptions import (
    AllocationInvariantError,
    CreditNotActiveError,
    InvalidAmountError,
)
from credit_ledger.service.ledger import (
    LedgerSettings,
    allocation_order,
    apply,
    assert_consistent,
    create_schedule,
    recompute_outstanding,
    void,
)
from credit_ledger.service.ledger.distribution import plan_allocations


PAID_ON = date(2025, 2, 1)


def make_credit(amounts: list[int], first_due: date = date(2025, 1, 10)) -> Credit:
    """Build an active credit with the given installment amounts, 30 days apart."""
    installments = [
        Installment(
            number=i + 1,
            due_date=first_due + timedelta(days=30 * i),
            amount_cents=amount,
        )
        for i, amount in enumerate(amounts)
    ]
    return Credit(
        customer_document="45678912",
        total_cents=sum(amounts),
        start_date=first_due - timedelta(days=30),
        installments=installments,
    )


def pay(credit: Credit, amount: int, **kwargs):
    return apply(
        credit,
        amount,
        paid_on=PAID_ON,
        method=PaymentMethod.CASH,
        recorded_by="cashier",
        **kwargs,
    )


# =============================================================================
# Allocation Order
# =============================================================================

class TestAllocationOrder:
    """Tests for allocation ordering."""

    def test_orders_by_due_date_then_number(self):
        same_day = date(2025, 1, 10)
        installments = [
            Installment(number=3, due_date=date(2025, 3, 10), amount_cents=100),
            Installment(number=2, due_date=same_day, amount_cents=100),
            Installment(number=1, due_date=same_day, amount_cents=100),
        ]

        ordered = allocation_order(installments)

        assert [i.number for i in ordered] == [1, 2, 3]

    def test_skips_settled_installments(self):
        credit = make_credit([300, 300])
        credit.installments[0].paid_cents = 300
        credit.installments[0].pending_cents = 0

        assert [i.number for i in allocation_order(credit.installments)] == [2]

    def test_plan_reports_excess(self):
        credit = make_credit([300, 300])

        plan, excess = plan_allocations(credit.installments, 700)

        assert [amount for _, amount in plan] == [300, 300]
        assert excess == 100


# =============================================================================
# Applying Payments
# =============================================================================

class TestApply:
    """Tests for apply()."""

    def test_partial_payment_spans_oldest_installments(self):
        credit = make_credit([300, 300, 400])

        result = pay(credit, 500)

        first, second, third = credit.installments
        assert (first.paid_cents, first.pending_cents) == (300, 0)
        assert (second.paid_cents, second.pending_cents) == (200, 100)
        assert (third.paid_cents, third.pending_cents) == (0, 400)
        assert result.outstanding_cents == 500
        assert result.excess_cents == 0
        assert credit.state == CreditState.ACTIVE

    def test_allocations_record_where_money_went(self):
        credit = make_credit([300, 300, 400])

        result = pay(credit, 500)

        assert [(a.installment_number, a.amount_cents) for a in result.allocations] == [
            (1, 300),
            (2, 200),
        ]
        assert sum(a.amount_cents for a in result.allocations) == result.payment.amount_cents

    def test_exact_installment_payment_settles_only_that_one(self):
        credit = make_credit([333, 333, 334])

        result = pay(credit, 333)

        assert [i.pending_cents for i in credit.installments] == [0, 333, 334]
        assert len(result.allocations) == 1
        assert result.outstanding_cents == 667

    def test_overpayment_reports_excess_and_completes(self):
        credit = make_credit([300, 300, 400])

        result = pay(credit, 1250)

        assert result.excess_cents == 250
        assert result.payment.amount_cents == 1000
        assert result.payment.excess_cents == 250
        assert result.payment.received_cents == 1250
        assert result.outstanding_cents == 0
        assert credit.state == CreditState.COMPLETED
        assert result.credit_state == CreditState.COMPLETED

    def test_exact_full_payment_completes_without_excess(self):
        credit = make_credit([500, 500])

        result = pay(credit, 1000)

        assert result.excess_cents == 0
        assert credit.state == CreditState.COMPLETED

    def test_successive_payments_continue_where_previous_left(self):
        credit = make_credit([300, 300, 400])

        pay(credit, 500)
        result = pay(credit, 200)

        assert [(a.installment_number, a.amount_cents) for a in result.allocations] == [
            (2, 100),
            (3, 100),
        ]
        assert credit.outstanding_cents == 300

    def test_touched_installments_reported(self):
        credit = make_credit([300, 300, 400])

        result = pay(credit, 350)

        assert [i.number for i in result.touched_installments] == [1, 2]

    def test_payment_carries_request_details(self):
        credit = make_credit([1000])

        result = pay(credit, 100, reference="REC-1", notes="counter", idempotency_key="k-1")

        payment = result.payment
        assert payment.credit_id == credit.id
        assert payment.recorded_by == "cashier"
        assert payment.reference == "REC-1"
        assert payment.idempotency_key == "k-1"
        assert payment.paid_on == PAID_ON


# =============================================================================
# Rejections
# =============================================================================

class TestRejections:
    """A rejected payment must not change anything."""

    @pytest.mark.parametrize("amount", [0, -100])
    def test_non_positive_amount_rejected(self, amount: int):
        credit = make_credit([300, 300, 400])

        with pytest.raises(InvalidAmountError):
            pay(credit, amount)

        assert credit.outstanding_cents == 1000

    def test_void_credit_rejects_payment_without_change(self):
        credit = make_credit([300, 300, 400])
        pay(credit, 100)
        void(credit, "manager")
        snapshot = [(i.paid_cents, i.pending_cents) for i in credit.installments]

        with pytest.raises(CreditNotActiveError):
            pay(credit, 500)

        assert [(i.paid_cents, i.pending_cents) for i in credit.installments] == snapshot
        assert credit.outstanding_cents == 0
        assert credit.state == CreditState.VOID

    def test_completed_credit_rejects_payment(self):
        credit = make_credit([500])
        pay(credit, 500)

        with pytest.raises(CreditNotActiveError):
            pay(credit, 1)

    def test_reject_policy_refuses_overpayment(self):
        credit = make_credit([300, 300])
        settings = LedgerSettings(overpayment_policy="reject")

        with pytest.raises(InvalidAmountError):
            pay(credit, 601, settings=settings)

        assert credit.outstanding_cents == 600
        assert all(i.paid_cents == 0 for i in credit.installments)

    def test_reject_policy_accepts_exact_balance(self):
        credit = make_credit([300, 300])
        settings = LedgerSettings(overpayment_policy="reject")

        result = pay(credit, 600, settings=settings)

        assert result.excess_cents == 0
        assert credit.state == CreditState.COMPLETED

    def test_corrupted_installment_raises_invariant_error(self):
        credit = make_credit([300, 300])
        credit.installments[0].paid_cents = 250  # pending still 300

        with pytest.raises(AllocationInvariantError):
            pay(credit, 100)

        assert credit.installments[0].pending_cents == 300


# =============================================================================
# Invariants
# =============================================================================

class TestInvariants:
    """Outstanding always equals the sum of pending amounts."""

    @pytest.mark.parametrize("payments", [[1], [999, 1], [250, 250, 250, 250], [2000]])
    def test_outstanding_matches_pending_after_each_payment(self, payments: list[int]):
        credit = Credit(
            customer_document="45678912",
            total_cents=1000,
            start_date=date(2025, 1, 1),
            installments=create_schedule(1000, 3, date(2025, 2, 1), 30),
        )

        for amount in payments:
            if credit.state != CreditState.ACTIVE:
                break
            pay(credit, amount)
            assert credit.outstanding_cents == recompute_outstanding(credit.installments)
            assert_consistent(credit)

    def test_allocations_never_exceed_installment_amount(self):
        credit = make_credit([300, 300, 400])

        for amount in (120, 480, 50, 1000):
            if credit.state != CreditState.ACTIVE:
                break
            pay(credit, amount)

        for inst in credit.installments:
            assert 0 <= inst.pending_cents <= inst.amount_cents
            assert inst.paid_cents + inst.pending_cents == inst.amount_cents
