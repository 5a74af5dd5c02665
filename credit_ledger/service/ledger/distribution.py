"""
Payment distribution engine.

Allocates an incoming payment across a credit's pending installments,
oldest due date first (ties broken by installment number). Each
installment receives ``min(remaining, pending)`` until the payment or
the pending installments run out. Whatever is left is reported back as
excess; it is never turned into a stored credit balance.

The allocation plan is computed and checked before anything is
mutated, so a failed call leaves the credit exactly as it was.
"""

from datetime import date, datetime
from typing import List, Optional, Tuple

from credit_ledger.domain.entities import (
    Credit,
    CreditState,
    Installment,
    Payment,
    PaymentAllocation,
    PaymentMethod,
    PaymentResult,
)
from credit_ledger.domain.exceptions import (
    AllocationInvariantError,
    CreditNotActiveError,
    InvalidAmountError,
)

from .aggregate import complete_if_settled, recompute_outstanding
from .settings import LedgerSettings, ledger_settings


def allocation_order(installments: List[Installment]) -> List[Installment]:
    """Pending installments in the order payments are applied to them."""
    pending = [inst for inst in installments if inst.pending_cents > 0]
    return sorted(pending, key=lambda inst: (inst.due_date, inst.number))


def plan_allocations(
    installments: List[Installment],
    amount_cents: int,
) -> Tuple[List[Tuple[Installment, int]], int]:
    """
    Work out how much of a payment goes to each installment.

    Returns:
        ``(plan, excess_cents)`` where plan is a list of
        ``(installment, amount)`` pairs in allocation order
    """
    plan: List[Tuple[Installment, int]] = []
    remaining = amount_cents

    for inst in allocation_order(installments):
        if remaining <= 0:
            break

        applied = min(remaining, inst.pending_cents)

        if inst.paid_cents + applied > inst.amount_cents:
            raise AllocationInvariantError(
                f"Allocating {applied} to installment {inst.number} would exceed "
                f"its original amount {inst.amount_cents}"
            )

        plan.append((inst, applied))
        remaining -= applied

    return plan, remaining


def apply(
    credit: Credit,
    amount_cents: int,
    paid_on: date,
    method: PaymentMethod,
    recorded_by: str,
    reference: Optional[str] = None,
    notes: Optional[str] = None,
    idempotency_key: Optional[str] = None,
    settings: LedgerSettings = ledger_settings,
) -> PaymentResult:
    """
    Apply a payment to a credit.

    Args:
        credit: The credit being paid, with its installments loaded
        amount_cents: Amount received, in cents
        paid_on: Date the payment was received
        method: Payment method
        recorded_by: User recording the payment
        reference: Optional external reference (voucher, transfer id)
        notes: Optional free-text notes
        idempotency_key: Optional caller-supplied deduplication key
        settings: Ledger settings (uses defaults if not provided)

    Returns:
        PaymentResult with the payment, its allocations and the new
        outstanding balance

    Raises:
        CreditNotActiveError: If the credit is not ACTIVE
        InvalidAmountError: If the amount is not positive, or exceeds
            the outstanding balance under the "reject" overpayment policy
        AllocationInvariantError: If the ledger would become inconsistent
    """
    if credit.state != CreditState.ACTIVE:
        raise CreditNotActiveError(str(credit.id), credit.state.value)

    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int) or amount_cents <= 0:
        raise InvalidAmountError()

    if settings.overpayment_policy == "reject" and amount_cents > credit.outstanding_cents:
        raise InvalidAmountError(
            f"Payment of {amount_cents} exceeds outstanding balance {credit.outstanding_cents}"
        )

    plan, excess_cents = plan_allocations(credit.installments, amount_cents)
    applied_cents = amount_cents - excess_cents

    payment = Payment(
        credit_id=credit.id,
        amount_cents=applied_cents,
        excess_cents=excess_cents,
        method=method,
        paid_on=paid_on,
        recorded_by=recorded_by,
        reference=reference,
        notes=notes,
        idempotency_key=idempotency_key,
    )

    for inst, applied in plan:
        inst.pending_cents -= applied
        inst.paid_cents += applied
        payment.allocations.append(
            PaymentAllocation(
                payment_id=payment.id,
                installment_id=inst.id,
                installment_number=inst.number,
                amount_cents=applied,
            )
        )

    if payment.allocated_cents != payment.amount_cents:
        raise AllocationInvariantError(
            f"Allocations do not sum to the applied amount {payment.amount_cents}"
        )

    credit.outstanding_cents = recompute_outstanding(credit.installments)
    complete_if_settled(credit)
    credit.updated_at = datetime.utcnow()

    return PaymentResult(
        payment=payment,
        outstanding_cents=credit.outstanding_cents,
        excess_cents=excess_cents,
        credit_state=credit.state,
        touched_installments=[inst for inst, _ in plan],
    )
