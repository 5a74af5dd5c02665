"""
Credit aggregate rules.

The outstanding balance of a credit is always re-derivable from its
installments; the stored value is a cache that every mutation refreshes
through ``recompute_outstanding``.
"""

from datetime import date, datetime
from typing import Iterable, Optional

from credit_ledger.domain.entities import Credit, CreditState, Installment
from credit_ledger.domain.exceptions import (
    AllocationInvariantError,
    InvalidStateTransitionError,
)

from .status import is_overdue


def recompute_outstanding(installments: Iterable[Installment]) -> int:
    """Sum of pending amounts across installments."""
    return sum(inst.pending_cents for inst in installments)


def complete_if_settled(credit: Credit) -> bool:
    """
    Move an ACTIVE credit to COMPLETED once nothing is pending.

    Returns:
        True if the transition happened
    """
    if credit.state == CreditState.ACTIVE and credit.outstanding_cents == 0:
        credit.state = CreditState.COMPLETED
        return True
    return False


def void(
    credit: Credit,
    acting_user: str,
    reason: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Credit:
    """
    Void an active credit.

    Remaining pending amounts on every installment are zeroed so no
    further payments can be allocated. Amounts already paid are kept.

    Raises:
        InvalidStateTransitionError: If the credit is COMPLETED or already VOID
    """
    if credit.state != CreditState.ACTIVE:
        raise InvalidStateTransitionError(credit.state.value, CreditState.VOID.value)

    for inst in credit.installments:
        inst.pending_cents = 0

    timestamp = now or datetime.utcnow()
    credit.outstanding_cents = recompute_outstanding(credit.installments)
    credit.state = CreditState.VOID
    credit.voided_at = timestamp
    credit.voided_by = acting_user
    credit.void_reason = reason
    credit.updated_at = timestamp

    return credit


def assert_consistent(credit: Credit) -> None:
    """
    Check the ledger invariants of a credit.

    Raises:
        AllocationInvariantError: If the stored aggregate drifted from the
            installments or an installment's amounts are out of range
    """
    for inst in credit.installments:
        if not 0 <= inst.pending_cents <= inst.amount_cents:
            raise AllocationInvariantError(
                f"Installment {inst.number} pending amount {inst.pending_cents} "
                f"outside [0, {inst.amount_cents}]"
            )
        if inst.paid_cents > inst.amount_cents:
            raise AllocationInvariantError(
                f"Installment {inst.number} over-allocated: "
                f"{inst.paid_cents} > {inst.amount_cents}"
            )

    expected = recompute_outstanding(credit.installments)
    if credit.outstanding_cents != expected:
        raise AllocationInvariantError(
            f"Credit {credit.id} outstanding {credit.outstanding_cents} "
            f"does not match installments ({expected})"
        )

    if credit.state == CreditState.COMPLETED and expected != 0:
        raise AllocationInvariantError(
            f"Credit {credit.id} is completed with {expected} still pending"
        )


def paid_count(credit: Credit) -> int:
    return sum(1 for inst in credit.installments if inst.paid_cents == inst.amount_cents)


def pending_count(credit: Credit) -> int:
    return sum(1 for inst in credit.installments if inst.pending_cents > 0)


def overdue_count(credit: Credit, as_of: date) -> int:
    return sum(
        1
        for inst in credit.installments
        if is_overdue(inst.due_date, inst.pending_cents, as_of)
    )


def next_due_date(credit: Credit) -> Optional[date]:
    """Earliest due date among installments still carrying a balance."""
    pending = [inst.due_date for inst in credit.installments if inst.pending_cents > 0]
    return min(pending) if pending else None
