"""
Derived installment status.

An installment's state is never stored. It is recomputed from the
due date, the pending balance and the owning credit every time it is
read, so a late payment can never leave a stale OVERDUE flag behind.
"""

from datetime import date

from credit_ledger.domain.entities import Installment, InstallmentState


def is_overdue(due_date: date, pending_cents: int, as_of: date) -> bool:
    """True when the due date has passed and a balance is still pending."""
    return due_date < as_of and pending_cents > 0


def installment_state(
    installment: Installment,
    as_of: date,
    voided: bool = False,
) -> InstallmentState:
    """
    Compute the state of an installment as of a reference date.

    Args:
        installment: The installment to classify
        as_of: Reference date for the overdue check
        voided: Whether the owning credit has been voided

    Returns:
        The derived InstallmentState
    """
    if voided and installment.paid_cents < installment.amount_cents:
        return InstallmentState.CANCELLED

    if installment.is_settled:
        return InstallmentState.PAID

    if is_overdue(installment.due_date, installment.pending_cents, as_of):
        return InstallmentState.OVERDUE

    if installment.paid_cents > 0:
        return InstallmentState.PARTIALLY_PAID

    return InstallmentState.PENDING


def days_overdue(installment: Installment, as_of: date) -> int:
    """Days past the due date, 0 when not overdue."""
    if not is_overdue(installment.due_date, installment.pending_cents, as_of):
        return 0
    return (as_of - installment.due_date).days


def days_until_due(installment: Installment, as_of: date) -> int:
    """Days until the due date; negative once it has passed."""
    return (installment.due_date - as_of).days


def is_due_soon(installment: Installment, as_of: date, window_days: int) -> bool:
    """True for a pending installment falling due within the next window."""
    if installment.is_settled:
        return False
    remaining = days_until_due(installment, as_of)
    return 0 <= remaining <= window_days
