"""
Due-date sweep.

Pure read-side filters answering "what is overdue / falling due" as of
a reference date. The repository layer runs the same predicates in SQL;
these functions are used on loaded credits and in tests.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Optional

from credit_ledger.domain.entities import Installment

from .status import is_overdue


@dataclass(frozen=True)
class OverdueSummary:
    """Aggregate figures for overdue installments."""

    as_of: date
    installment_count: int
    credit_count: int
    pending_cents: int


def _by_due_date(installments: Iterable[Installment]) -> List[Installment]:
    return sorted(installments, key=lambda i: (i.due_date, str(i.credit_id), i.number))


def find_overdue(
    installments: Iterable[Installment],
    as_of: Optional[date] = None,
) -> List[Installment]:
    """Installments past due with a pending balance, oldest first. ``as_of`` defaults to today."""
    reference = as_of or date.today()
    return _by_due_date(
        inst
        for inst in installments
        if is_overdue(inst.due_date, inst.pending_cents, reference)
    )


def find_due_on(installments: Iterable[Installment], on: date) -> List[Installment]:
    """Pending installments falling due exactly on a date."""
    return _by_due_date(
        inst for inst in installments if inst.due_date == on and inst.pending_cents > 0
    )


def find_upcoming(
    installments: Iterable[Installment],
    as_of: date,
    days: int,
) -> List[Installment]:
    """Pending installments due between ``as_of`` and ``as_of + days`` inclusive."""
    until = as_of + timedelta(days=days)
    return _by_due_date(
        inst
        for inst in installments
        if as_of <= inst.due_date <= until and inst.pending_cents > 0
    )


def summarize_overdue(installments: Iterable[Installment], as_of: date) -> OverdueSummary:
    overdue = find_overdue(installments, as_of)
    return OverdueSummary(
        as_of=as_of,
        installment_count=len(overdue),
        credit_count=len({inst.credit_id for inst in overdue}),
        pending_cents=sum(inst.pending_cents for inst in overdue),
    )
