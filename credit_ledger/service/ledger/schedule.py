"""
Installment schedule generation.

Splits a credit's total into installments. All arithmetic is done in
integer cents: every installment gets ``total // count`` and the final
installment also absorbs ``total % count`` so the schedule sums to the
total exactly.

Example:
    1000 cents over 3 installments -> [333, 333, 334]
"""

import calendar
from datetime import date, timedelta
from typing import Iterable, List
from uuid import UUID

from credit_ledger.domain.entities import Installment, InstallmentView
from credit_ledger.domain.exceptions import InvalidScheduleError

from .settings import LedgerSettings, ledger_settings
from .status import installment_state


def split_amount(total_cents: int, installment_count: int) -> List[int]:
    """Split a total into equal parts with the remainder on the last one."""
    base_amount = total_cents // installment_count
    remainder = total_cents % installment_count

    amounts = [base_amount] * installment_count
    amounts[-1] += remainder
    return amounts


def _validate(
    total_cents: int,
    installment_count: int,
    settings: LedgerSettings,
) -> None:
    if installment_count <= 0:
        raise InvalidScheduleError("installment_count must be at least 1")
    if total_cents <= 0:
        raise InvalidScheduleError("total amount must be positive")
    if installment_count > settings.max_installments:
        raise InvalidScheduleError(
            f"installment_count cannot exceed {settings.max_installments}"
        )
    if total_cents < installment_count:
        raise InvalidScheduleError(
            "total amount is too small to split into that many installments"
        )


def create_schedule(
    total_cents: int,
    installment_count: int,
    first_due_date: date,
    interval_days: int,
    credit_id: UUID | None = None,
    settings: LedgerSettings = ledger_settings,
) -> List[Installment]:
    """
    Build a fixed-interval installment schedule.

    Args:
        total_cents: Amount financed
        installment_count: Number of installments (1..max_installments)
        first_due_date: Due date of installment number 1
        interval_days: Days between consecutive due dates
        credit_id: Owning credit, if already known
        settings: Ledger settings (uses defaults if not provided)

    Returns:
        Installments numbered 1..N, ordered by due date

    Raises:
        InvalidScheduleError: If any parameter is out of range
    """
    _validate(total_cents, installment_count, settings)
    if interval_days < 1:
        raise InvalidScheduleError("interval_days must be at least 1")

    amounts = split_amount(total_cents, installment_count)

    return [
        Installment(
            number=i + 1,
            due_date=first_due_date + timedelta(days=i * interval_days),
            amount_cents=amount,
            credit_id=credit_id,
        )
        for i, amount in enumerate(amounts)
    ]


def add_months(start: date, months: int) -> date:
    """Advance a date by calendar months, clamping to the month's last day."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def create_monthly_schedule(
    total_cents: int,
    installment_count: int,
    first_due_date: date,
    credit_id: UUID | None = None,
    settings: LedgerSettings = ledger_settings,
) -> List[Installment]:
    """
    Build a schedule with one installment per calendar month.

    Same amount split as ``create_schedule``; due dates fall on the
    same day of each following month (clamped for short months).
    """
    _validate(total_cents, installment_count, settings)

    amounts = split_amount(total_cents, installment_count)

    return [
        Installment(
            number=i + 1,
            due_date=add_months(first_due_date, i),
            amount_cents=amount,
            credit_id=credit_id,
        )
        for i, amount in enumerate(amounts)
    ]


def mark_overdue(
    installments: Iterable[Installment],
    as_of: date,
    voided: bool = False,
) -> List[InstallmentView]:
    """
    Project installments into views carrying their state as of a date.

    Installments with a due date before ``as_of`` and a pending balance
    come back as OVERDUE. Nothing is mutated or persisted.
    """
    return [
        InstallmentView(
            installment=inst,
            state=installment_state(inst, as_of, voided=voided),
            as_of=as_of,
        )
        for inst in sorted(installments, key=lambda i: i.number)
    ]
