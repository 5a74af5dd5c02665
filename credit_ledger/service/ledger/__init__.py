"""
Credit installment ledger engine.

Pure functions over the domain entities: schedule generation, derived
installment status, payment distribution, credit aggregate rules and
due-date sweeps. No I/O happens here.
"""

from .settings import LedgerSettings, ledger_settings
from .status import (
    installment_state,
    is_overdue,
    days_overdue,
    days_until_due,
    is_due_soon,
)
from .schedule import (
    create_schedule,
    create_monthly_schedule,
    add_months,
    mark_overdue,
    split_amount,
)
from .aggregate import (
    recompute_outstanding,
    complete_if_settled,
    void,
    assert_consistent,
    paid_count,
    pending_count,
    overdue_count,
    next_due_date,
)
from .distribution import apply, allocation_order
from .sweep import (
    OverdueSummary,
    find_overdue,
    find_due_on,
    find_upcoming,
    summarize_overdue,
)

__all__ = [
    # Settings
    "LedgerSettings",
    "ledger_settings",
    # Status
    "installment_state",
    "is_overdue",
    "days_overdue",
    "days_until_due",
    "is_due_soon",
    # Schedule
    "create_schedule",
    "create_monthly_schedule",
    "add_months",
    "mark_overdue",
    "split_amount",
    # Aggregate
    "recompute_outstanding",
    "complete_if_settled",
    "void",
    "assert_consistent",
    "paid_count",
    "pending_count",
    "overdue_count",
    "next_due_date",
    # Distribution
    "apply",
    "allocation_order",
    # Sweep
    "OverdueSummary",
    "find_overdue",
    "find_due_on",
    "find_upcoming",
    "summarize_overdue",
]
