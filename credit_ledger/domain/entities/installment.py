"""Installment domain entity."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from uuid import UUID, uuid4


class InstallmentState(str, Enum):
    """
    Read-side state of an installment.

    Never persisted: it is derived from the due date, the pending
    amount and the owning credit's state every time it is read.
    """

    PENDING = "pending"
    PARTIALLY_PAID = "partially_paid"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


@dataclass
class Installment:
    """One scheduled partial payment of a credit."""

    number: int
    due_date: date
    amount_cents: int
    credit_id: UUID | None = None
    pending_cents: int | None = None
    paid_cents: int = 0
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        if self.pending_cents is None:
            self.pending_cents = self.amount_cents - self.paid_cents

    @property
    def is_settled(self) -> bool:
        return self.pending_cents == 0


@dataclass(frozen=True)
class InstallmentView:
    """An installment paired with its state as of a reference date."""

    installment: Installment
    state: InstallmentState
    as_of: date

    @property
    def days_overdue(self) -> int:
        if self.state != InstallmentState.OVERDUE:
            return 0
        return (self.as_of - self.installment.due_date).days
