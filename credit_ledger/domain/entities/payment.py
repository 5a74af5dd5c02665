"""Payment and allocation entities."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from .credit import CreditState
from .installment import Installment


class PaymentMethod(str, Enum):
    """How a payment was received."""

    CASH = "cash"
    CARD = "card"
    TRANSFER = "transfer"
    MOBILE_WALLET = "mobile_wallet"


@dataclass(frozen=True)
class PaymentAllocation:
    """The portion of a single payment applied to a single installment."""

    payment_id: UUID
    installment_id: UUID
    installment_number: int
    amount_cents: int
    id: UUID = field(default_factory=uuid4)


@dataclass
class Payment:
    """
    A payment received against a credit.

    ``amount_cents`` is what was applied to installments and always
    equals the sum of the allocations. Any overpayment is kept apart in
    ``excess_cents`` and never allocated.
    """

    credit_id: UUID
    amount_cents: int
    method: PaymentMethod
    paid_on: date
    recorded_by: str
    excess_cents: int = 0
    reference: Optional[str] = None
    notes: Optional[str] = None
    idempotency_key: Optional[str] = None
    allocations: List[PaymentAllocation] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def received_cents(self) -> int:
        """Total amount handed over by the customer."""
        return self.amount_cents + self.excess_cents

    @property
    def allocated_cents(self) -> int:
        return sum(a.amount_cents for a in self.allocations)


@dataclass
class PaymentResult:
    """Outcome of applying a payment to a credit."""

    payment: Payment
    outstanding_cents: int
    excess_cents: int
    credit_state: CreditState
    touched_installments: List[Installment] = field(default_factory=list)
    replayed: bool = False

    @property
    def allocations(self) -> List[PaymentAllocation]:
        return self.payment.allocations
