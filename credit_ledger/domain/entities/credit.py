"""Credit domain entity representing a financed sale."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from .installment import Installment


class CreditState(str, Enum):
    """Lifecycle state of a credit."""

    ACTIVE = "active"
    COMPLETED = "completed"
    VOID = "void"


@dataclass
class Credit:
    """
    A sale financed over multiple future payments.

    ``outstanding_cents`` is a stored aggregate that must always equal
    the sum of the installments' pending amounts. Only the payment
    distribution engine and the void transition mutate it.
    """

    customer_document: str
    total_cents: int
    start_date: date
    installments: List[Installment] = field(default_factory=list)
    outstanding_cents: Optional[int] = None
    state: CreditState = CreditState.ACTIVE
    customer_name: Optional[str] = None
    sale_reference: Optional[str] = None
    created_by: Optional[str] = None
    voided_at: Optional[datetime] = None
    voided_by: Optional[str] = None
    void_reason: Optional[str] = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        for inst in self.installments:
            if inst.credit_id is None:
                inst.credit_id = self.id
        if self.outstanding_cents is None:
            self.outstanding_cents = sum(i.pending_cents for i in self.installments)

    @property
    def installment_count(self) -> int:
        return len(self.installments)

    @property
    def installment_cents(self) -> int:
        """Base installment amount (the last one may carry the remainder)."""
        if not self.installments:
            return 0
        return self.installments[0].amount_cents

    @property
    def paid_cents(self) -> int:
        return sum(i.paid_cents for i in self.installments)

    @property
    def is_active(self) -> bool:
        return self.state == CreditState.ACTIVE

    @property
    def is_void(self) -> bool:
        return self.state == CreditState.VOID
