"""Data transfer objects for credit operations."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional

from credit_ledger.domain.entities import (
    Credit,
    Installment,
    InstallmentView,
    PaymentMethod,
)
from credit_ledger.service.ledger import (
    days_overdue,
    days_until_due,
    installment_state,
    next_due_date,
    overdue_count,
    paid_count,
    pending_count,
)


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO 8601 in UTC with a trailing Z, for naive or aware datetimes."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.replace(tzinfo=None) - (value.utcoffset() or timedelta(0))
    return value.isoformat() + "Z"


@dataclass(frozen=True)
class CreateCreditRequest:
    """Input data for opening a credit on a sale."""

    customer_document: str
    total_cents: int
    installment_count: int
    created_by: str
    start_date: Optional[date] = None
    first_due_date: Optional[date] = None
    interval_days: Optional[int] = None
    frequency: str = "monthly"
    sale_reference: Optional[str] = None
    down_payment_cents: int = 0
    down_payment_method: PaymentMethod = PaymentMethod.CASH

    def validate(self) -> List[str]:
        errors = []

        if not self.customer_document or not self.customer_document.strip():
            errors.append("customer_document is required")

        if not self.created_by or not self.created_by.strip():
            errors.append("created_by is required")

        if self.frequency not in ("monthly", "fixed"):
            errors.append("frequency must be 'monthly' or 'fixed'")

        if self.down_payment_cents < 0:
            errors.append("down_payment_cents cannot be negative")
        elif self.total_cents > 0 and self.down_payment_cents >= self.total_cents:
            errors.append("down_payment_cents must be lower than total_cents")

        return errors


@dataclass(frozen=True)
class InstallmentDTO:
    """Single installment with its state as of a reference date."""

    installment_id: str
    credit_id: str
    number: int
    due_date: str
    amount_cents: int
    paid_cents: int
    pending_cents: int
    state: str
    days_overdue: int
    days_until_due: int

    @classmethod
    def from_entity(
        cls,
        installment: Installment,
        as_of: date,
        voided: bool = False,
    ) -> "InstallmentDTO":
        state = installment_state(installment, as_of, voided=voided)
        return cls(
            installment_id=str(installment.id),
            credit_id=str(installment.credit_id),
            number=installment.number,
            due_date=installment.due_date.isoformat(),
            amount_cents=installment.amount_cents,
            paid_cents=installment.paid_cents,
            pending_cents=installment.pending_cents,
            state=state.value,
            days_overdue=days_overdue(installment, as_of),
            days_until_due=max(days_until_due(installment, as_of), 0),
        )

    @classmethod
    def from_view(cls, view: InstallmentView) -> "InstallmentDTO":
        installment = view.installment
        return cls(
            installment_id=str(installment.id),
            credit_id=str(installment.credit_id),
            number=installment.number,
            due_date=installment.due_date.isoformat(),
            amount_cents=installment.amount_cents,
            paid_cents=installment.paid_cents,
            pending_cents=installment.pending_cents,
            state=view.state.value,
            days_overdue=view.days_overdue,
            days_until_due=max(days_until_due(installment, view.as_of), 0),
        )


@dataclass(frozen=True)
class CreditResponse:
    """Response data for a credit and its schedule."""

    credit_id: str
    customer_document: str
    customer_name: Optional[str]
    sale_reference: Optional[str]
    total_cents: int
    outstanding_cents: int
    paid_cents: int
    installment_count: int
    installment_cents: int
    paid_installments: int
    pending_installments: int
    overdue_installments: int
    state: str
    start_date: str
    next_due_date: Optional[str]
    created_by: Optional[str]
    created_at: str
    voided_at: Optional[str]
    voided_by: Optional[str]
    void_reason: Optional[str]
    installments: List[InstallmentDTO]

    @classmethod
    def from_entity(cls, credit: Credit, as_of: date) -> "CreditResponse":
        next_due = next_due_date(credit)
        return cls(
            credit_id=str(credit.id),
            customer_document=credit.customer_document,
            customer_name=credit.customer_name,
            sale_reference=credit.sale_reference,
            total_cents=credit.total_cents,
            outstanding_cents=credit.outstanding_cents,
            paid_cents=credit.paid_cents,
            installment_count=credit.installment_count,
            installment_cents=credit.installment_cents,
            paid_installments=paid_count(credit),
            pending_installments=pending_count(credit),
            overdue_installments=overdue_count(credit, as_of) if credit.is_active else 0,
            state=credit.state.value,
            start_date=credit.start_date.isoformat(),
            next_due_date=next_due.isoformat() if next_due else None,
            created_by=credit.created_by,
            created_at=format_timestamp(credit.created_at),
            voided_at=format_timestamp(credit.voided_at),
            voided_by=credit.voided_by,
            void_reason=credit.void_reason,
            installments=[
                InstallmentDTO.from_entity(inst, as_of, voided=credit.is_void)
                for inst in credit.installments
            ],
        )


@dataclass(frozen=True)
class OutstandingResponse:
    """Outstanding balance across active credits."""

    customer_document: Optional[str]
    outstanding_cents: int
