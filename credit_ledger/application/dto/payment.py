"""Data transfer objects for payment operations."""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from credit_ledger.domain.entities import Payment, PaymentMethod, PaymentResult


from .credit import format_timestamp


@dataclass(frozen=True)
class ApplyPaymentRequest:
    """Input data for applying a payment to a credit."""

    amount_cents: int
    method: PaymentMethod
    recorded_by: str
    paid_on: Optional[date] = None
    reference: Optional[str] = None
    notes: Optional[str] = None
    idempotency_key: Optional[str] = None

    def validate(self) -> List[str]:
        errors = []

        if not self.recorded_by or not self.recorded_by.strip():
            errors.append("recorded_by is required")

        if self.idempotency_key is not None and not self.idempotency_key.strip():
            errors.append("idempotency_key cannot be blank")

        return errors


@dataclass(frozen=True)
class AllocationDTO:
    """Portion of a payment applied to one installment."""

    installment_id: str
    installment_number: int
    amount_cents: int


@dataclass(frozen=True)
class PaymentDTO:
    """A recorded payment and where it went."""

    payment_id: str
    credit_id: str
    amount_cents: int
    excess_cents: int
    received_cents: int
    method: str
    paid_on: str
    recorded_by: str
    reference: Optional[str]
    notes: Optional[str]
    created_at: str
    allocations: List[AllocationDTO]

    @classmethod
    def from_entity(cls, payment: Payment) -> "PaymentDTO":
        return cls(
            payment_id=str(payment.id),
            credit_id=str(payment.credit_id),
            amount_cents=payment.amount_cents,
            excess_cents=payment.excess_cents,
            received_cents=payment.received_cents,
            method=payment.method.value,
            paid_on=payment.paid_on.isoformat(),
            recorded_by=payment.recorded_by,
            reference=payment.reference,
            notes=payment.notes,
            created_at=format_timestamp(payment.created_at),
            allocations=[
                AllocationDTO(
                    installment_id=str(a.installment_id),
                    installment_number=a.installment_number,
                    amount_cents=a.amount_cents,
                )
                for a in payment.allocations
            ],
        )


@dataclass(frozen=True)
class PaymentResponse:
    """Outcome of applying a payment."""

    payment: PaymentDTO
    outstanding_cents: int
    excess_cents: int
    credit_state: str
    replayed: bool

    @classmethod
    def from_result(cls, result: PaymentResult) -> "PaymentResponse":
        return cls(
            payment=PaymentDTO.from_entity(result.payment),
            outstanding_cents=result.outstanding_cents,
            excess_cents=result.excess_cents,
            credit_state=result.credit_state.value,
            replayed=result.replayed,
        )
