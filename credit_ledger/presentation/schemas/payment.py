"""Payment-related Pydantic schemas."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from credit_ledger.domain.entities import PaymentMethod


class ApplyPaymentSchema(BaseModel):
    """Schema for POST /v1/credits/{credit_id}/payments request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "amount_cents": 50000,
                    "method": "cash",
                    "reference": "REC-0042",
                }
            ]
        }
    )

    amount_cents: int = Field(
        ...,
        gt=0,
        description="Amount received in cents",
        examples=[50000],
    )
    method: PaymentMethod = Field(
        ...,
        description="How the payment was received",
        examples=["cash"],
    )
    paid_on: Optional[date] = Field(
        None,
        description="Date the payment was received (defaults to today)",
    )
    reference: Optional[str] = Field(
        None,
        max_length=100,
        description="Voucher or transfer reference",
    )
    notes: Optional[str] = Field(None, max_length=255)


class AllocationSchema(BaseModel):
    """Schema for the portion of a payment applied to one installment."""

    installment_id: str
    installment_number: int
    amount_cents: int = Field(..., gt=0)


class PaymentSchema(BaseModel):
    """Schema for a recorded payment."""

    payment_id: str = Field(..., description="UUID of the payment")
    credit_id: str
    amount_cents: int = Field(..., description="Amount applied to installments")
    excess_cents: int = Field(..., ge=0, description="Overpayment returned to the customer")
    received_cents: int = Field(..., description="Amount handed over")
    method: str
    paid_on: str
    recorded_by: str
    reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: str
    allocations: list[AllocationSchema]


class PaymentResponseSchema(BaseModel):
    """Schema for POST /v1/credits/{credit_id}/payments response."""

    payment: PaymentSchema
    outstanding_cents: int = Field(..., ge=0, description="Credit balance after the payment")
    excess_cents: int = Field(..., ge=0, description="Amount above the outstanding balance")
    credit_state: str = Field(..., examples=["active"])
    replayed: bool = Field(
        False,
        description="True when an idempotent retry returned a stored payment",
    )
