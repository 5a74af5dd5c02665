"""Credit-related Pydantic schemas."""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from credit_ledger.domain.entities import CreditState, PaymentMethod


class CreateCreditSchema(BaseModel):
    """Schema for POST /v1/credits request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "customer_document": "45678912",
                    "total_cents": 120000,
                    "installment_count": 3,
                    "sale_reference": "V-000123",
                    "start_date": "2025-09-01",
                }
            ]
        }
    )

    customer_document: str = Field(
        ...,
        min_length=8,
        max_length=11,
        description="National ID (8 digits) or tax ID (11 digits)",
        examples=["45678912"],
    )
    total_cents: int = Field(
        ...,
        gt=0,
        description="Amount financed in cents",
        examples=[120000],
    )
    installment_count: int = Field(
        ...,
        ge=1,
        description="Number of installments",
        examples=[3],
    )
    start_date: Optional[date] = Field(
        None,
        description="Credit start date (defaults to today)",
    )
    first_due_date: Optional[date] = Field(
        None,
        description="Due date of the first installment",
    )
    frequency: Literal["monthly", "fixed"] = Field(
        "monthly",
        description="Monthly due dates, or a fixed day interval",
    )
    interval_days: Optional[int] = Field(
        None,
        ge=1,
        description="Days between installments for a fixed frequency",
    )
    sale_reference: Optional[str] = Field(
        None,
        max_length=50,
        description="External sale number financed by this credit",
        examples=["V-000123"],
    )
    down_payment_cents: int = Field(
        0,
        ge=0,
        description="Amount paid at the counter, applied to the first installments",
    )
    down_payment_method: PaymentMethod = Field(
        PaymentMethod.CASH,
        description="Method of the down payment",
    )

    @field_validator("customer_document")
    @classmethod
    def validate_document(cls, v: str) -> str:
        """Documents are 8 or 11 digits."""
        v = v.strip()
        if not v.isdigit() or len(v) not in (8, 11):
            raise ValueError("customer_document must be 8 or 11 digits")
        return v


class VoidCreditSchema(BaseModel):
    """Schema for POST /v1/credits/{credit_id}/void request body."""

    reason: Optional[str] = Field(
        None,
        max_length=500,
        description="Why the credit is being voided",
        examples=["Sale cancelled at customer request"],
    )


class InstallmentSchema(BaseModel):
    """Schema for an installment with its derived state."""

    installment_id: str = Field(..., description="UUID of the installment")
    credit_id: str = Field(..., description="UUID of the owning credit")
    number: int = Field(..., ge=1, description="Position in the schedule")
    due_date: str = Field(
        ...,
        description="Due date in ISO 8601 format (YYYY-MM-DD)",
        examples=["2025-10-01"],
    )
    amount_cents: int = Field(..., description="Original installment amount in cents")
    paid_cents: int = Field(..., ge=0, description="Amount already allocated")
    pending_cents: int = Field(..., ge=0, description="Amount still owed")
    state: str = Field(
        ...,
        description="pending, partially_paid, paid, overdue or cancelled",
        examples=["pending"],
    )
    days_overdue: int = Field(..., ge=0)
    days_until_due: int = Field(..., ge=0)


class CreditResponseSchema(BaseModel):
    """Schema for a credit with its schedule."""

    credit_id: str = Field(..., description="UUID of the credit")
    customer_document: str
    customer_name: Optional[str] = None
    sale_reference: Optional[str] = None
    total_cents: int = Field(..., gt=0)
    outstanding_cents: int = Field(..., ge=0)
    paid_cents: int = Field(..., ge=0)
    installment_count: int
    installment_cents: int = Field(..., description="Base installment amount")
    paid_installments: int
    pending_installments: int
    overdue_installments: int
    state: str = Field(..., description="active, completed or void", examples=["active"])
    start_date: str
    next_due_date: Optional[str] = None
    created_by: Optional[str] = None
    created_at: str
    voided_at: Optional[str] = None
    voided_by: Optional[str] = None
    void_reason: Optional[str] = None
    installments: list[InstallmentSchema]


class InstallmentListSchema(BaseModel):
    """Schema for a list of installments as of a date."""

    as_of: str = Field(..., description="Reference date used for derived states")
    installments: list[InstallmentSchema]


class OutstandingSchema(BaseModel):
    """Schema for GET /v1/credits/outstanding response."""

    customer_document: Optional[str] = None
    outstanding_cents: int = Field(..., ge=0)


class CreditCountSchema(BaseModel):
    """Schema for GET /v1/credits/count response."""

    state: CreditState
    count: int = Field(..., ge=0)
