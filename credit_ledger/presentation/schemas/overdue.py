"""Sweep-related Pydantic schemas."""

from pydantic import BaseModel, Field


class OverdueSummarySchema(BaseModel):
    """Schema for GET /v1/overdue/summary response."""

    as_of: str
    installment_count: int = Field(..., ge=0)
    credit_count: int = Field(..., ge=0)
    pending_cents: int = Field(..., ge=0, description="Total overdue amount")
