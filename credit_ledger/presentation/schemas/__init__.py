"""Pydantic schemas for API request/response validation."""

from .credit import (
    CreateCreditSchema,
    VoidCreditSchema,
    InstallmentSchema,
    CreditResponseSchema,
    InstallmentListSchema,
    OutstandingSchema,
    CreditCountSchema,
)
from .payment import (
    ApplyPaymentSchema,
    AllocationSchema,
    PaymentSchema,
    PaymentResponseSchema,
)
from .overdue import OverdueSummarySchema
from .error import ErrorResponseSchema

__all__ = [
    "CreateCreditSchema",
    "VoidCreditSchema",
    "InstallmentSchema",
    "CreditResponseSchema",
    "InstallmentListSchema",
    "OutstandingSchema",
    "CreditCountSchema",
    "ApplyPaymentSchema",
    "AllocationSchema",
    "PaymentSchema",
    "PaymentResponseSchema",
    "OverdueSummarySchema",
    "ErrorResponseSchema",
]
