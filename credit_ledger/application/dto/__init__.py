"""Data Transfer Objects for application layer."""

from .credit import (
    CreateCreditRequest,
    CreditResponse,
    InstallmentDTO,
    OutstandingResponse,
)
from .payment import (
    AllocationDTO,
    ApplyPaymentRequest,
    PaymentDTO,
    PaymentResponse,
)
from .overdue import InstallmentListResponse, OverdueSummaryResponse

__all__ = [
    "CreateCreditRequest",
    "CreditResponse",
    "InstallmentDTO",
    "OutstandingResponse",
    "AllocationDTO",
    "ApplyPaymentRequest",
    "PaymentDTO",
    "PaymentResponse",
    "InstallmentListResponse",
    "OverdueSummaryResponse",
]
