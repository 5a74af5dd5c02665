"""Application services (use cases)."""

from .credit_service import CreditService
from .payment_service import PaymentService
from .overdue_service import OverdueService

__all__ = [
    "CreditService",
    "PaymentService",
    "OverdueService",
]
