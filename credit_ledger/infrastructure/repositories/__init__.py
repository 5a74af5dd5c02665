"""Repository implementations."""

from .credit_repository import PostgresCreditRepository
from .payment_repository import PostgresPaymentRepository

__all__ = [
    "PostgresCreditRepository",
    "PostgresPaymentRepository",
]
