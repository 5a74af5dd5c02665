"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException, InvalidRequestError, NotFoundError
from .credit import (
    CreditNotActiveError,
    CreditNotFoundError,
    InvalidScheduleError,
    InvalidStateTransitionError,
    SaleAlreadyFinancedError,
)
from .payment import (
    AllocationInvariantError,
    IdempotencyConflictError,
    InvalidAmountError,
    PaymentNotFoundError,
)
from .customer import (
    CustomerNotFoundError,
    CustomerRegistryError,
    CustomerRegistryTimeoutError,
)

__all__ = [
    "DomainException",
    "NotFoundError",
    "InvalidRequestError",
    "CreditNotActiveError",
    "CreditNotFoundError",
    "InvalidScheduleError",
    "InvalidStateTransitionError",
    "SaleAlreadyFinancedError",
    "AllocationInvariantError",
    "IdempotencyConflictError",
    "InvalidAmountError",
    "PaymentNotFoundError",
    "CustomerNotFoundError",
    "CustomerRegistryError",
    "CustomerRegistryTimeoutError",
]
