"""Payment-related domain exceptions."""

from .base import DomainException, NotFoundError


class PaymentNotFoundError(NotFoundError):
    """Raised when a payment cannot be found."""

    def __init__(self, payment_id: str):
        super().__init__("Payment", payment_id, code="PAYMENT_NOT_FOUND")
        self.payment_id = payment_id


class InvalidAmountError(DomainException):
    """Raised when a payment amount is not acceptable."""

    def __init__(self, message: str = "Payment amount must be positive"):
        super().__init__(
            message=message,
            code="INVALID_AMOUNT",
        )


class IdempotencyConflictError(DomainException):
    """Raised when an idempotency key is reused for a different payment."""

    def __init__(self, key: str):
        super().__init__(
            message=f"Idempotency key already used for a different payment: {key}",
            code="IDEMPOTENCY_CONFLICT",
        )
        self.key = key


class AllocationInvariantError(DomainException):
    """
    Raised when the ledger would become inconsistent.

    This signals a defect in the distribution engine, never a user
    error: an installment over-allocated, allocations that do not sum
    to the applied amount, or an outstanding aggregate that drifted.
    """

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="ALLOCATION_INVARIANT_VIOLATED",
        )
