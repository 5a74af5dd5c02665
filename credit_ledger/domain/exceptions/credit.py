"""Credit-related domain exceptions."""

from .base import DomainException, NotFoundError


class CreditNotFoundError(NotFoundError):
    """Raised when a credit cannot be found."""

    def __init__(self, credit_id: str):
        super().__init__("Credit", credit_id, code="CREDIT_NOT_FOUND")
        self.credit_id = credit_id


class CreditNotActiveError(DomainException):
    """Raised when an operation needs an ACTIVE credit."""

    def __init__(self, credit_id: str, state: str):
        super().__init__(
            message=f"Credit {credit_id} is not active (state: {state})",
            code="CREDIT_NOT_ACTIVE",
        )
        self.credit_id = credit_id
        self.state = state


class InvalidStateTransitionError(DomainException):
    """Raised when a credit cannot move from its current state."""

    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Cannot transition credit from {current} to {target}",
            code="INVALID_STATE_TRANSITION",
        )
        self.current = current
        self.target = target


class InvalidScheduleError(DomainException):
    """Raised when installment schedule parameters are invalid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_SCHEDULE",
        )


class SaleAlreadyFinancedError(DomainException):
    """Raised when a sale reference already has a credit."""

    def __init__(self, sale_reference: str):
        super().__init__(
            message=f"Sale already financed: {sale_reference}",
            code="SALE_ALREADY_FINANCED",
        )
        self.sale_reference = sale_reference
