"""Base domain exception."""


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Domain exceptions represent business rule violations or
    domain-specific error conditions.
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(DomainException):
    """Raised when a requested ledger record does not exist."""

    def __init__(self, kind: str, identifier: str, code: str = "NOT_FOUND"):
        super().__init__(
            message=f"{kind} not found: {identifier}",
            code=code,
        )
        self.identifier = identifier


class InvalidRequestError(DomainException):
    """Raised when a ledger request fails validation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_REQUEST",
        )
