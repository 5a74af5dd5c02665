"""Customer registry domain exceptions."""

from .base import DomainException, NotFoundError


class CustomerRegistryError(DomainException):
    """Raised when the customer registry returns an error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            code="CUSTOMER_REGISTRY_ERROR",
        )
        self.status_code = status_code


class CustomerRegistryTimeoutError(CustomerRegistryError):
    """Raised when the customer registry times out."""

    def __init__(self):
        super().__init__(
            message="Customer registry request timed out",
            status_code=None,
        )
        self.code = "CUSTOMER_REGISTRY_TIMEOUT"


class CustomerNotFoundError(NotFoundError):
    """Raised when a document number is unknown to the registry."""

    def __init__(self, document_number: str):
        super().__init__("Customer", document_number, code="CUSTOMER_NOT_FOUND")
        self.document_number = document_number
