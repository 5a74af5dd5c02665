"""External API client implementations."""

from .customer_registry_client import (
    HttpCustomerRegistryClient,
    PassthroughCustomerRegistryClient,
)

__all__ = [
    "HttpCustomerRegistryClient",
    "PassthroughCustomerRegistryClient",
]
